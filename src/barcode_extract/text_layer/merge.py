from __future__ import annotations

import csv
from dataclasses import dataclass
from typing import Iterable

from ..contracts import BBox, TextLine, WordRecord

# TSV levels (poppler and tesseract): 1=page, 2=block/flow, 3=paragraph, 4=line, 5=word
WORD_LEVEL = 5


def _int(row: dict[str, str], key: str, default: int = 0) -> int:
    return int(float(row.get(key, "") or default))


def parse_tsv_words(tsv: str) -> list[WordRecord]:
    """
    Parse a `pdftotext -tsv` / `tesseract ... tsv` dump into word records.

    Rows above word level and rows with malformed geometry are dropped.
    Input order is preserved.
    """

    words: list[WordRecord] = []
    reader = csv.DictReader(tsv.splitlines(), delimiter="\t", quoting=csv.QUOTE_NONE)
    for row in reader:
        try:
            level = _int(row, "level", default=-1)
        except ValueError:
            continue
        if level < WORD_LEVEL:
            continue

        text = (row.get("text") or "").strip()
        if text == "":
            continue

        try:
            conf_str = row.get("conf", "") or ""
            word = WordRecord(
                level=level,
                page=_int(row, "page_num", default=1),
                paragraph=_int(row, "par_num"),
                block=_int(row, "block_num"),
                line=_int(row, "line_num"),
                word=_int(row, "word_num"),
                x=float(row.get("left", "") or 0),
                y=float(row.get("top", "") or 0),
                w=float(row.get("width", "") or 0),
                h=float(row.get("height", "") or 0),
                conf=float(conf_str) if conf_str != "" else None,
                text=text,
            )
        except ValueError:
            continue
        words.append(word)
    return words


@dataclass(slots=True)
class _LineBuilder:
    page: int
    words: list[str]
    bbox: BBox


def merge_text_lines(words: Iterable[WordRecord]) -> list[TextLine]:
    """
    Merge word records sharing (level, page, paragraph, block, line) into
    text lines, in first-seen order. The line box keeps the first word's
    top-left corner and grows to the max right/bottom edge.
    """

    builders: dict[tuple[int, int, int, int, int], _LineBuilder] = {}
    for w in words:
        key = w.line_key()
        builder = builders.get(key)
        if builder is None:
            builders[key] = _LineBuilder(
                page=w.page,
                words=[w.text],
                bbox=BBox(x0=w.x, y0=w.y, x1=w.x + w.w, y1=w.y + w.h),
            )
        else:
            builder.words.append(w.text)
            builder.bbox = builder.bbox.grow(x1=w.x + w.w, y1=w.y + w.h)

    return [TextLine(page=b.page, text=" ".join(b.words), bbox=b.bbox) for b in builders.values()]


def lines_for_page(lines: list[TextLine], page_id: int) -> list[TextLine]:
    return [line for line in lines if line.page == page_id]
