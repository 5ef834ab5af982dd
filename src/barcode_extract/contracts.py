from __future__ import annotations

import base64
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Union


class KnownFormat(str, Enum):
    """
    Barcode formats with a regeneration recipe.

    Any other decoder format tag is carried through as a plain string and
    treated as unknown.
    """

    CODE128 = "code128"
    QRCODE = "qrcode"
    DATAMATRIX = "datamatrix"


class CoordinateSpace(str, Enum):
    LAYOUT = "layout"  # PDF points, reconciled against the page size
    PIXEL = "pixel"  # already in rasterized page pixels


@dataclass(frozen=True, slots=True)
class BBox:
    """
    Axis-aligned box, (x0, y0) top-left and (x1, y1) bottom-right.

    Pixel-space boxes hold ints; layout-space boxes may hold floats.
    """

    x0: float
    y0: float
    x1: float
    y1: float

    def width(self) -> float:
        return self.x1 - self.x0

    def height(self) -> float:
        return self.y1 - self.y0

    def center(self) -> tuple[int, int]:
        # Half extents are truncated to whole pixels.
        return (
            int(self.x0 + int(self.width()) // 2),
            int(self.y0 + int(self.height()) // 2),
        )

    def contains(self, other: "BBox") -> bool:
        return other.x0 >= self.x0 and other.x1 <= self.x1 and other.y0 >= self.y0 and other.y1 <= self.y1

    def grow(self, *, x1: float, y1: float) -> "BBox":
        return BBox(x0=self.x0, y0=self.y0, x1=max(self.x1, x1), y1=max(self.y1, y1))

    @staticmethod
    def from_points(points: list[tuple[float, float]]) -> "BBox":
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        return BBox(x0=min(xs), y0=min(ys), x1=max(xs), y1=max(ys))

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "BBox":
        return BBox(x0=d["x0"], y0=d["y0"], x1=d["x1"], y1=d["y1"])

    def to_dict(self) -> dict[str, Any]:
        return {"x0": self.x0, "y0": self.y0, "x1": self.x1, "y1": self.y1}


@dataclass(frozen=True, slots=True)
class Size:
    width: float
    height: float

    def to_dict(self) -> dict[str, Any]:
        return {"width": self.width, "height": self.height}


@dataclass(frozen=True, slots=True)
class Page:
    """
    One rasterized page.

    `pixel_size` comes from rendering at a fixed target resolution and is
    independent of `layout_size` (PDF points); the two are reconciled with
    per-axis scale factors.
    """

    id: int  # 1-indexed
    pixel_size: Size
    layout_size: Size | None
    rotation: float
    image_file: Path


@dataclass(frozen=True, slots=True)
class WordRecord:
    """Single word-level row of a text-layer TSV dump."""

    level: int
    page: int
    paragraph: int
    block: int
    line: int
    word: int
    x: float
    y: float
    w: float
    h: float
    conf: float | None
    text: str

    def line_key(self) -> tuple[int, int, int, int, int]:
        return (self.level, self.page, self.paragraph, self.block, self.line)


@dataclass(frozen=True, slots=True)
class TextLine:
    page: int
    text: str
    bbox: BBox

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "bbox": self.bbox.to_dict()}


@dataclass(frozen=True, slots=True)
class NotVerified:
    """No raw bytes: strict verification was not requested, not eligible, or missed."""


@dataclass(frozen=True, slots=True)
class Verified:
    raw_bytes: bytes


Verification = Union[NotVerified, Verified]


@dataclass(slots=True)
class BarcodeDetection:
    """
    One decoded code on a page.

    Created by the primary detector; `verification`, the rendered outputs,
    `strict` and `label` are filled in by the later pipeline steps. `bbox`
    always comes from the primary decoder.
    """

    format: str
    text: str
    bbox: BBox
    is_valid: bool = True
    content_bytes: bytes | None = None
    reader_init: bool = False
    ec_level: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)
    verification: Verification = field(default_factory=NotVerified)
    strict: bool = False
    label: str | None = None
    source_png: bytes | None = None
    rendered_png: bytes | None = None
    rendered_svg: str | None = None

    @property
    def raw_bytes(self) -> bytes | None:
        if isinstance(self.verification, Verified):
            return self.verification.raw_bytes
        return None

    def to_dict(self) -> dict[str, Any]:
        data = self.raw_bytes if self.raw_bytes is not None else self.content_bytes
        return {
            "text": self.text,
            "data": _b64(data),
            "bbox": self.bbox.to_dict(),
            "label": self.label,
            "format": self.format,
            "strict": self.strict,
            "source": {"png": _b64(self.source_png)},
            "output": {"png": _b64(self.rendered_png), "svg": self.rendered_svg},
        }


@dataclass(frozen=True, slots=True)
class PageResult:
    id: int
    file: str  # rasterized page image filename
    text: str
    size: Size
    barcodes: list[BarcodeDetection]
    text_lines: list[TextLine]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "file": self.file,
            "text": self.text,
            "size": self.size.to_dict(),
            "barcodes": [b.to_dict() for b in self.barcodes],
            "textLines": [t.to_dict() for t in self.text_lines],
        }


@dataclass(frozen=True, slots=True)
class DocumentHeader:
    file: str
    strict: bool
    timestamp: str
    pages: int

    def to_dict(self) -> dict[str, Any]:
        return {"file": self.file, "strict": self.strict, "timestamp": self.timestamp, "pages": self.pages}


@dataclass(frozen=True, slots=True)
class DocumentResult:
    common: DocumentHeader
    pages: dict[int, PageResult]  # ascending page id, pages without barcodes are absent

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"common": self.common.to_dict()}
        for page_id in sorted(self.pages):
            out[f"page:{page_id}"] = self.pages[page_id].to_dict()
        return out


def _b64(data: bytes | None) -> str | None:
    if data is None:
        return None
    return base64.b64encode(data).decode("ascii")
