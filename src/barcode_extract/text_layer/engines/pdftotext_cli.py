from __future__ import annotations

import logging
import subprocess
from pathlib import Path

from ...contracts import CoordinateSpace, Page, WordRecord
from ...errors import EngineNotInstalledError, TextLayerError
from ..merge import parse_tsv_words
from .base import TextLayerEngine

logger = logging.getLogger(__name__)


class PdftotextTsvEngine(TextLayerEngine):
    """
    Embedded PDF text layer via poppler's `pdftotext -tsv`.

    Coordinates are PDF points with a top-left origin.
    """

    coordinate_space = CoordinateSpace.LAYOUT

    def __init__(self, *, timeout_s: float | None = None) -> None:
        self.timeout_s = timeout_s

    def backend_id(self) -> str:
        return "pdftotext"

    def extract_words(self, *, pdf_file: Path, pages: list[Page], work_dir: Path) -> list[WordRecord]:
        if not pages:
            return []

        page_ids = sorted(p.id for p in pages)
        tsv_file = work_dir / "text.tsv"
        cmd = [
            "pdftotext",
            "-tsv",
            "-f",
            str(page_ids[0]),
            "-l",
            str(page_ids[-1]),
            str(pdf_file),
            str(tsv_file),
        ]

        try:
            proc = subprocess.run(cmd, check=False, capture_output=True, text=True, timeout=self.timeout_s)
        except FileNotFoundError:
            raise EngineNotInstalledError(
                "pdftotext binary not found on PATH",
                detail={"expected_command": "pdftotext"},
            ) from None
        except subprocess.TimeoutExpired:
            raise TextLayerError("pdftotext timed out", code="TEXT_LAYER_TIMEOUT", detail={"timeout_s": self.timeout_s}) from None

        if proc.returncode != 0:
            raise TextLayerError(
                "pdftotext returned a non-zero exit code",
                detail={"returncode": proc.returncode, "stderr": proc.stderr[-4000:]},
            )

        words = parse_tsv_words(tsv_file.read_text(encoding="utf-8", errors="replace"))
        logger.debug("pdftotext produced %d words for pages %d-%d", len(words), page_ids[0], page_ids[-1])
        return words
