from __future__ import annotations

import dataclasses
import logging
import subprocess
from pathlib import Path

from ...contracts import CoordinateSpace, Page, WordRecord
from ...errors import EngineNotInstalledError, TextLayerError
from ..merge import parse_tsv_words
from .base import TextLayerEngine

logger = logging.getLogger(__name__)


class TesseractTsvEngine(TextLayerEngine):
    """
    OCR text lines via the `tesseract` CLI, parsed from TSV output.

    Used for scanned documents without an embedded text layer. Each page
    image is recognized separately; coordinates are image pixels.
    """

    coordinate_space = CoordinateSpace.PIXEL

    def __init__(self, *, language: str = "eng", psm: int | None = None, timeout_s: float = 120.0) -> None:
        self.language = language
        self.psm = psm
        self.timeout_s = timeout_s

    def backend_id(self) -> str:
        return "tesseract"

    def _run(self, image_file: Path) -> str:
        cmd = ["tesseract", str(image_file), "stdout", "-l", self.language]
        if self.psm is not None:
            cmd.extend(["--psm", str(self.psm)])
        # Request TSV output (word-level rows include bounding boxes + conf + text).
        cmd.append("tsv")

        try:
            proc = subprocess.run(cmd, check=False, capture_output=True, text=True, timeout=self.timeout_s)
        except FileNotFoundError:
            raise EngineNotInstalledError(
                "tesseract binary not found on PATH",
                detail={"expected_command": "tesseract"},
            ) from None
        except subprocess.TimeoutExpired:
            raise TextLayerError("OCR backend timed out", code="TEXT_LAYER_TIMEOUT", detail={"timeout_s": self.timeout_s}) from None

        if proc.returncode != 0:
            raise TextLayerError(
                "OCR backend returned a non-zero exit code",
                detail={"returncode": proc.returncode, "stderr": proc.stderr[-4000:]},
            )
        return proc.stdout

    def extract_words(self, *, pdf_file: Path, pages: list[Page], work_dir: Path) -> list[WordRecord]:
        words: list[WordRecord] = []
        for page in sorted(pages, key=lambda p: p.id):
            # tesseract numbers every single-image run as page 1
            page_words = [dataclasses.replace(w, page=page.id) for w in parse_tsv_words(self._run(page.image_file))]
            logger.debug("tesseract produced %d words on page %d", len(page_words), page.id)
            words.extend(page_words)
        return words
