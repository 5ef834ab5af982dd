from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from ...contracts import CoordinateSpace, Page, WordRecord


class TextLayerEngine(ABC):
    """
    Word-level text extraction.

    Engines return literal words with their geometry in `coordinate_space`
    units. Merging into lines happens outside the engine.
    """

    coordinate_space: CoordinateSpace = CoordinateSpace.LAYOUT

    @abstractmethod
    def backend_id(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def extract_words(self, *, pdf_file: Path, pages: list[Page], work_dir: Path) -> list[WordRecord]:
        """Word records for `pages` (ascending page id), in reading order per page."""
        raise NotImplementedError
