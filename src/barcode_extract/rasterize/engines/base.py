from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from ...contracts import Size


@dataclass(frozen=True, slots=True)
class PageGeometry:
    layout_size: Size  # PDF points, as displayed (after /Rotate)
    rotation: float  # degrees


@dataclass(frozen=True, slots=True)
class DocumentInfo:
    page_count: int
    pages: dict[int, PageGeometry]  # 1-indexed page number -> geometry
    title: str | None = None


@dataclass(frozen=True, slots=True)
class EngineRenderedPage:
    page_num: int  # 1-indexed
    image_file: Path  # absolute output file path
    width_px: int
    height_px: int


class RasterizerEngine(ABC):
    """
    PDF rendering engine abstraction.

    Engines must:
    - Report page count and per-page layout size/rotation
    - Render PDF pages to PNG files at a fixed target resolution
    - Perform NO text extraction or barcode detection
    """

    @abstractmethod
    def backend_id(self) -> str:
        raise NotImplementedError

    def backend_version(self) -> str | None:
        return None

    @abstractmethod
    def read_document_info(self, *, pdf_file: Path) -> DocumentInfo:
        raise NotImplementedError

    @abstractmethod
    def render_pages(
        self,
        *,
        pdf_file: Path,
        out_dir: Path,
        pages: list[int],  # 1-indexed, explicit ordering
        long_side_px: int,
    ) -> list[EngineRenderedPage]:
        """Rendered pages, in the same order as `pages`."""
        raise NotImplementedError
