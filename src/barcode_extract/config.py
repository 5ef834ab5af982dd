from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class TextSource(str, Enum):
    PDF = "pdf"  # embedded text layer via pdftotext
    OCR = "ocr"  # tesseract over the rasterized page


@dataclass(frozen=True, slots=True)
class LabelWeights:
    """
    Distance penalties applied to candidate labels by their direction from
    the barcode. Labels usually sit below or beside a code, rarely above it.
    """

    north: float = 0.10
    east_west: float = 0.05
    south: float = 0.0
    max_distance_ratio: float = 0.25  # of the longest page side, in pixels

    def __post_init__(self) -> None:
        for name in ("north", "east_west", "south"):
            if getattr(self, name) < 0.0:
                raise ValueError(f"{name} penalty must be >= 0")
        if not (0.0 < self.max_distance_ratio <= 1.0):
            raise ValueError("max_distance_ratio must be within (0, 1]")


@dataclass(frozen=True, slots=True)
class ExtractConfig:
    """
    Immutable run configuration threaded through the orchestrator.

    `first_page`/`last_page` bound rasterization (None => open end);
    `excluded_pages` are rasterized but never processed.
    """

    strict: bool = False
    debug: bool = False
    first_page: int | None = None
    last_page: int | None = None
    excluded_pages: frozenset[int] = frozenset()
    text_source: TextSource = TextSource.PDF
    render_long_side_px: int = 1500
    crop_padding_px: int = 5
    false_positive_formats: frozenset[str] = frozenset({"databar"})
    ocr_language: str = "eng"
    ocr_timeout_s: float = 120.0
    label_weights: LabelWeights = field(default_factory=LabelWeights)

    def __post_init__(self) -> None:
        if self.render_long_side_px <= 0:
            raise ValueError("render_long_side_px must be a positive integer")
        if self.crop_padding_px < 0:
            raise ValueError("crop_padding_px must be >= 0")
        for page in (self.first_page, self.last_page):
            if page is not None and page < 1:
                raise ValueError("page numbers must be >= 1")
        if self.first_page is not None and self.last_page is not None and self.last_page < self.first_page:
            raise ValueError("last_page must not precede first_page")
        if not isinstance(self.excluded_pages, frozenset):
            raise TypeError("excluded_pages must be a frozenset")
