from __future__ import annotations

import logging
from pathlib import Path

from ..contracts import Page, Size
from ..errors import EngineError, RasterizeError
from .engines import DocumentInfo, RasterizerEngine

logger = logging.getLogger(__name__)


def select_pages(*, page_count: int, first_page: int | None, last_page: int | None) -> list[int]:
    """Ascending 1-indexed page numbers within [first_page, last_page], clamped to the document."""
    first = max(1, first_page or 1)
    last = min(page_count, last_page or page_count)
    return list(range(first, last + 1))


def read_document_info(*, engine: RasterizerEngine, pdf_file: Path) -> DocumentInfo:
    try:
        return engine.read_document_info(pdf_file=pdf_file)
    except EngineError:
        raise
    except Exception as e:
        raise RasterizeError(
            "Failed to read PDF page metadata",
            code="RASTERIZE_METADATA_FAILED",
            detail={"file": str(pdf_file), "backend": engine.backend_id(), "error": repr(e)},
        ) from e


def rasterize_pages(
    *,
    engine: RasterizerEngine,
    pdf_file: Path,
    info: DocumentInfo,
    pages: list[int],
    out_dir: Path,
    long_side_px: int,
) -> list[Page]:
    """Render `pages` and pair every image with its layout geometry, ascending by page id."""

    try:
        rendered = engine.render_pages(pdf_file=pdf_file, out_dir=out_dir, pages=pages, long_side_px=long_side_px)
    except EngineError:
        raise
    except Exception as e:
        raise RasterizeError(
            "PDF rendering failed",
            detail={"file": str(pdf_file), "backend": engine.backend_id(), "error": repr(e)},
        ) from e

    out: list[Page] = []
    for rp in rendered:
        geometry = info.pages.get(rp.page_num)
        if geometry is None:
            logger.warning("No layout metadata for page %d, text coordinates are used unscaled", rp.page_num)
        out.append(
            Page(
                id=rp.page_num,
                pixel_size=Size(width=rp.width_px, height=rp.height_px),
                layout_size=geometry.layout_size if geometry else None,
                rotation=geometry.rotation if geometry else 0.0,
                image_file=rp.image_file,
            )
        )
    return sorted(out, key=lambda p: p.id)
