from __future__ import annotations

import asyncio
import logging
import shutil
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

from PIL import Image

from .config import ExtractConfig, TextSource
from .contracts import (
    BarcodeDetection,
    CoordinateSpace,
    DocumentHeader,
    DocumentResult,
    Page,
    PageResult,
    TextLine,
    WordRecord,
)
from .detect import detect_barcodes, is_verification_eligible, source_png, verify_barcode
from .detect.engines import PrimaryDecoderEngine, SecondaryDecoderEngine, ZxingCppCropDecoder, ZxingCppDecoder
from .errors import EngineError, RasterizeError, RegenerationError, TextLayerError, VerificationError
from .geometry import rescale_text_lines
from .labels import associate_label
from .rasterize import rasterize_pages, read_document_info, select_pages
from .rasterize.engines import Pypdfium2Rasterizer, RasterizerEngine
from .regenerate import regenerate
from .regenerate.engines import RendererEngine, TreepoemRenderer
from .text_layer import lines_for_page, merge_text_lines
from .text_layer.engines import PdftotextTsvEngine, TesseractTsvEngine, TextLayerEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ExtractEngines:
    """External collaborators used for one run."""

    rasterizer: RasterizerEngine
    text_layer: TextLayerEngine
    primary: PrimaryDecoderEngine
    secondary: SecondaryDecoderEngine
    renderer: RendererEngine


def _get_text_layer_engine(config: ExtractConfig) -> TextLayerEngine:
    if config.text_source == TextSource.PDF:
        return PdftotextTsvEngine()
    if config.text_source == TextSource.OCR:
        return TesseractTsvEngine(language=config.ocr_language, timeout_s=config.ocr_timeout_s)
    raise ValueError(f"Unsupported text source: {config.text_source}")


def default_engines(config: ExtractConfig) -> ExtractEngines:
    return ExtractEngines(
        rasterizer=Pypdfium2Rasterizer(),
        text_layer=_get_text_layer_engine(config),
        primary=ZxingCppDecoder(),
        secondary=ZxingCppCropDecoder(),
        renderer=TreepoemRenderer(),
    )


@contextmanager
def work_dir(*, keep: bool) -> Iterator[Path]:
    """Per-document temporary directory, removed on exit unless `keep`."""
    path = Path(tempfile.mkdtemp(prefix="barcode-extract-"))
    try:
        yield path
    finally:
        if keep:
            logger.info("Keeping working directory %s", path)
        else:
            shutil.rmtree(path, ignore_errors=True)


def _utc_timestamp() -> str:
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _extract_words(*, engine: TextLayerEngine, pdf_file: Path, pages: list[Page], work_dir: Path) -> list[WordRecord]:
    try:
        return engine.extract_words(pdf_file=pdf_file, pages=pages, work_dir=work_dir)
    except EngineError:
        raise
    except Exception as e:
        raise TextLayerError(
            "Text layer extraction failed",
            detail={"file": str(pdf_file), "backend": engine.backend_id(), "error": repr(e)},
        ) from e


def _load_page_image(image_file: Path) -> Image.Image:
    try:
        with Image.open(image_file) as im:
            return im.convert("RGB")
    except OSError as e:
        raise RasterizeError(
            "Failed to read rendered page image",
            code="RASTERIZE_PAGE_IMAGE_UNREADABLE",
            detail={"file": str(image_file), "error": repr(e)},
        ) from e


def _page_text_lines(*, page: Page, lines: list[TextLine], space: CoordinateSpace) -> list[TextLine]:
    page_lines = lines_for_page(lines, page.id)
    layout_size = page.layout_size if space == CoordinateSpace.LAYOUT else None
    return rescale_text_lines(page_lines, layout_size=layout_size, pixel_size=page.pixel_size)


def _write_debug_images(*, out_dir: Path, page_id: int, idx: int, detection: BarcodeDetection) -> None:
    stem = f"barcode-{page_id}-{idx}"
    if detection.source_png is not None:
        (out_dir / f"{stem}-org.png").write_bytes(detection.source_png)
    if detection.rendered_png is not None:
        (out_dir / f"{stem}-bwp.png").write_bytes(detection.rendered_png)
    if detection.rendered_svg is not None:
        (out_dir / f"{stem}-bwp.svg").write_text(detection.rendered_svg, encoding="utf-8")


async def _process_barcode(
    *,
    config: ExtractConfig,
    engines: ExtractEngines,
    page: Page,
    image: Image.Image,
    text_lines: list[TextLine],
    idx: int,
    detection: BarcodeDetection,
    tmp_dir: Path,
) -> None:
    detection.source_png = source_png(image, detection.bbox, padding=config.crop_padding_px)

    if is_verification_eligible(detection, strict=config.strict):
        logger.debug("Verifying page %d barcode #%d (%s: %r)", page.id, idx, detection.format, detection.text.strip())
        try:
            await asyncio.to_thread(
                verify_barcode,
                engine=engines.secondary,
                image=image,
                detection=detection,
                padding=config.crop_padding_px,
            )
        except VerificationError as e:
            logger.warning("Strict verification unavailable for page %d barcode #%d: %s", page.id, idx, e)

    try:
        await asyncio.to_thread(regenerate, detection=detection, engine=engines.renderer, strict=config.strict)
    except RegenerationError as e:
        logger.error("Failed to regenerate page %d barcode #%d: %s", page.id, idx, e)

    detection.label = associate_label(
        detection.bbox,
        text_lines,
        page_size=page.pixel_size,
        weights=config.label_weights,
    )

    if config.debug:
        _write_debug_images(out_dir=tmp_dir, page_id=page.id, idx=idx, detection=detection)


async def _process_page(
    *,
    config: ExtractConfig,
    engines: ExtractEngines,
    page: Page,
    lines: list[TextLine],
    tmp_dir: Path,
) -> PageResult | None:
    image = await asyncio.to_thread(_load_page_image, page.image_file)
    detections = await asyncio.to_thread(
        detect_barcodes,
        engine=engines.primary,
        image=image,
        false_positive_formats=config.false_positive_formats,
    )
    if not detections:
        logger.info("No barcodes found on page %d", page.id)
        return None

    logger.info("Processing page %d with %d barcodes", page.id, len(detections))
    text_lines = _page_text_lines(page=page, lines=lines, space=engines.text_layer.coordinate_space)
    for idx, detection in enumerate(detections):
        await _process_barcode(
            config=config,
            engines=engines,
            page=page,
            image=image,
            text_lines=text_lines,
            idx=idx,
            detection=detection,
            tmp_dir=tmp_dir,
        )

    return PageResult(
        id=page.id,
        file=page.image_file.name,
        text="\n".join(line.text for line in text_lines),
        size=page.pixel_size,
        barcodes=detections,
        text_lines=text_lines,
    )


async def extract_document(
    *,
    pdf_file: Path,
    config: ExtractConfig,
    engines: ExtractEngines | None = None,
) -> DocumentResult:
    """
    Extract every barcode of one PDF with its label and regenerated images.

    Pages are processed one at a time in ascending order. Rasterization,
    text layer or detection failures raise an `EngineError` and abort the
    document; verification and regeneration failures only degrade the
    affected barcode.
    """

    engines = engines or default_engines(config)
    pdf_file = Path(pdf_file)

    with work_dir(keep=config.debug) as tmp_dir:
        logger.info("Reading and processing %s metadata", pdf_file)
        info = await asyncio.to_thread(read_document_info, engine=engines.rasterizer, pdf_file=pdf_file)
        page_ids = select_pages(page_count=info.page_count, first_page=config.first_page, last_page=config.last_page)

        logger.info("Rasterizing %d pages of %s", len(page_ids), pdf_file)
        pages = await asyncio.to_thread(
            rasterize_pages,
            engine=engines.rasterizer,
            pdf_file=pdf_file,
            info=info,
            pages=page_ids,
            out_dir=tmp_dir,
            long_side_px=config.render_long_side_px,
        )

        active = [p for p in pages if p.id not in config.excluded_pages]
        words = await asyncio.to_thread(
            _extract_words,
            engine=engines.text_layer,
            pdf_file=pdf_file,
            pages=active,
            work_dir=tmp_dir,
        )
        lines = merge_text_lines(words)

        header = DocumentHeader(
            file=str(pdf_file),
            strict=config.strict,
            timestamp=_utc_timestamp(),
            pages=info.page_count,
        )

        results: dict[int, PageResult] = {}
        for page in pages:
            if page.id in config.excluded_pages:
                logger.info("Skipping excluded page %d", page.id)
                continue
            page_result = await _process_page(config=config, engines=engines, page=page, lines=lines, tmp_dir=tmp_dir)
            if page_result is not None:
                results[page.id] = page_result

    return DocumentResult(common=header, pages=results)
