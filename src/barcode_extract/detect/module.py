from __future__ import annotations

import json
import logging
import math
from typing import Any

from PIL import Image

from ..contracts import BBox, BarcodeDetection
from ..errors import DetectionError, EngineError
from .engines import DecodedCandidate, PrimaryDecoderEngine

logger = logging.getLogger(__name__)

# Formats this decoder reports on plain page content that holds no code.
DEFAULT_FALSE_POSITIVE_FORMATS = frozenset({"databar"})


def normalize_format(name: str) -> str:
    """Decoder-native format name -> lowercase tag ("QRCode" -> "qrcode")."""
    return name.strip().lower()


def bbox_from_position(position: tuple[tuple[float, float], ...]) -> BBox:
    b = BBox.from_points(list(position))
    return BBox(x0=math.floor(b.x0), y0=math.floor(b.y0), x1=math.ceil(b.x1), y1=math.ceil(b.y1))


def _parse_extra(extra: dict[str, Any] | str | bytes | None) -> dict[str, Any]:
    if not extra:
        return {}
    if isinstance(extra, dict):
        return dict(extra)
    try:
        parsed = json.loads(extra)
    except (TypeError, ValueError):
        logger.debug("Ignoring unparseable barcode metadata %r", extra)
        return {}
    return parsed if isinstance(parsed, dict) else {}


def _to_detection(candidate: DecodedCandidate, fmt: str) -> BarcodeDetection:
    return BarcodeDetection(
        format=fmt,
        text=candidate.text,
        bbox=bbox_from_position(candidate.position),
        is_valid=candidate.is_valid,
        content_bytes=candidate.content_bytes,
        reader_init=candidate.reader_init,
        ec_level=candidate.ec_level,
        extra=_parse_extra(candidate.extra),
    )


def detect_barcodes(
    *,
    engine: PrimaryDecoderEngine,
    image: Image.Image,
    false_positive_formats: frozenset[str] = DEFAULT_FALSE_POSITIVE_FORMATS,
) -> list[BarcodeDetection]:
    """
    Run the primary decoder over a full page image.

    Invalid hits and known false-positive formats are dropped. An empty list
    means no barcode on the page; engine failures raise `DetectionError`.
    """

    try:
        candidates = engine.read_barcodes(image)
    except EngineError:
        raise
    except Exception as e:
        raise DetectionError(
            "Primary barcode decoder failed",
            detail={"backend": engine.backend_id(), "error": repr(e)},
        ) from e

    detections: list[BarcodeDetection] = []
    for idx, candidate in enumerate(candidates):
        try:
            fmt = normalize_format(candidate.format)
            if not candidate.is_valid or fmt in false_positive_formats:
                logger.info("Skipping invalid barcode #%d (%s)", idx, fmt)
                continue
            detections.append(_to_detection(candidate, fmt))
        except Exception as e:
            raise DetectionError(
                "Failed to normalize decoder result",
                detail={"backend": engine.backend_id(), "index": idx, "error": repr(e)},
            ) from e
    return detections
