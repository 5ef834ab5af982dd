from __future__ import annotations

import logging

from PIL import Image

from ..contracts import BarcodeDetection, KnownFormat, NotVerified, Verification, Verified
from ..errors import VerificationError
from .crop import crop_padded
from .engines import SecondaryDecoderEngine

logger = logging.getLogger(__name__)

# Formats whose raw bytes can be fed back to the renderer for an exact copy.
STRICT_ELIGIBLE_FORMATS = frozenset({KnownFormat.CODE128.value, KnownFormat.DATAMATRIX.value})


def is_verification_eligible(detection: BarcodeDetection, *, strict: bool) -> bool:
    return strict and detection.format in STRICT_ELIGIBLE_FORMATS


def verify_barcode(
    *,
    engine: SecondaryDecoderEngine,
    image: Image.Image,
    detection: BarcodeDetection,
    padding: int = 5,
) -> Verification:
    """
    Re-decode one detected code from its padded crop to recover raw bytes.

    Sets and returns `detection.verification`. A miss leaves the detection
    `NotVerified`; any other engine failure raises `VerificationError`.
    """

    crop = crop_padded(image, detection.bbox, padding=padding).convert("L")
    try:
        result = engine.read_single(crop, format=detection.format)
    except Exception as e:
        raise VerificationError(
            "Secondary barcode decoder failed",
            detail={"backend": engine.backend_id(), "format": detection.format, "error": repr(e)},
        ) from e

    if result is None or not result.raw_bytes:
        logger.info("No raw bytes for the %s code in region %s", detection.format, detection.bbox.to_dict())
        detection.verification = NotVerified()
    else:
        logger.debug("Secondary decoder raw bytes: %s", result.raw_bytes.hex())
        detection.verification = Verified(raw_bytes=result.raw_bytes)
    return detection.verification
