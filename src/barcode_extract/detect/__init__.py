"""
Barcode detection: primary full-page decoding and strict-mode verification.

The primary decoder supplies format, text and geometry. The secondary
decoder re-reads eligible codes from a crop to recover raw payload bytes;
its geometry is never used.
"""

from .crop import crop_padded, source_png
from .module import bbox_from_position, detect_barcodes, normalize_format
from .verify import STRICT_ELIGIBLE_FORMATS, is_verification_eligible, verify_barcode

__all__ = [
    "STRICT_ELIGIBLE_FORMATS",
    "bbox_from_position",
    "crop_padded",
    "detect_barcodes",
    "is_verification_eligible",
    "normalize_format",
    "source_png",
    "verify_barcode",
]
