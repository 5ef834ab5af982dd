from __future__ import annotations

import logging
from typing import Any

from PIL import Image

from ...errors import EngineNotInstalledError
from .base import DecodedCandidate, PrimaryDecoderEngine, SecondaryDecodeResult, SecondaryDecoderEngine

logger = logging.getLogger(__name__)

# lowercase tag -> zxingcpp.BarcodeFormat member name
_ZXING_FORMAT_NAMES = {
    "code128": "Code128",
    "datamatrix": "DataMatrix",
    "qrcode": "QRCode",
}


def _require_zxingcpp():
    try:
        import zxingcpp  # type: ignore

        return zxingcpp
    except ImportError as e:
        raise EngineNotInstalledError(
            "Missing dependency: zxing-cpp is required for barcode decoding."
        ) from e


def _position(result: Any) -> tuple[tuple[float, float], ...]:
    pos = result.position
    return tuple(
        (float(p.x), float(p.y))
        for p in (pos.top_left, pos.top_right, pos.bottom_right, pos.bottom_left)
    )


class ZxingCppDecoder(PrimaryDecoderEngine):
    """
    Full-page multi-code decoding with zxing-cpp.

    The binding always runs in try-harder mode; rotation and downscaling are
    enabled explicitly. Denoising is not exposed by the Python binding.
    """

    def __init__(self, *, try_rotate: bool = True, try_downscale: bool = True) -> None:
        self.try_rotate = try_rotate
        self.try_downscale = try_downscale

    def backend_id(self) -> str:
        return "zxing-cpp"

    def read_barcodes(self, image: Image.Image) -> list[DecodedCandidate]:
        zxingcpp = _require_zxingcpp()
        results = zxingcpp.read_barcodes(image, try_rotate=self.try_rotate, try_downscale=self.try_downscale)

        out: list[DecodedCandidate] = []
        for r in results:
            out.append(
                DecodedCandidate(
                    format=r.format.name,
                    text=r.text,
                    position=_position(r),
                    is_valid=bool(r.valid),
                    content_bytes=bytes(r.bytes),
                    # The binding has no reader-init flag; it stays False.
                    reader_init=bool(getattr(r, "reader_init", False)),
                    ec_level=(getattr(r, "ec_level", "") or None),
                    # a dict of format metadata in zxing-cpp 3.x
                    extra=getattr(r, "extra", None),
                )
            )
        return out


class ZxingCppCropDecoder(SecondaryDecoderEngine):
    """
    Single-result decoding of one pre-cropped code, restricted to the expected format.

    zxing-cpp only reports the decoded content bytes, not the symbol
    codewords, so this backend never yields raw bytes and strict copies are
    not available with it. The crop is still decoded so the log shows
    whether the code was found again.
    """

    def backend_id(self) -> str:
        return "zxing-cpp-crop"

    def read_single(self, image: Image.Image, *, format: str) -> SecondaryDecodeResult | None:
        zxingcpp = _require_zxingcpp()
        name = _ZXING_FORMAT_NAMES.get(format)
        if name is None:
            raise ValueError(f"Unsupported format for crop decoding: {format!r}")

        r = zxingcpp.read_barcode(
            image,
            formats=getattr(zxingcpp.BarcodeFormat, name),
            try_rotate=True,
            try_downscale=True,
        )
        if r is None or not r.valid:
            return None
        logger.info("zxing-cpp exposes no codewords for the %s code %r, keeping it non-strict", format, r.text)
        return None
