from __future__ import annotations

import unittest
from io import BytesIO

from PIL import Image

from barcode_extract.contracts import BBox, BarcodeDetection, NotVerified, Verified
from barcode_extract.detect import (
    bbox_from_position,
    crop_padded,
    detect_barcodes,
    is_verification_eligible,
    normalize_format,
    source_png,
    verify_barcode,
)
from barcode_extract.detect.engines import (
    DecodedCandidate,
    PrimaryDecoderEngine,
    SecondaryDecodeResult,
    SecondaryDecoderEngine,
)
from barcode_extract.errors import DetectionError, EngineNotInstalledError, VerificationError
from barcode_extract.regenerate import build_recipe

_QUAD = ((10.4, 20.6), (50.2, 20.6), (50.2, 60.1), (10.4, 60.1))


class _FakePrimary(PrimaryDecoderEngine):
    def __init__(self, candidates=None, error: Exception | None = None) -> None:
        self.candidates = candidates or []
        self.error = error

    def backend_id(self) -> str:
        return "fake-primary"

    def read_barcodes(self, image):
        if self.error is not None:
            raise self.error
        return list(self.candidates)


class _FakeSecondary(SecondaryDecoderEngine):
    def __init__(self, result=None, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.images = []

    def backend_id(self) -> str:
        return "fake-secondary"

    def read_single(self, image, *, format: str):
        self.images.append((image, format))
        if self.error is not None:
            raise self.error
        return self.result


def _detection(fmt: str = "code128", bbox: BBox | None = None) -> BarcodeDetection:
    return BarcodeDetection(format=fmt, text="AB", bbox=bbox or BBox(x0=50, y0=50, x1=100, y1=80))


class TestDetectBarcodes(unittest.TestCase):
    def test_normalizes_and_filters(self) -> None:
        engine = _FakePrimary(
            [
                DecodedCandidate(
                    format="QRCode",
                    text="HELLO",
                    position=_QUAD,
                    is_valid=True,
                    content_bytes=b"HELLO",
                    ec_level="M",
                    extra='{"Version": "2", "DataMask": 3}',
                ),
                DecodedCandidate(format="DataBar", text="0123", position=_QUAD, is_valid=True),
                DecodedCandidate(format="Code128", text="???", position=_QUAD, is_valid=False),
            ]
        )
        out = detect_barcodes(engine=engine, image=Image.new("RGB", (100, 100), "white"))

        self.assertEqual(len(out), 1)
        d = out[0]
        self.assertEqual(d.format, "qrcode")
        self.assertEqual(d.text, "HELLO")
        self.assertEqual(d.bbox, BBox(x0=10, y0=20, x1=51, y1=61))
        self.assertEqual(d.extra, {"Version": "2", "DataMask": 3})
        self.assertEqual(d.ec_level, "M")
        self.assertIsInstance(d.verification, NotVerified)
        self.assertFalse(d.strict)

    def test_nothing_found_is_empty(self) -> None:
        self.assertEqual(detect_barcodes(engine=_FakePrimary([]), image=Image.new("RGB", (10, 10))), [])

    def test_unparseable_metadata_is_ignored(self) -> None:
        engine = _FakePrimary([DecodedCandidate(format="QRCode", text="x", position=_QUAD, is_valid=True, extra="{")])
        self.assertEqual(detect_barcodes(engine=engine, image=Image.new("RGB", (10, 10)))[0].extra, {})

    def test_metadata_mapping_reaches_qr_recipe(self) -> None:
        extra = {"DataMask": 5, "Version": "1", "ECLevel": "H"}
        engine = _FakePrimary([DecodedCandidate(format="QRCode", text="HELLO", position=_QUAD, is_valid=True, extra=extra)])
        d = detect_barcodes(engine=engine, image=Image.new("RGB", (10, 10)))[0]

        self.assertEqual(d.extra, extra)
        self.assertIsNot(d.extra, extra)
        options = build_recipe(d, strict=False).options
        self.assertEqual((options["version"], options["mask"], options["eclevel"]), ("1", "6", "H"))

    def test_metadata_of_other_types_is_ignored(self) -> None:
        engine = _FakePrimary([DecodedCandidate(format="QRCode", text="x", position=_QUAD, is_valid=True, extra=42)])
        self.assertEqual(detect_barcodes(engine=engine, image=Image.new("RGB", (10, 10)))[0].extra, {})

    def test_normalization_failure_raises_detection_error(self) -> None:
        engine = _FakePrimary([DecodedCandidate(format="QRCode", text="x", position=(), is_valid=True)])
        with self.assertRaises(DetectionError) as ctx:
            detect_barcodes(engine=engine, image=Image.new("RGB", (10, 10)))
        self.assertEqual(ctx.exception.detail["index"], 0)

    def test_engine_failure_raises_detection_error(self) -> None:
        with self.assertRaises(DetectionError) as ctx:
            detect_barcodes(engine=_FakePrimary(error=RuntimeError("boom")), image=Image.new("RGB", (10, 10)))
        self.assertEqual(ctx.exception.detail["backend"], "fake-primary")

    def test_engine_errors_pass_through(self) -> None:
        with self.assertRaises(EngineNotInstalledError):
            detect_barcodes(engine=_FakePrimary(error=EngineNotInstalledError("missing")), image=Image.new("RGB", (10, 10)))

    def test_format_helpers(self) -> None:
        self.assertEqual(normalize_format("DataMatrix"), "datamatrix")
        self.assertEqual(bbox_from_position(((3.0, 4.0), (1.5, 9.2))), BBox(x0=1, y0=4, x1=3, y1=10))


class TestCrop(unittest.TestCase):
    def test_crop_padded_is_clamped(self) -> None:
        image = Image.new("RGB", (200, 200), "white")
        self.assertEqual(crop_padded(image, BBox(x0=50, y0=50, x1=100, y1=80), padding=5).size, (60, 40))
        self.assertEqual(crop_padded(image, BBox(x0=0, y0=190, x1=20, y1=200), padding=5).size, (25, 15))

    def test_source_png_has_white_border(self) -> None:
        image = Image.new("RGB", (200, 200), "black")
        data = source_png(image, BBox(x0=50, y0=50, x1=100, y1=80), padding=5)
        with Image.open(BytesIO(data)) as im:
            self.assertEqual(im.format, "PNG")
            self.assertEqual(im.size, (60, 40))
            self.assertEqual(im.getpixel((0, 0)), (255, 255, 255))
            self.assertEqual(im.getpixel((5, 5)), (0, 0, 0))


class TestVerify(unittest.TestCase):
    def test_eligibility(self) -> None:
        self.assertTrue(is_verification_eligible(_detection("code128"), strict=True))
        self.assertTrue(is_verification_eligible(_detection("datamatrix"), strict=True))
        self.assertFalse(is_verification_eligible(_detection("qrcode"), strict=True))
        self.assertFalse(is_verification_eligible(_detection("code128"), strict=False))

    def test_success_sets_raw_bytes_from_padded_grayscale_crop(self) -> None:
        engine = _FakeSecondary(
            SecondaryDecodeResult(format="code128", text="AB", raw_bytes=b"AB\x1dj", position=((0.0, 0.0),) * 4)
        )
        d = _detection()
        got = verify_barcode(engine=engine, image=Image.new("RGB", (200, 200), "white"), detection=d, padding=5)

        self.assertEqual(got, Verified(raw_bytes=b"AB\x1dj"))
        self.assertEqual(d.raw_bytes, b"AB\x1dj")
        image, fmt = engine.images[0]
        self.assertEqual((image.mode, image.size, fmt), ("L", (60, 40), "code128"))
        # geometry from the secondary decoder is ignored
        self.assertEqual(d.bbox, BBox(x0=50, y0=50, x1=100, y1=80))

    def test_miss_is_not_an_error(self) -> None:
        d = _detection()
        got = verify_barcode(engine=_FakeSecondary(None), image=Image.new("RGB", (200, 200)), detection=d)
        self.assertIsInstance(got, NotVerified)
        self.assertIsNone(d.raw_bytes)

    def test_engine_failure_raises_verification_error(self) -> None:
        with self.assertRaises(VerificationError):
            verify_barcode(
                engine=_FakeSecondary(error=RuntimeError("wasm trap")),
                image=Image.new("RGB", (200, 200)),
                detection=_detection(),
            )


if __name__ == "__main__":
    unittest.main()
