from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable

from ..contracts import BarcodeDetection, KnownFormat
from ..errors import UnknownFormatError

logger = logging.getLogger(__name__)

COMMON_OPTIONS: dict[str, Any] = {
    "paddingtop": 2,
    "paddingbottom": 2,
    "paddingleft": 2,
    "paddingright": 2,
    "backgroundcolor": "FFFFFF",
    "includetext": False,
    "textalign": "center",
}

PNG_SCALE = 3
SVG_SCALE = 1

QR_EC_LEVELS = frozenset({"L", "M", "Q", "H"})

# Reader-initialization escapes, interpreted by the renderer when `parsefnc` is set.
CODE128_READER_INIT_PREFIX = "^FNC3"
DATAMATRIX_READER_INIT_PREFIX = "^PROG"

# The renderer takes datamatrix sizes as "RxC".
DATAMATRIX_VERSION_RE = re.compile(r"\d+x\d+")


@dataclass(frozen=True, slots=True)
class RenderRecipe:
    """
    Everything the renderer needs for one barcode.

    `bcid` is the renderer's symbology name, `options` the format specific
    switches merged over `COMMON_OPTIONS`. `strict` is True only when `text`
    holds escaped raw bytes.
    """

    bcid: str
    text: str
    options: dict[str, Any] = field(default_factory=dict)
    strict: bool = False
    png_scale: int = PNG_SCALE
    svg_scale: int = SVG_SCALE


RecipeHandler = Callable[[BarcodeDetection, bool], RenderRecipe]

_HANDLERS: dict[str, RecipeHandler] = {}


def _handler(fmt: KnownFormat) -> Callable[[RecipeHandler], RecipeHandler]:
    def register(fn: RecipeHandler) -> RecipeHandler:
        _HANDLERS[fmt.value] = fn
        return fn

    return register


def supported_formats() -> frozenset[str]:
    return frozenset(_HANDLERS)


def escape_bytes(data: bytes) -> str:
    """Each byte as a zero-padded `^NNN` token: b"AB" -> "^065^066"."""
    return "".join(f"^{b:03d}" for b in data)


def _options(**extra: Any) -> dict[str, Any]:
    opts = dict(COMMON_OPTIONS)
    opts.update(extra)
    return opts


def _version_option(detection: BarcodeDetection, pattern: re.Pattern[str] | None = None) -> dict[str, Any]:
    version = detection.extra.get("Version")
    if version is None or version == "":
        return {}
    if pattern is not None and not pattern.fullmatch(str(version)):
        logger.debug("Ignoring %s version %r", detection.format, version)
        return {}
    return {"version": str(version)}


@_handler(KnownFormat.QRCODE)
def _qrcode(detection: BarcodeDetection, strict: bool) -> RenderRecipe:
    # Re-encoding the decoded text may pick different segment modes, so a
    # QR code is never a byte-exact copy.
    extra = _version_option(detection)

    mask = detection.extra.get("DataMask")
    if isinstance(mask, int) and not isinstance(mask, bool) and 0 <= mask <= 7:
        extra["mask"] = str(mask + 1)

    for level in (detection.ec_level, detection.extra.get("ECLevel")):
        ec_level = str(level or "").strip().upper()
        if ec_level in QR_EC_LEVELS:
            extra["eclevel"] = ec_level
            extra["fixedeclevel"] = True
            break

    return RenderRecipe(bcid="qrcode", text=detection.text, options=_options(**extra), strict=False)


@_handler(KnownFormat.DATAMATRIX)
def _datamatrix(detection: BarcodeDetection, strict: bool) -> RenderRecipe:
    extra = _version_option(detection, DATAMATRIX_VERSION_RE)
    escaped = escape_bytes(detection.raw_bytes or b"")

    if strict and escaped:
        return RenderRecipe(
            bcid="datamatrix",
            text=escaped,
            options=_options(alttext=detection.text, raw=True, **extra),
            strict=True,
        )

    text = detection.text
    if detection.reader_init:
        text = DATAMATRIX_READER_INIT_PREFIX + text
    return RenderRecipe(
        bcid="datamatrix",
        text=text,
        options=_options(alttext=detection.text, parsefnc=detection.reader_init, **extra),
        strict=False,
    )


@_handler(KnownFormat.CODE128)
def _code128(detection: BarcodeDetection, strict: bool) -> RenderRecipe:
    # Checksum and stop character are recomputed by the renderer.
    escaped = escape_bytes((detection.raw_bytes or b"")[:-2])

    if strict and escaped:
        return RenderRecipe(bcid="code128", text=escaped, options=_options(raw=True), strict=True)

    text = detection.text
    if detection.reader_init:
        text = CODE128_READER_INIT_PREFIX + text
    return RenderRecipe(
        bcid="code128",
        text=text,
        options=_options(parsefnc=detection.reader_init),
        strict=False,
    )


def build_recipe(detection: BarcodeDetection, *, strict: bool) -> RenderRecipe | None:
    """
    Pick the render recipe for a detection.

    Returns None for formats without a recipe. With `strict` requested an
    unknown format raises `UnknownFormatError` instead.
    """

    handler = _HANDLERS.get(detection.format)
    if handler is None:
        if strict:
            raise UnknownFormatError(
                f"Can not regenerate unknown barcode format {detection.format!r}",
                detail={"format": detection.format, "text": detection.text},
            )
        logger.info("Not regenerating unknown barcode format %r", detection.format)
        return None
    return handler(detection, strict)
