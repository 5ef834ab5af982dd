from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from PIL import Image


@dataclass(frozen=True, slots=True)
class DecodedCandidate:
    """
    Raw primary decoder hit, before normalization.

    `format` is the decoder-native format name; `position` holds the four
    corners of the detected quadrilateral in page pixels.
    """

    format: str
    text: str
    position: tuple[tuple[float, float], ...]
    is_valid: bool
    content_bytes: bytes | None = None
    reader_init: bool = False
    ec_level: str | None = None
    # format metadata (QR version, data mask, ...), as a mapping or a JSON object string
    extra: dict[str, Any] | str | None = None


@dataclass(frozen=True, slots=True)
class SecondaryDecodeResult:
    format: str
    text: str
    raw_bytes: bytes
    position: tuple[tuple[float, float], ...]


class PrimaryDecoderEngine(ABC):
    """
    Full-page barcode decoder.

    Engines must return every hit with its literal text and geometry; no
    filtering, no format normalization.
    """

    @abstractmethod
    def backend_id(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def read_barcodes(self, image: Image.Image) -> list[DecodedCandidate]:
        raise NotImplementedError


class SecondaryDecoderEngine(ABC):
    """
    Single-code decoder over a cropped region.

    `read_single` must return the symbol codewords (for code128 including the
    checksum and stop character), never the decoded content. Backends that
    cannot expose codewords return None, which keeps the code non-strict.
    """

    @abstractmethod
    def backend_id(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def read_single(self, image: Image.Image, *, format: str) -> SecondaryDecodeResult | None:
        """Decode one `format` code from `image` (luma); None when nothing is found or no codewords are available."""
        raise NotImplementedError
