from __future__ import annotations

from typing import Any


class BarcodeExtractError(Exception):
    """
    Base error for the extraction pipeline.

    Every error carries a stable machine-readable `code` next to the
    human-readable message, plus an optional `detail` payload.
    """

    default_code = "EXTRACT_ERROR"

    def __init__(self, message: str, *, code: str | None = None, detail: dict[str, Any] | None = None) -> None:
        self.message = message
        self.code = code or self.default_code
        self.detail = detail
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = f"{self.code}: {self.message}"
        if self.detail:
            msg += f" {self.detail}"
        return msg

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "message": self.message, "detail": self.detail}


class ArgumentError(BarcodeExtractError):
    """Invalid command line input. Reported before any file is opened."""

    default_code = "INPUT_INVALID_ARGUMENT"


class EngineError(BarcodeExtractError):
    """An external engine failed. Fatal for the current document."""

    default_code = "ENGINE_FAILED"


class EngineNotInstalledError(EngineError):
    default_code = "ENGINE_NOT_INSTALLED"


class RasterizeError(EngineError):
    default_code = "RASTERIZE_FAILED"


class TextLayerError(EngineError):
    default_code = "TEXT_LAYER_FAILED"


class DetectionError(EngineError):
    default_code = "DETECTION_FAILED"


class VerificationError(BarcodeExtractError):
    """The secondary decoder failed for a reason other than "not found"."""

    default_code = "VERIFICATION_FAILED"


class RegenerationError(BarcodeExtractError):
    default_code = "REGENERATION_FAILED"


class RenderError(RegenerationError):
    default_code = "RENDER_FAILED"


class UnknownFormatError(RegenerationError):
    default_code = "REGENERATION_UNKNOWN_FORMAT"
