from .base import DecodedCandidate, PrimaryDecoderEngine, SecondaryDecodeResult, SecondaryDecoderEngine
from .zxingcpp_engine import ZxingCppCropDecoder, ZxingCppDecoder

__all__ = [
    "DecodedCandidate",
    "PrimaryDecoderEngine",
    "SecondaryDecodeResult",
    "SecondaryDecoderEngine",
    "ZxingCppCropDecoder",
    "ZxingCppDecoder",
]
