from .base import DocumentInfo, EngineRenderedPage, PageGeometry, RasterizerEngine
from .pypdfium2_engine import Pypdfium2Rasterizer

__all__ = ["DocumentInfo", "EngineRenderedPage", "PageGeometry", "Pypdfium2Rasterizer", "RasterizerEngine"]
