from .base import RenderedBarcode, RendererEngine
from .treepoem_engine import TreepoemRenderer

__all__ = ["RenderedBarcode", "RendererEngine", "TreepoemRenderer"]
