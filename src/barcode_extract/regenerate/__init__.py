"""
Barcode regeneration: per-format render recipes and the renderer engine.
"""

from .module import regenerate
from .recipes import RenderRecipe, build_recipe, escape_bytes, supported_formats
from .svg import bitmap_to_svg

__all__ = ["RenderRecipe", "bitmap_to_svg", "build_recipe", "escape_bytes", "regenerate", "supported_formats"]
