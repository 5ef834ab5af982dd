from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from ..recipes import RenderRecipe


@dataclass(frozen=True, slots=True)
class RenderedBarcode:
    png: bytes
    svg: str


class RendererEngine(ABC):
    """Turns a render recipe into a clean PNG and SVG of the barcode."""

    @abstractmethod
    def backend_id(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def render(self, recipe: RenderRecipe) -> RenderedBarcode:
        """
        Render `recipe` at `recipe.png_scale` for the PNG and
        `recipe.svg_scale` for the SVG. Failures raise `RenderError`.
        """
        raise NotImplementedError
