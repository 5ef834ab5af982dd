from __future__ import annotations

from io import BytesIO
from typing import Any

from ...errors import EngineNotInstalledError, RenderError
from ..recipes import RenderRecipe
from ..svg import bitmap_to_svg
from .base import RenderedBarcode, RendererEngine


def _require_treepoem():
    try:
        import treepoem  # type: ignore
    except Exception as e:  # pragma: no cover
        raise EngineNotInstalledError(
            "treepoem is not installed. Install with: pip install treepoem (ghostscript is required as well)"
        ) from e
    return treepoem


def _treepoem_options(options: dict[str, Any]) -> dict[str, str | bool]:
    # treepoem passes True as a bare flag, drops False and needs strings otherwise.
    out: dict[str, str | bool] = {}
    for key, value in options.items():
        if isinstance(value, bool):
            out[key] = value
        elif value is not None:
            out[key] = str(value)
    return out


class TreepoemRenderer(RendererEngine):
    """BWIPP through treepoem/ghostscript. The SVG is traced from a 1x bitmap."""

    def backend_id(self) -> str:
        return "treepoem"

    def render(self, recipe: RenderRecipe) -> RenderedBarcode:
        treepoem = _require_treepoem()
        options = _treepoem_options(recipe.options)

        try:
            png_image = treepoem.generate_barcode(recipe.bcid, recipe.text, options, scale=recipe.png_scale)
            svg_image = treepoem.generate_barcode(recipe.bcid, recipe.text, options, scale=recipe.svg_scale)
        except Exception as e:
            raise RenderError(
                "Barcode renderer failed",
                detail={"backend": self.backend_id(), "bcid": recipe.bcid, "error": repr(e)},
            ) from e

        buf = BytesIO()
        png_image.convert("RGB").save(buf, format="PNG")
        return RenderedBarcode(png=buf.getvalue(), svg=bitmap_to_svg(svg_image))
