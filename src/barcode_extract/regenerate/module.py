from __future__ import annotations

import logging

from ..contracts import BarcodeDetection
from ..errors import RegenerationError, RenderError
from .engines import RendererEngine
from .recipes import build_recipe

logger = logging.getLogger(__name__)


def regenerate(*, detection: BarcodeDetection, engine: RendererEngine, strict: bool) -> bool:
    """
    Render a clean copy of `detection` and store it on the detection.

    Returns True when rendered output was produced. `detection.strict` is set
    from the recipe, so it is only True for a byte-exact render.
    Raises `UnknownFormatError` for an unknown format in strict mode and
    `RenderError` when the renderer fails.
    """

    detection.strict = False
    recipe = build_recipe(detection, strict=strict)
    if recipe is None:
        return False

    try:
        rendered = engine.render(recipe)
    except RegenerationError:
        raise
    except Exception as e:
        raise RenderError(
            "Barcode renderer failed",
            detail={"backend": engine.backend_id(), "bcid": recipe.bcid, "error": repr(e)},
        ) from e

    detection.rendered_png = rendered.png
    detection.rendered_svg = rendered.svg
    detection.strict = recipe.strict
    logger.debug("Regenerated %s barcode (strict=%s) from %r", recipe.bcid, recipe.strict, recipe.text)
    return True
