from __future__ import annotations

from io import BytesIO

from PIL import Image

from ..contracts import BBox


def _clamp_box(bbox: BBox, *, width: int, height: int, padding: int) -> tuple[int, int, int, int]:
    x0 = max(0, int(bbox.x0) - padding)
    y0 = max(0, int(bbox.y0) - padding)
    x1 = min(width, int(bbox.x1) + padding)
    y1 = min(height, int(bbox.y1) + padding)
    if x1 <= x0:
        x1 = min(width, x0 + 1)
    if y1 <= y0:
        y1 = min(height, y0 + 1)
    return x0, y0, x1, y1


def crop_padded(image: Image.Image, bbox: BBox, *, padding: int) -> Image.Image:
    """Crop `bbox` grown by `padding` pixels per side, clamped to the image."""
    return image.crop(_clamp_box(bbox, width=image.width, height=image.height, padding=padding))


def source_png(image: Image.Image, bbox: BBox, *, padding: int) -> bytes:
    """Exact `bbox` crop on a white canvas with a `padding` pixel border, as PNG bytes."""
    region = image.crop(_clamp_box(bbox, width=image.width, height=image.height, padding=0)).convert("RGB")
    canvas = Image.new("RGB", (region.width + 2 * padding, region.height + 2 * padding), "white")
    canvas.paste(region, (padding, padding))

    buf = BytesIO()
    canvas.save(buf, format="PNG")
    return buf.getvalue()
