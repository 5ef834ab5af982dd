from __future__ import annotations

from PIL import Image

# Pixels darker than this are treated as bars/modules.
DARK_THRESHOLD = 128


def _row_runs(pixels, *, y: int, width: int) -> list[tuple[int, int]]:
    runs: list[tuple[int, int]] = []
    start: int | None = None
    for x in range(width):
        dark = pixels[x, y] < DARK_THRESHOLD
        if dark and start is None:
            start = x
        elif not dark and start is not None:
            runs.append((start, x))
            start = None
    if start is not None:
        runs.append((start, width))
    return runs


def dark_rects(image: Image.Image) -> list[tuple[int, int, int, int]]:
    """
    Cover the dark pixels of a bitmap with rectangles `(x, y, w, h)`.

    Horizontal runs are merged downwards while consecutive rows repeat the
    same run, so a linear barcode collapses to one rectangle per bar.
    """

    gray = image.convert("L")
    width, height = gray.size
    pixels = gray.load()

    rects: list[tuple[int, int, int, int]] = []
    open_runs: dict[tuple[int, int], int] = {}  # (x0, x1) -> first row
    for y in range(height):
        runs = set(_row_runs(pixels, y=y, width=width))
        for run in [r for r in open_runs if r not in runs]:
            y0 = open_runs.pop(run)
            rects.append((run[0], y0, run[1] - run[0], y - y0))
        for run in runs:
            open_runs.setdefault(run, y)
    for run, y0 in open_runs.items():
        rects.append((run[0], y0, run[1] - run[0], height - y0))

    rects.sort(key=lambda r: (r[1], r[0]))
    return rects


def bitmap_to_svg(image: Image.Image, *, background: str = "#FFFFFF", foreground: str = "#000000") -> str:
    """Trace a rendered barcode bitmap into standalone SVG markup."""
    width, height = image.size
    path = "".join(f"M{x} {y}h{w}v{h}h-{w}Z" for x, y, w, h in dark_rects(image))

    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" version="1.1" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}">',
        f'<rect x="0" y="0" width="{width}" height="{height}" fill="{background}"/>',
    ]
    if path:
        parts.append(f'<path fill="{foreground}" d="{path}"/>')
    parts.append("</svg>")
    return "\n".join(parts) + "\n"
