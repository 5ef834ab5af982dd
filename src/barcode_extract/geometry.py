from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from .contracts import BBox, Size, TextLine

_TWO_PI = 2.0 * math.pi


class CardinalDirection(str, Enum):
    NORTH = "north"
    SOUTH = "south"
    WEST = "west"
    EAST = "east"


@dataclass(frozen=True, slots=True)
class PageScale:
    """
    Layout-unit to pixel scale factors for one page.

    x and y scale independently; rotation can make the aspect ratios of the
    two sizes differ.
    """

    sx: float
    sy: float

    @staticmethod
    def for_page(*, layout_size: Size | None, pixel_size: Size) -> "PageScale":
        # Without a layout size, text coordinates are taken to be image pixels.
        if layout_size is None or layout_size.width <= 0 or layout_size.height <= 0:
            return PageScale(sx=1.0, sy=1.0)
        return PageScale(
            sx=pixel_size.width / layout_size.width,
            sy=pixel_size.height / layout_size.height,
        )

    def to_pixel(self, bbox: BBox) -> BBox:
        """Floor the top-left, ceil the bottom-right: the result never under-covers."""
        return BBox(
            x0=math.floor(bbox.x0 * self.sx),
            y0=math.floor(bbox.y0 * self.sy),
            x1=math.ceil(bbox.x1 * self.sx),
            y1=math.ceil(bbox.y1 * self.sy),
        )

    def to_layout(self, bbox: BBox) -> BBox:
        return BBox(
            x0=bbox.x0 / self.sx,
            y0=bbox.y0 / self.sy,
            x1=bbox.x1 / self.sx,
            y1=bbox.y1 / self.sy,
        )


def rescale_text_lines(
    lines: list[TextLine], *, layout_size: Size | None, pixel_size: Size
) -> list[TextLine]:
    scale = PageScale.for_page(layout_size=layout_size, pixel_size=pixel_size)
    return [TextLine(page=line.page, text=line.text, bbox=scale.to_pixel(line.bbox)) for line in lines]


def center_distance(a: BBox, b: BBox) -> float:
    ax, ay = a.center()
    bx, by = b.center()
    if ax == bx:
        return float(abs(ay - by))
    if ay == by:
        return float(abs(ax - bx))
    return math.hypot(ax - bx, ay - by)


def direction_from_angle(radians: float) -> CardinalDirection:
    """
    Quantize an angle (counter-clockwise from east, any range) into one of
    four 90 degree sectors. Sector bounds lie at odd multiples of 45 degrees,
    exclusive below and inclusive above; EAST wraps across 0.
    """

    a = radians % _TWO_PI
    if a <= math.pi / 4 or a > 7 * math.pi / 4:
        return CardinalDirection.EAST
    if a <= 3 * math.pi / 4:
        return CardinalDirection.NORTH
    if a <= 5 * math.pi / 4:
        return CardinalDirection.WEST
    return CardinalDirection.SOUTH


def direction_of(reference: BBox, other: BBox) -> CardinalDirection:
    """Direction in which `other` lies as seen from `reference`, in image coordinates (y down)."""
    rx, ry = reference.center()
    ox, oy = other.center()
    return direction_from_angle(math.atan2(ry - oy, ox - rx))
