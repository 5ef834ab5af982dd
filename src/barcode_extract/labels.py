"""
Label association: pick the text line that most likely names a barcode.

Labels are usually directly below a code, sometimes beside it and rarely
above it. Candidates are ranked by center-to-center distance with a
direction-dependent penalty.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .config import LabelWeights
from .contracts import BBox, Size, TextLine
from .geometry import CardinalDirection, center_distance, direction_of

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LabelCandidate:
    line: TextLine
    direction: CardinalDirection
    distance: float  # penalized


def _penalty(direction: CardinalDirection, weights: LabelWeights) -> float:
    if direction == CardinalDirection.NORTH:
        return weights.north
    if direction in (CardinalDirection.EAST, CardinalDirection.WEST):
        return weights.east_west
    return weights.south


def label_candidates(
    bbox: BBox,
    text_lines: list[TextLine],
    *,
    page_size: Size,
    weights: LabelWeights | None = None,
) -> list[LabelCandidate]:
    """Surviving candidates in enumeration order. `bbox` and all lines are pixel-space."""

    weights = weights or LabelWeights()

    # Lines closer than half the code's short side are artifacts of the code itself.
    min_distance = min(int(bbox.width()) // 2, int(bbox.height()) // 2)
    max_distance = max(page_size.width, page_size.height) * weights.max_distance_ratio

    candidates: list[LabelCandidate] = []
    for line in text_lines:
        distance = center_distance(bbox, line.bbox)
        if distance >= max_distance or distance <= min_distance or bbox.contains(line.bbox):
            continue

        direction = direction_of(bbox, line.bbox)
        distance += distance * _penalty(direction, weights)
        candidates.append(LabelCandidate(line=line, direction=direction, distance=distance))
    return candidates


def associate_label(
    bbox: BBox,
    text_lines: list[TextLine],
    *,
    page_size: Size,
    weights: LabelWeights | None = None,
) -> str | None:
    candidates = label_candidates(bbox, text_lines, page_size=page_size, weights=weights)
    if not candidates:
        return None

    # min() keeps the first of equal distances
    best = min(candidates, key=lambda c: c.distance)
    logger.debug(
        "Label %r selected (%s, score %.1f) out of %d candidates",
        best.line.text,
        best.direction.value,
        best.distance,
        len(candidates),
    )
    return best.line.text.strip()
