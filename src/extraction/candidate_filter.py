"""
Candidate filtering for detected polygons.

Keeps card-sized quadrilaterals and ranks them largest first. Overlapping
or nested quadrilaterals are all kept; each one is extracted on its own.
"""

import logging
from typing import Iterable, List

from src.extraction.types import Polygon, QuadCandidate

logger = logging.getLogger(__name__)


def filter_candidates(
    polygons: Iterable[Polygon],
    image_area: float,
    min_area_ratio: float = 0.01,
) -> List[QuadCandidate]:
    """
    Select quadrilateral candidates from approximated polygons.

    A polygon survives when it has exactly 4 vertices and its area is
    strictly greater than `min_area_ratio * image_area`. Survivors are
    sorted by area, descending; ties keep their detection order.

    Args:
        polygons: Polygons from `find_polygons`.
        image_area: Source image area in square pixels.
        min_area_ratio: Minimum area as a fraction of the source image.

    Returns:
        Ranked list of QuadCandidate.

    Example:
        >>> candidates = filter_candidates(polygons, image_area=1600 * 1200)
        >>> [c.area for c in candidates]
        [412000.0, 398500.0]
    """
    min_area = min_area_ratio * image_area

    candidates = []
    rejected_shape = 0
    rejected_area = 0
    for polygon in polygons:
        if polygon.vertex_count != 4:
            rejected_shape += 1
            continue
        if polygon.area <= min_area:
            rejected_area += 1
            continue
        candidates.append(QuadCandidate(points=polygon.points, area=polygon.area))

    candidates.sort(key=lambda c: c.area, reverse=True)

    logger.info(
        f"Kept {len(candidates)} quadrilateral candidates "
        f"(rejected: {rejected_shape} non-quad, {rejected_area} below "
        f"{min_area:.0f}px area)"
    )

    return candidates
