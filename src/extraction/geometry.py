"""
Geometry utilities for the Extraction module.

Corner classification, edge lengths and output-size derivation for
quadrilateral card candidates.
"""

import logging
from typing import Union

import numpy as np

from src.extraction.types import OrderedCorners, TargetSize

logger = logging.getLogger(__name__)

# Quads with less area than this (square pixels) cannot be warped meaningfully
DEGENERATE_AREA_EPSILON = 1.0


def order_corners(points: Union[np.ndarray, list]) -> OrderedCorners:
    """
    Classify 4 points as Top-Left, Top-Right, Bottom-Right, Bottom-Left.

    The classification only depends on coordinates, never on input order:
    - Top-Left: smallest sum (x + y)
    - Bottom-Right: largest sum (x + y)
    - Top-Right: smallest difference (y - x)
    - Bottom-Left: largest difference (y - x)

    When two points share the extreme sum or difference (a square rotated
    by exactly 45 degrees) the first one in input order is taken, so the
    same point may be classified twice. Callers detect that case with
    `is_degenerate`.

    Args:
        points: Array of 4 points with shape (4, 2) or list of [x, y] coordinates.

    Returns:
        OrderedCorners with float32 points.

    Raises:
        ValueError: If input does not contain exactly 4 points.

    Example:
        >>> corners = order_corners([[300, 150], [100, 200], [320, 400], [80, 380]])
        >>> corners.tl
        array([100., 200.], dtype=float32)
    """
    pts = np.array(points, dtype=np.float32).reshape(-1, 2)

    if pts.shape != (4, 2):
        raise ValueError(
            f"Expected exactly 4 points with shape (4, 2), got shape {pts.shape}"
        )

    s = pts.sum(axis=1)
    diff = np.diff(pts, axis=1).ravel()

    corners = OrderedCorners(
        tl=pts[np.argmin(s)],
        tr=pts[np.argmin(diff)],
        br=pts[np.argmax(s)],
        bl=pts[np.argmax(diff)],
    )

    logger.debug(
        f"Ordered corners: TL={corners.tl}, TR={corners.tr}, "
        f"BR={corners.br}, BL={corners.bl}"
    )

    return corners


def edge_length(p: Union[np.ndarray, list], q: Union[np.ndarray, list]) -> float:
    """Euclidean distance between two points."""
    p = np.asarray(p, dtype=np.float64)
    q = np.asarray(q, dtype=np.float64)
    return float(np.hypot(p[0] - q[0], p[1] - q[1]))


def target_size(corners: OrderedCorners) -> TargetSize:
    """
    Calculate the output rectangle for a quadrilateral.

    Uses the longer of each pair of opposite edges so no content is lost
    to the warp, then rounds to whole pixels with a floor of 1.

    Example:
        >>> corners = order_corners([[0, 0], [400, 0], [400, 250], [0, 250]])
        >>> target_size(corners)
        TargetSize(width=400, height=250)
    """
    width_top = edge_length(corners.tl, corners.tr)
    width_bottom = edge_length(corners.bl, corners.br)
    height_left = edge_length(corners.tl, corners.bl)
    height_right = edge_length(corners.tr, corners.br)

    width = max(1, int(round(max(width_top, width_bottom))))
    height = max(1, int(round(max(height_left, height_right))))

    logger.debug(
        f"Edge lengths - Top: {width_top:.1f}, Bottom: {width_bottom:.1f}, "
        f"Left: {height_left:.1f}, Right: {height_right:.1f} -> {width}x{height}"
    )

    return TargetSize(width=width, height=height)


def quad_area(corners: OrderedCorners) -> float:
    """Area of the quadrilateral traced TL -> TR -> BR -> BL (shoelace formula)."""
    pts = corners.to_array().astype(np.float64)
    x = pts[:, 0]
    y = pts[:, 1]
    return float(abs(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1))) / 2.0)


def is_degenerate(corners: OrderedCorners) -> bool:
    """
    Check whether ordered corners collapse to fewer than 4 distinct points
    or to a (near) zero-area shape.
    """
    pts = corners.to_array()
    if len(np.unique(pts, axis=0)) < 4:
        logger.debug("Corner classification reused a point")
        return True

    return quad_area(corners) < DEGENERATE_AREA_EPSILON
