"""
Whole-image preprocessing for card detection.

Builds a closed binary edge map from the scan and approximates every
external contour in it by a polygon.
"""

import logging
from typing import List

import cv2
import numpy as np

from src.extraction.types import CandidateConfig, Polygon, PreprocessingConfig

logger = logging.getLogger(__name__)


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """Convert a gray, BGR or BGRA image to single-channel grayscale."""
    if image.ndim == 2:
        return image
    channels = image.shape[2]
    if channels == 1:
        return image[:, :, 0]
    if channels == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    if channels == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2GRAY)
    raise ValueError(f"Unsupported channel count: {channels}")


def build_edge_map(image: np.ndarray, config: PreprocessingConfig) -> np.ndarray:
    """
    Turn the source image into a binary edge map with small gaps closed.

    Stages: grayscale -> Gaussian blur -> Canny -> morphological close.
    Intermediate buffers are local to this call.

    Args:
        image: Source image (H, W) or (H, W, C).
        config: Preprocessing parameters.

    Returns:
        uint8 edge map with shape (H, W).
    """
    gray = to_grayscale(image)

    k = config.blur_kernel_size
    blurred = cv2.GaussianBlur(gray, (k, k), 0)

    edged = cv2.Canny(
        blurred, config.canny_low_threshold, config.canny_high_threshold
    )

    m = config.morph_kernel_size
    kernel = cv2.getStructuringElement(cv2.MORPH_RECT, (m, m))
    closed = cv2.morphologyEx(edged, cv2.MORPH_CLOSE, kernel)

    logger.debug(
        f"Edge map built: {int(np.count_nonzero(closed))} edge pixels "
        f"({closed.shape[1]}x{closed.shape[0]})"
    )

    return closed


def find_polygons(edge_map: np.ndarray, config: CandidateConfig) -> List[Polygon]:
    """
    Approximate each outer contour of the edge map by a polygon.

    Only external contours are traced. The approximation tolerance is
    `approx_epsilon_ratio` times the closed contour perimeter.

    Args:
        edge_map: Binary edge map from `build_edge_map`.
        config: Candidate parameters (approximation tolerance).

    Returns:
        One Polygon per contour, in contour-tracing order.
    """
    contours, _ = cv2.findContours(
        edge_map, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE
    )

    polygons = []
    for contour in contours:
        perimeter = cv2.arcLength(contour, True)
        approx = cv2.approxPolyDP(
            contour, config.approx_epsilon_ratio * perimeter, True
        )
        polygons.append(
            Polygon(
                points=approx.reshape(-1, 2),
                area=float(cv2.contourArea(approx)),
            )
        )

    logger.info(f"Found {len(polygons)} external contours")

    return polygons
