"""
Perspective Extraction

Maps one quadrilateral candidate of the scan onto an upright rectangle,
trims the warped border and normalizes the result to landscape.
"""

import logging

import cv2
import numpy as np

from src.extraction.geometry import is_degenerate, order_corners, target_size
from src.extraction.types import (
    DegenerateQuadrilateralError,
    ExtractedCard,
    QuadCandidate,
    TargetSize,
    WarpConfig,
)

logger = logging.getLogger(__name__)

INTERPOLATION_FLAGS = {
    "nearest": cv2.INTER_NEAREST,
    "linear": cv2.INTER_LINEAR,
    "cubic": cv2.INTER_CUBIC,
    "area": cv2.INTER_AREA,
    "lanczos": cv2.INTER_LANCZOS4,
}

ROTATION_CODES = {
    "clockwise": cv2.ROTATE_90_CLOCKWISE,
    "counterclockwise": cv2.ROTATE_90_COUNTERCLOCKWISE,
}

# Below this |det| the homography is treated as singular
SINGULAR_DET_EPSILON = 1e-12


def compute_transform(src: np.ndarray, size: TargetSize) -> np.ndarray:
    """
    Build the forward mapping from ordered source corners to the output rectangle.

    TL -> (0, 0), TR -> (width, 0), BR -> (width, height), BL -> (0, height).

    Raises:
        DegenerateQuadrilateralError: If the resulting matrix is singular.
    """
    dst = np.array(
        [
            [0, 0],
            [size.width, 0],
            [size.width, size.height],
            [0, size.height],
        ],
        dtype=np.float32,
    )

    matrix = cv2.getPerspectiveTransform(src.astype(np.float32), dst)

    if not np.all(np.isfinite(matrix)) or abs(np.linalg.det(matrix)) < SINGULAR_DET_EPSILON:
        raise DegenerateQuadrilateralError("Perspective transform is singular")

    return matrix


def trim_border(image: np.ndarray, trim_px: int) -> np.ndarray:
    """
    Remove `trim_px` pixels from every side.

    An axis too short for the full trim keeps a single pixel, starting at
    offset `trim_px` where the image is that wide.
    """
    h, w = image.shape[:2]
    x0, y0 = min(trim_px, w - 1), min(trim_px, h - 1)
    out_w, out_h = max(1, w - 2 * trim_px), max(1, h - 2 * trim_px)
    return image[y0 : y0 + out_h, x0 : x0 + out_w]



def normalize_orientation(image: np.ndarray, direction: str = "clockwise") -> np.ndarray:
    """Rotate by 90 degrees when the image is taller than wide."""
    h, w = image.shape[:2]
    if h > w:
        logger.debug(f"Rotating {w}x{h} card to landscape ({direction})")
        return cv2.rotate(image, ROTATION_CODES[direction])
    return image


def extract_card(
    image: np.ndarray,
    candidate: QuadCandidate,
    config: WarpConfig,
    index: int,
) -> ExtractedCard:
    """
    Extract one card from the source image.

    Steps:
    1. Order the candidate's corners
    2. Derive the target rectangle from its edge lengths
    3. Compute the perspective transform
    4. Warp the full source into the target rectangle (edge-replicated border)
    5. Trim the warped border
    6. Rotate portrait results to landscape

    Args:
        image: Source image (never modified).
        candidate: Quadrilateral to extract.
        config: Warp parameters.
        index: 1-based position of the candidate in processing order.

    Returns:
        ExtractedCard with width >= height and both >= 1.

    Raises:
        DegenerateQuadrilateralError: If the corners are collinear, collapse
            onto each other or produce a singular transform.
    """
    corners = order_corners(candidate.points)
    if is_degenerate(corners):
        raise DegenerateQuadrilateralError(
            f"Candidate {index} has degenerate corners: {candidate.points.tolist()}"
        )

    size = target_size(corners)
    matrix = compute_transform(corners.to_array(), size)

    warped = cv2.warpPerspective(
        image,
        matrix,
        (size.width, size.height),
        flags=INTERPOLATION_FLAGS[config.interpolation],
        borderMode=cv2.BORDER_REPLICATE,
    )

    trimmed = trim_border(warped, config.border_trim_px)
    oriented = normalize_orientation(trimmed, config.rotate_direction)

    logger.info(
        f"Extracted card {index}: {oriented.shape[1]}x{oriented.shape[0]} "
        f"(candidate area {candidate.area:.0f}px)"
    )

    return ExtractedCard(image=np.ascontiguousarray(oriented), index=index, corners=corners)
