"""
Data types and structures for the Extraction module.

Provides type-safe containers for configuration, quadrilateral candidates
and the deskewed card images produced from them.
"""

from dataclasses import dataclass
from typing import NamedTuple

import numpy as np


class DegenerateQuadrilateralError(ValueError):
    """Raised when a candidate's corners cannot define a perspective transform."""


@dataclass
class PreprocessingConfig:
    """Configuration for the edge map built from the source image."""

    blur_kernel_size: int  # Gaussian blur kernel (odd)
    canny_low_threshold: float
    canny_high_threshold: float
    morph_kernel_size: int  # Square structuring element for closing (odd)


@dataclass
class CandidateConfig:
    """Configuration for polygon approximation and candidate filtering."""

    approx_epsilon_ratio: float  # Tolerance as a fraction of contour perimeter
    min_area_ratio: float  # Minimum candidate area relative to the source image


@dataclass
class WarpConfig:
    """Configuration for perspective correction of a single candidate."""

    interpolation: str  # "cubic", "linear", "lanczos", ...
    border_trim_px: int
    rotate_direction: str  # "clockwise" or "counterclockwise"


@dataclass
class ExtractionConfig:
    """Complete extraction module configuration."""

    preprocessing: PreprocessingConfig
    candidates: CandidateConfig
    warp: WarpConfig


@dataclass
class Polygon:
    """
    A polygon approximated from one external contour.

    Attributes:
        points: Vertices with shape (N, 2), integer pixel coordinates.
        area: Contour area in square pixels.
    """

    points: np.ndarray
    area: float

    @property
    def vertex_count(self) -> int:
        return int(self.points.shape[0])


@dataclass
class QuadCandidate:
    """
    A 4-vertex polygon large enough to plausibly bound a card.

    Attributes:
        points: Exactly four integer points with shape (4, 2), in the order
            they came out of polygon approximation (not yet classified).
        area: Polygon area in square pixels.
    """

    points: np.ndarray
    area: float

    def __post_init__(self) -> None:
        self.points = np.asarray(self.points, dtype=np.int32).reshape(-1, 2)
        if self.points.shape != (4, 2):
            raise ValueError(
                f"Quadrilateral candidate needs exactly 4 points, got {self.points.shape[0]}"
            )


class OrderedCorners(NamedTuple):
    """Corners of a quadrilateral classified by position."""

    tl: np.ndarray
    tr: np.ndarray
    br: np.ndarray
    bl: np.ndarray

    def to_array(self) -> np.ndarray:
        """Stack corners into a float32 array of shape (4, 2) in TL, TR, BR, BL order."""
        return np.array([self.tl, self.tr, self.br, self.bl], dtype=np.float32)


class TargetSize(NamedTuple):
    """Output canvas size for one candidate, in whole pixels (each >= 1)."""

    width: int
    height: int


@dataclass
class ExtractedCard:
    """
    A deskewed, trimmed, landscape-oriented card image.

    Attributes:
        image: Pixel buffer with the same channel layout as the source.
        index: 1-based position of the candidate in processing order.
        corners: Corners in the source image the card was warped from.
    """

    image: np.ndarray
    index: int
    corners: OrderedCorners

    @property
    def width(self) -> int:
        return int(self.image.shape[1])

    @property
    def height(self) -> int:
        return int(self.image.shape[0])
