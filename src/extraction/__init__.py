"""
Card Detection & Extraction

Finds card-shaped quadrilaterals in a scanned photograph and maps each one
onto an upright, landscape rectangle.

Pipeline stages:
1. Preprocessing (grayscale, blur, Canny edges, morphological close)
2. Polygon approximation of external contours
3. Candidate filtering (4 vertices, area above 1% of the scan, largest first)
4. Perspective correction, border trim and landscape normalization
"""

from src.extraction.candidate_filter import filter_candidates
from src.extraction.config_loader import load_config
from src.extraction.geometry import edge_length, order_corners, target_size
from src.extraction.perspective import extract_card
from src.extraction.processor import ExtractionProcessor, extract_all
from src.extraction.types import (
    DegenerateQuadrilateralError,
    ExtractedCard,
    ExtractionConfig,
    OrderedCorners,
    QuadCandidate,
    TargetSize,
)

__all__ = [
    "ExtractionProcessor",
    "extract_all",
    "load_config",
    "filter_candidates",
    "extract_card",
    "order_corners",
    "edge_length",
    "target_size",
    "DegenerateQuadrilateralError",
    "ExtractedCard",
    "ExtractionConfig",
    "OrderedCorners",
    "QuadCandidate",
    "TargetSize",
]
