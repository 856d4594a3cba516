"""
Main processor for the Extraction module.

Two entry points, matching the two failure domains of a run:
1. detect_candidates: whole-image preprocessing and candidate filtering
2. extract: perspective correction of one candidate
"""

import logging
from pathlib import Path
from typing import List, Optional

import numpy as np

from src.common.types import ImageBuffer
from src.extraction.candidate_filter import filter_candidates
from src.extraction.config_loader import load_config
from src.extraction.perspective import extract_card
from src.extraction.preprocessing import build_edge_map, find_polygons
from src.extraction.types import (
    DegenerateQuadrilateralError,
    ExtractedCard,
    ExtractionConfig,
    QuadCandidate,
)

logger = logging.getLogger(__name__)


class ExtractionProcessor:
    """
    Locates card-shaped quadrilaterals in a scan and deskews each of them.

    Example:
        >>> processor = ExtractionProcessor()
        >>> source = ImageBuffer(data=cv2.imread("scan.jpg"))
        >>> for i, candidate in enumerate(processor.detect_candidates(source), 1):
        ...     card = processor.extract(source, candidate, i)
        ...     cv2.imwrite(f"card_{i}.png", card.image)
    """

    def __init__(
        self,
        config: Optional[ExtractionConfig] = None,
        config_path: Optional[Path] = None,
    ):
        """
        Initialize the extraction processor.

        Args:
            config: Pre-loaded configuration object. If None, will load from file.
            config_path: Path to config file. If None, uses default location.
        """
        if config is not None:
            self.config = config
            logger.info("Using provided extraction configuration")
        else:
            self.config = load_config(config_path) if config_path else load_config()
            logger.info("Loaded extraction configuration from file")

    def detect_candidates(self, source: ImageBuffer) -> List[QuadCandidate]:
        """
        Run whole-image detection: edge map -> polygons -> ranked quadrilaterals.

        Any exception raised here is a whole-run failure for the caller.
        """
        edge_map = build_edge_map(source.data, self.config.preprocessing)
        polygons = find_polygons(edge_map, self.config.candidates)
        del edge_map

        return filter_candidates(
            polygons,
            image_area=float(source.area),
            min_area_ratio=self.config.candidates.min_area_ratio,
        )

    def extract(
        self, source: ImageBuffer, candidate: QuadCandidate, index: int
    ) -> ExtractedCard:
        """
        Deskew a single candidate.

        Raises:
            DegenerateQuadrilateralError: If the candidate cannot be warped.
        """
        return extract_card(source.data, candidate, self.config.warp, index)


def extract_all(
    image: np.ndarray, config: Optional[ExtractionConfig] = None
) -> List[ExtractedCard]:
    """
    Convenience function: detect and extract every card in an image.

    Candidates that cannot be warped are skipped.
    """
    processor = ExtractionProcessor(config=config)
    source = ImageBuffer(data=image)

    cards = []
    for index, candidate in enumerate(processor.detect_candidates(source), start=1):
        try:
            cards.append(processor.extract(source, candidate, index))
        except DegenerateQuadrilateralError as e:
            logger.warning(f"Skipping candidate {index}: {e}")
    return cards
