"""
End-to-end card extraction pipeline.

Sequences the modules for one scan:
1. Decode the source image
2. Detect quadrilateral candidates (whole image)
3. For each candidate, in ranked order: extract -> encode -> identify
4. Collect Output Records

Steps 1-2 are fail-whole-run: any error becomes a single
CardExtractionError and no records are returned. Step 3 is isolated per
candidate: a candidate that cannot be extracted is logged and dropped.
"""

import logging
from pathlib import Path
from typing import List, Optional

import cv2
import numpy as np

from src.common.types import ImageBuffer
from src.extraction.processor import ExtractionProcessor
from src.extraction.types import DegenerateQuadrilateralError, ExtractionConfig, QuadCandidate
from src.identification.config_loader import IdentificationConfig
from src.identification.resolver import IdentifierResolver
from src.pipeline.types import CardExtractionError, OutputRecord, ProgressCallback
from src.utils.io import ImageSource, encode_png, load_image

logger = logging.getLogger(__name__)


class CardExtractionPipeline:
    """
    Extracts every card from a single scanned photograph.

    Example:
        >>> pipeline = CardExtractionPipeline()
        >>> records = pipeline.run("scan.jpg", progress_callback=print)
        0.5
        1.0
        >>> [r.filename for r in records]
        ['ABC123.png', 'card_2.png']
    """

    def __init__(
        self,
        extraction_config: Optional[ExtractionConfig] = None,
        identification_config: Optional[IdentificationConfig] = None,
        extraction_config_path: Optional[Path] = None,
        extractor: Optional[ExtractionProcessor] = None,
        resolver: Optional[IdentifierResolver] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            extraction_config: Detection/warp settings. Loaded from file if None.
            identification_config: Naming settings. Bundled defaults if None.
            extraction_config_path: Alternative extraction config file.
            extractor: Pre-built extraction processor (overrides the configs).
            resolver: Pre-built identifier resolver (overrides the configs).
        """
        self.extractor = extractor or ExtractionProcessor(
            config=extraction_config, config_path=extraction_config_path
        )
        self.resolver = resolver or IdentifierResolver(config=identification_config)

    def run(
        self,
        source: ImageSource,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> List[OutputRecord]:
        """
        Run the pipeline on one scan.

        Args:
            source: Image path, encoded bytes, or decoded uint8 array.
            progress_callback: Called with completed/total after every candidate.

        Returns:
            Output Records in candidate order (possibly empty).

        Raises:
            CardExtractionError: If the scan cannot be decoded or detection fails.
        """
        logger.info("=" * 60)
        logger.info("Starting Card Extraction Pipeline")
        logger.info("=" * 60)

        logger.info("[Stage 1/3] Loading source image")
        image = self._load_source(source)
        logger.info(f"Source image: {image.width}x{image.height}, {image.channels} channel(s)")

        logger.info("[Stage 2/3] Detecting card candidates")
        try:
            candidates = self.extractor.detect_candidates(image)
        except Exception as e:
            logger.error(f"Card detection failed: {e}", exc_info=True)
            raise CardExtractionError(f"Card detection failed: {e}") from e

        logger.info(f"[Stage 3/3] Extracting {len(candidates)} candidate(s)")
        records: List[OutputRecord] = []
        total = len(candidates)

        for index, candidate in enumerate(candidates, start=1):
            record = self._process_candidate(image, candidate, index)
            if record is not None:
                records.append(record)
            _report(progress_callback, index / total)

        if total == 0:
            _report(progress_callback, 1.0)

        logger.info("=" * 60)
        logger.info(
            f"Pipeline finished: {len(records)} card(s) extracted, "
            f"{total - len(records)} candidate(s) skipped"
        )
        logger.info("=" * 60)

        return records

    def _load_source(self, source: ImageSource) -> ImageBuffer:
        try:
            return ImageBuffer(data=load_image(source))
        except Exception as e:
            logger.error(f"Could not load source image: {e}")
            raise CardExtractionError(f"Could not load source image: {e}") from e

    def _process_candidate(
        self, image: ImageBuffer, candidate: QuadCandidate, index: int
    ) -> Optional[OutputRecord]:
        """
        Extract, encode and name one candidate.

        Buffers created here (warped, trimmed, rotated card) are released
        when this call returns, on success or failure.
        """
        try:
            card = self.extractor.extract(image, candidate, index)
            image_bytes = encode_png(card.image)
        except (DegenerateQuadrilateralError, ValueError, cv2.error) as e:
            logger.warning(f"Skipping candidate {index}: {e}")
            return None

        logger.debug(
            f"Candidate {index} warped from corners "
            f"{np.round(card.corners.to_array()).astype(int).tolist()}"
        )

        identification = self.resolver.resolve(card.image, index)

        return OutputRecord(
            filename=self.resolver.filename_for(identification),
            image_bytes=image_bytes,
            width=card.width,
            height=card.height,
            source=identification.source,
            index=index,
        )


def _report(callback: Optional[ProgressCallback], fraction: float) -> None:
    if callback is not None:
        callback(fraction)


def extract_cards(
    source: ImageSource,
    progress_callback: Optional[ProgressCallback] = None,
    extraction_config: Optional[ExtractionConfig] = None,
    identification_config: Optional[IdentificationConfig] = None,
) -> List[OutputRecord]:
    """
    Convenience function for one-shot card extraction.

    Example:
        >>> records = extract_cards(Path("scan.jpg").read_bytes())
        >>> for record in records:
        ...     Path(record.filename).write_bytes(record.image_bytes)
    """
    pipeline = CardExtractionPipeline(
        extraction_config=extraction_config,
        identification_config=identification_config,
    )
    return pipeline.run(source, progress_callback=progress_callback)
