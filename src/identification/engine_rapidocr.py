"""RapidOCR engine wrapper for card text recognition.

RapidOCR (PaddleOCR models on ONNX Runtime) is an optional alternative to
Tesseract that needs no system binary. Install with the ``rapidocr`` extra.
"""

import logging
from typing import Optional

import numpy as np

from .config_loader import OCREngineConfig
from .types import OCREngineResult

logger = logging.getLogger(__name__)


class RapidOCREngine:
    """Wrapper for RapidOCR.

    The underlying engine is lazy-loaded on first use.

    Args:
        config: OCR engine configuration.
    """

    def __init__(self, config: OCREngineConfig):
        self.config = config
        self._engine: Optional[object] = None

        logger.info(f"RapidOCREngine initialized: text_score={config.text_score}")

    @property
    def engine(self):
        """Lazy-load RapidOCR engine on first access.

        Raises:
            ImportError: If rapidocr_onnxruntime is not installed.
            RuntimeError: If engine initialization fails.
        """
        if self._engine is None:
            try:
                from rapidocr_onnxruntime import RapidOCR

                self._engine = RapidOCR(text_score=self.config.text_score)
                logger.info("RapidOCR engine loaded successfully")

            except ImportError as e:
                raise ImportError(
                    "rapidocr-onnxruntime not installed. "
                    "Run: pip install rapidocr-onnxruntime"
                ) from e

            except Exception as e:
                raise RuntimeError(f"RapidOCR initialization failed: {e}") from e

        return self._engine

    def is_available(self) -> bool:
        """Check if RapidOCR engine can be initialized."""
        try:
            _ = self.engine
            return True
        except (ImportError, RuntimeError):
            return False

    def extract_text(self, image: np.ndarray) -> OCREngineResult:
        """Recognize text regions and join them with spaces.

        Args:
            image: Card image (H, W) or (H, W, 3).

        Returns:
            OCREngineResult; unsuccessful and empty on any failure.
        """
        if image is None or image.size == 0:
            logger.error("Invalid image: empty or None")
            return OCREngineResult.empty()

        try:
            # RapidOCR returns (detections, elapsed); detections is None or
            # a list of [box, text, score]
            detections, _ = self.engine(image)
        except Exception as e:
            logger.error(f"RapidOCR extraction failed: {e}", exc_info=True)
            return OCREngineResult.empty()

        if not detections:
            logger.debug("RapidOCR returned no text")
            return OCREngineResult.empty()

        texts = [str(d[1]).strip() for d in detections if str(d[1]).strip()]
        scores = [float(d[2]) for d in detections if str(d[1]).strip()]
        if not texts:
            return OCREngineResult.empty()

        return OCREngineResult(
            text=" ".join(texts),
            confidence=float(np.mean(scores)),
            word_confidences=scores,
            success=True,
        )
