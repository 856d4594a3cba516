"""Tesseract OCR engine wrapper for card text recognition.

Example:
    >>> engine = TesseractEngine(OCREngineConfig(type="tesseract"))
    >>> result = engine.extract_text(card_image)
    >>> print(result.text, result.confidence)
    'SN 4471 AB2290X7' 0.83
"""

import logging

import numpy as np
import pytesseract

from src.extraction.preprocessing import to_grayscale

from .config_loader import OCREngineConfig
from .types import OCREngineResult

logger = logging.getLogger(__name__)


class TesseractEngine:
    """Wrapper for Tesseract OCR.

    Args:
        config: OCR engine configuration.

    Raises:
        RuntimeError: If the tesseract binary is not available.
    """

    def __init__(self, config: OCREngineConfig):
        self.config = config

        try:
            version = pytesseract.get_tesseract_version()
            logger.info(f"Tesseract engine initialized: version {version}")
        except Exception as e:
            logger.error(f"Tesseract not found or not properly configured: {e}")
            raise RuntimeError(
                "Tesseract not available. Please install Tesseract OCR.\n"
                "Windows: choco install tesseract\n"
                "Linux: sudo apt-get install tesseract-ocr\n"
                "MacOS: brew install tesseract"
            ) from e

    def extract_text(self, image: np.ndarray) -> OCREngineResult:
        """Recognize all words on a card image.

        Words are joined with single spaces in Tesseract's reading order.

        Args:
            image: Card image, grayscale or BGR/BGRA.

        Returns:
            OCREngineResult; unsuccessful and empty on any failure.
        """
        if image is None or image.size == 0:
            logger.error("Invalid image: empty or None")
            return OCREngineResult.empty()

        try:
            gray = to_grayscale(image)
            data = pytesseract.image_to_data(
                gray,
                lang=self.config.lang,
                config=f"--psm {self.config.psm}",
                output_type=pytesseract.Output.DICT,
            )
        except Exception as e:
            logger.error(f"Tesseract extraction failed: {e}", exc_info=True)
            return OCREngineResult.empty()

        words = []
        confidences = []
        for text, conf in zip(data["text"], data["conf"]):
            text = str(text).strip()
            conf = float(conf)
            # conf < 0 marks layout rows, not words
            if text and conf >= 0:
                words.append(text)
                confidences.append(conf / 100.0)

        if not words:
            logger.debug("Tesseract returned no words")
            return OCREngineResult.empty()

        result = OCREngineResult(
            text=" ".join(words),
            confidence=float(np.mean(confidences)),
            word_confidences=confidences,
            success=True,
        )

        logger.debug(
            f"Tesseract extraction successful: text='{result.text}', "
            f"confidence={result.confidence:.2f}, words={len(words)}"
        )

        return result
