"""Identifier resolution for extracted cards.

Each card gets a filename from an ordered fallback chain:
    1. BARCODE: decoded text from any linear or 2D code on the card
    2. OCR: serial-number-shaped text recognized on the card
    3. POSITIONAL: ``card_<n>`` from the card's position in processing order

A step only runs when every step before it produced nothing, and the
chosen value is always sanitized. Service failures count as "no result",
so resolution never raises.

Example:
    >>> resolver = IdentifierResolver()
    >>> identification = resolver.resolve(card.image, index=1)
    >>> resolver.filename_for(identification)
    'ABC123.png'
"""

import logging
from typing import Callable, List, Optional, Protocol, Tuple

import numpy as np

from .barcode import BarcodeDecoder
from .config_loader import IdentificationConfig, OCREngineConfig, get_default_config
from .engine_rapidocr import RapidOCREngine
from .engine_tesseract import TesseractEngine
from .text_parser import build_filename, parse_serial, sanitize_identifier
from .types import Identification, IdentifierSource, OCREngineResult

logger = logging.getLogger(__name__)


class TextRecognizer(Protocol):
    def extract_text(self, image: np.ndarray) -> OCREngineResult: ...


class CodeDecoder(Protocol):
    def decode(self, image: np.ndarray) -> Optional[str]: ...


def create_ocr_engine(config: OCREngineConfig) -> Optional[TextRecognizer]:
    """Build the configured OCR engine, or None if it is unavailable."""
    try:
        if config.type == "rapidocr":
            return RapidOCREngine(config)
        return TesseractEngine(config)
    except RuntimeError as e:
        logger.warning(f"OCR disabled: {e}")
        return None


def create_barcode_decoder(config: IdentificationConfig) -> Optional[CodeDecoder]:
    """Build the barcode decoder, or None if it cannot be configured."""
    try:
        return BarcodeDecoder(config.barcode)
    except Exception as e:
        logger.warning(f"Barcode decoding disabled: {e}")
        return None


class IdentifierResolver:
    """Resolves a sanitized identifier for each extracted card.

    Args:
        config: Identification configuration. Bundled defaults if None.
        barcode_decoder: Decoder to use instead of the zxing-cpp one.
        text_recognizer: OCR engine to use instead of the configured one.
    """

    def __init__(
        self,
        config: Optional[IdentificationConfig] = None,
        barcode_decoder: Optional[CodeDecoder] = None,
        text_recognizer: Optional[TextRecognizer] = None,
    ):
        self.config = config if config is not None else get_default_config()

        if barcode_decoder is None and self.config.barcode.enabled:
            barcode_decoder = create_barcode_decoder(self.config)
        if text_recognizer is None and self.config.ocr.enabled:
            text_recognizer = create_ocr_engine(self.config.ocr)

        self.barcode_decoder = barcode_decoder
        self.text_recognizer = text_recognizer

        self._strategies: List[
            Tuple[IdentifierSource, Callable[[np.ndarray, int], Optional[str]]]
        ] = [
            (IdentifierSource.BARCODE, self._from_barcode),
            (IdentifierSource.OCR, self._from_text),
        ]

        logger.info(
            f"IdentifierResolver ready: barcode={'on' if self.barcode_decoder else 'off'}, "
            f"ocr={'on' if self.text_recognizer else 'off'}"
        )

    def resolve(self, image: np.ndarray, index: int) -> Identification:
        """Run the fallback chain for one card.

        Args:
            image: Extracted card image.
            index: 1-based position of the card in processing order.

        Returns:
            Identification from the first step that produced a value.
        """
        for source, strategy in self._strategies:
            try:
                value = strategy(image, index)
            except Exception as e:
                logger.warning(f"Card {index}: {source.value} step failed: {e}")
                value = None

            if value:
                return self._identified(value, source, index)

            logger.debug(f"Card {index}: no result from {source.value}")

        return self._identified(
            self._from_position(index), IdentifierSource.POSITIONAL, index
        )

    def filename_for(self, identification: Identification) -> str:
        """Output filename for a resolved identification."""
        return build_filename(identification.identifier, self.config.naming.extension)

    def _identified(self, value: str, source: IdentifierSource, index: int) -> Identification:
        identifier = sanitize_identifier(value, self.config.naming.max_length)
        logger.info(f"Card {index}: identified as '{identifier}' via {source.value}")
        return Identification(identifier=identifier, source=source, raw_value=value)


    def _from_barcode(self, image: np.ndarray, index: int) -> Optional[str]:
        if self.barcode_decoder is None:
            return None
        return self.barcode_decoder.decode(image)

    def _from_text(self, image: np.ndarray, index: int) -> Optional[str]:
        if self.text_recognizer is None:
            return None

        result = self.text_recognizer.extract_text(image)
        if not result.text:
            return None

        serial = self.config.serial
        return parse_serial(
            result.text,
            min_length=serial.min_length,
            max_length=serial.max_length,
            token_count=serial.fallback_token_count,
        )

    def _from_position(self, index: int) -> str:
        return f"{self.config.naming.positional_prefix}_{index}"
