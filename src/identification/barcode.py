"""Barcode and 2D-code decoding for extracted cards.

Wraps zxing-cpp. Any decoder failure is reported as "no barcode" so the
identification chain can move on to text recognition.

Example:
    >>> decoder = BarcodeDecoder(BarcodeConfig())
    >>> decoder.decode(card_image)
    'ABC123'
"""

import logging
from typing import Optional

import numpy as np
import zxingcpp

from src.extraction.preprocessing import to_grayscale

from .config_loader import BarcodeConfig

logger = logging.getLogger(__name__)


class BarcodeDecoder:
    """Multi-format barcode reader (linear and 2D symbologies).

    Args:
        config: Barcode configuration (formats to search for).
    """

    def __init__(self, config: BarcodeConfig):
        self.config = config
        self._formats = zxingcpp.barcode_formats_from_str(",".join(config.formats))

        logger.info(f"BarcodeDecoder initialized with formats: {config.formats}")

    def decode(self, image: np.ndarray) -> Optional[str]:
        """Decode the first readable barcode in the image.

        Args:
            image: Card image, grayscale or BGR/BGRA.

        Returns:
            Decoded text verbatim, or None when nothing was found.
        """
        if image is None or image.size == 0:
            logger.error("Invalid image: empty or None")
            return None

        try:
            gray = np.ascontiguousarray(to_grayscale(image))
            results = zxingcpp.read_barcodes(
                gray, formats=self._formats, try_rotate=self.config.try_rotate
            )
        except Exception as e:
            logger.warning(f"Barcode decoding failed: {e}")
            return None

        for result in results:
            if result.valid and result.text:
                logger.info(f"Decoded {result.format} barcode: '{result.text}'")
                return result.text

        logger.debug("No barcode found")
        return None
