"""Card Identification.

Names every extracted card through an ordered fallback chain:
barcode / 2D code -> OCR serial number -> positional ``card_<n>``.

Core Components:
    - barcode: zxing-cpp multi-format decoder
    - engine_tesseract / engine_rapidocr: OCR engine wrappers
    - text_parser: serial extraction and filename sanitization
    - resolver: the fallback chain

Example:
    >>> from src.identification import IdentifierResolver
    >>> resolver = IdentifierResolver()
    >>> identification = resolver.resolve(card_image, index=1)
    >>> print(identification.identifier, identification.source)
    card_1 IdentifierSource.POSITIONAL
"""

from .barcode import BarcodeDecoder
from .config_loader import (
    BarcodeConfig,
    IdentificationConfig,
    NamingConfig,
    OCREngineConfig,
    SerialPatternConfig,
    get_default_config,
    load_config,
)
from .resolver import IdentifierResolver, create_ocr_engine
from .text_parser import build_filename, normalize_whitespace, parse_serial, sanitize_identifier
from .types import Identification, IdentifierSource, OCREngineResult

__all__ = [
    # Types
    "Identification",
    "IdentifierSource",
    "OCREngineResult",
    # Configuration
    "IdentificationConfig",
    "BarcodeConfig",
    "OCREngineConfig",
    "SerialPatternConfig",
    "NamingConfig",
    "load_config",
    "get_default_config",
    # Services
    "BarcodeDecoder",
    "create_ocr_engine",
    "IdentifierResolver",
    # Parsing
    "normalize_whitespace",
    "parse_serial",
    "sanitize_identifier",
    "build_filename",
]
