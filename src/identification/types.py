"""Type definitions for the Identification module."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class IdentifierSource(Enum):
    """Which step of the fallback chain produced an identifier."""

    BARCODE = "barcode"
    OCR = "ocr"
    POSITIONAL = "positional"


@dataclass
class Identification:
    """Resolved, sanitized identifier for one extracted card.

    Attributes:
        identifier: Sanitized name without extension (``[A-Za-z0-9_-]{1,64}``)
        source: Fallback step that produced it
        raw_value: Unsanitized value as returned by that step
    """

    identifier: str
    source: IdentifierSource
    raw_value: str


@dataclass
class OCREngineResult:
    """Result from OCR engine text extraction.

    Attributes:
        text: Recognized text, words separated by spaces (may be empty).
        confidence: Average word confidence (0.0-1.0).
        word_confidences: Per-word confidence scores.
        success: Whether any text was recognized.
    """

    text: str
    confidence: float
    word_confidences: List[float] = field(default_factory=list)
    success: bool = False

    @classmethod
    def empty(cls) -> "OCREngineResult":
        return cls(text="", confidence=0.0, word_confidences=[], success=False)
