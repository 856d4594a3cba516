"""
Data types for the end-to-end card extraction pipeline.
"""

from dataclasses import dataclass
from typing import Callable

from src.identification.types import IdentifierSource

ProgressCallback = Callable[[float], None]


class CardExtractionError(RuntimeError):
    """Whole-run failure: the scan could not be decoded or searched for cards."""


@dataclass(frozen=True)
class OutputRecord:
    """
    One extracted card, ready to be saved or archived.

    Attributes:
        filename: Sanitized identifier plus extension, e.g. ``ABC123.png``.
        image_bytes: PNG-encoded card image.
        width: Card width in pixels.
        height: Card height in pixels.
        source: Fallback step that produced the filename.
        index: 1-based position of the candidate in processing order.
    """

    filename: str
    image_bytes: bytes
    width: int
    height: int
    source: IdentifierSource
    index: int

    def __repr__(self) -> str:
        return (
            f"OutputRecord(filename={self.filename!r}, size={self.width}x{self.height}, "
            f"source={self.source.value}, bytes={len(self.image_bytes)})"
        )
