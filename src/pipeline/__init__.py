"""
End-to-end card extraction.

One scan in, one Output Record per detected card out:
decode -> detect candidates -> extract -> identify -> package.
"""

from src.pipeline.archive import package_records, save_records, unique_filenames
from src.pipeline.processor import CardExtractionPipeline, extract_cards
from src.pipeline.types import CardExtractionError, OutputRecord

__all__ = [
    "CardExtractionPipeline",
    "extract_cards",
    "CardExtractionError",
    "OutputRecord",
    "package_records",
    "save_records",
    "unique_filenames",
]
