"""
Shared Utilities

Image I/O and logging setup used across all modules.
"""

from src.utils.io import encode_png, load_image
from src.utils.logging_config import setup_logging

__all__ = [
    "encode_png",
    "load_image",
    "setup_logging",
]
