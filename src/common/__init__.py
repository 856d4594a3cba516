"""
Common types shared across modules.

Provides the validated image wrapper used as the pipeline's source image.
"""

from src.common.types import ImageBuffer

__all__ = ["ImageBuffer"]
