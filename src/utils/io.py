"""
I/O Utilities

Decoding of source scans and PNG encoding of extracted cards.
"""

from pathlib import Path
from typing import Union

import cv2
import numpy as np

ImageSource = Union[str, Path, bytes, bytearray, np.ndarray]


def load_image(source: ImageSource) -> np.ndarray:
    """
    Decode a raster image (PNG, JPEG, ...) into a numpy array.

    Args:
        source: File path, encoded image bytes, or an already decoded array.

    Returns:
        Decoded image, BGR or BGRA (alpha is kept when present).

    Raises:
        FileNotFoundError: If a path does not exist.
        ValueError: If the data cannot be decoded as an image.
    """
    if isinstance(source, np.ndarray):
        return source

    if isinstance(source, (str, Path)):
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"Image not found: {path}")
        data = path.read_bytes()
    else:
        data = bytes(source)

    if not data:
        raise ValueError("Image data is empty")

    buffer = np.frombuffer(data, dtype=np.uint8)

    # IMREAD_COLOR applies the EXIF orientation tag (phone photos)
    image = cv2.imdecode(buffer, cv2.IMREAD_COLOR)
    if image is None:
        raise ValueError("Could not decode image data")

    # Alpha is only read back for formats that carry it (PNG, WebP)
    unchanged = cv2.imdecode(buffer, cv2.IMREAD_UNCHANGED)
    if (
        unchanged is not None
        and unchanged.ndim == 3
        and unchanged.shape[2] == 4
        and unchanged.shape[:2] == image.shape[:2]
    ):
        alpha = unchanged[:, :, 3]
        # 16-bit alpha is scaled down to the 8-bit range the pipeline works in
        if alpha.dtype == np.uint16:
            alpha = (alpha / 257).astype(np.uint8)
        image = np.dstack([image, alpha])

    return image


def encode_png(image: np.ndarray) -> bytes:
    """
    Encode an image as PNG.

    Raises:
        ValueError: If OpenCV fails to encode the image.
    """
    ok, buffer = cv2.imencode(".png", image)
    if not ok:
        raise ValueError(f"PNG encoding failed for image of shape {image.shape}")
    return buffer.tobytes()
