"""
Pytest Configuration and Shared Fixtures

Synthetic scans are drawn with OpenCV on the fly, so no test assets are
required.
"""

from unittest.mock import Mock

import cv2
import numpy as np
import pytest
import zxingcpp

BACKGROUND = 30
CARD_FILL = 220


def draw_card(image: np.ndarray, corners: np.ndarray, label: str = "") -> None:
    """Fill a light quadrilateral (the card) onto a dark scan, in place."""
    cv2.fillPoly(image, [corners.astype(np.int32)], (CARD_FILL, CARD_FILL, CARD_FILL))
    if label:
        x, y = corners.astype(np.int32).min(axis=0)
        cv2.putText(
            image,
            label,
            (int(x) + 20, int(y) + 60),
            cv2.FONT_HERSHEY_SIMPLEX,
            1.0,
            (40, 40, 40),
            2,
        )


def blank_scan(width: int = 800, height: int = 600) -> np.ndarray:
    return np.full((height, width, 3), BACKGROUND, dtype=np.uint8)


@pytest.fixture
def sample_quadrilateral_points():
    """Fixture providing 4 unordered corner points (TR, TL, BR, BL)."""
    return np.array(
        [
            [300, 150],  # Top-right area
            [100, 200],  # Top-left area
            [320, 400],  # Bottom-right area
            [80, 380],  # Bottom-left area
        ],
        dtype=np.float32,
    )


@pytest.fixture
def axis_aligned_scan():
    """Scan with one axis-aligned 565x425 card covering ~50% of an 800x600 frame."""
    image = blank_scan()
    corners = np.array([[117, 87], [682, 87], [682, 512], [117, 512]], dtype=np.float32)
    draw_card(image, corners, label="MEMBER")
    return image, corners


@pytest.fixture
def rotated_scan():
    """Scan with one 400x250 card rotated by 15 degrees."""
    image = blank_scan()
    corners = cv2.boxPoints(((400, 300), (400, 250), 15)).astype(np.float32)
    draw_card(image, corners)
    return image, corners


@pytest.fixture
def portrait_scan():
    """Scan with one upright card that is taller than wide (250x400)."""
    image = blank_scan()
    corners = np.array([[275, 100], [525, 100], [525, 500], [275, 500]], dtype=np.float32)
    draw_card(image, corners)
    return image, corners


@pytest.fixture
def two_card_scan():
    """Scan with a large card on the left and a smaller one on the right."""
    image = blank_scan(1000, 600)
    large = np.array([[40, 80], [480, 80], [480, 380], [40, 380]], dtype=np.float32)
    small = np.array([[560, 200], [900, 200], [900, 420], [560, 420]], dtype=np.float32)
    draw_card(image, large)
    draw_card(image, small)
    return image, large, small


@pytest.fixture
def noise_scan():
    """Scan containing only specks far below 1% of the frame area."""
    image = blank_scan()
    rng = np.random.default_rng(7)
    for _ in range(25):
        x, y = rng.integers(20, 760), rng.integers(20, 560)
        cv2.rectangle(image, (int(x), int(y)), (int(x) + 12, int(y) + 12), (200, 200, 200), -1)
    cv2.circle(image, (400, 300), 20, (200, 200, 200), -1)
    return image


@pytest.fixture
def png_bytes():
    """Encode an image as PNG bytes."""

    def _encode(image: np.ndarray) -> bytes:
        ok, buffer = cv2.imencode(".png", image)
        assert ok
        return buffer.tobytes()

    return _encode


@pytest.fixture
def no_barcode_decoder():
    decoder = Mock()
    decoder.decode.return_value = None
    return decoder


@pytest.fixture
def no_text_recognizer():
    from src.identification.types import OCREngineResult

    recognizer = Mock()
    recognizer.extract_text.return_value = OCREngineResult.empty()
    return recognizer


@pytest.fixture
def exif_jpeg_bytes():
    """Encode an image as JPEG carrying an EXIF Orientation tag."""

    def _encode(image: np.ndarray, orientation: int) -> bytes:
        ok, buffer = cv2.imencode(".jpg", image, [cv2.IMWRITE_JPEG_QUALITY, 95])
        assert ok
        jpeg = buffer.tobytes()

        # Big-endian TIFF header, one IFD entry: tag 0x0112 (Orientation), SHORT, count 1
        tiff = (
            b"MM\x00\x2a\x00\x00\x00\x08"
            + b"\x00\x01"
            + b"\x01\x12\x00\x03\x00\x00\x00\x01"
            + orientation.to_bytes(2, "big")
            + b"\x00\x00"
            + b"\x00\x00\x00\x00"
        )
        payload = b"Exif\x00\x00" + tiff
        app1 = b"\xff\xe1" + (len(payload) + 2).to_bytes(2, "big") + payload

        # APP1 goes directly after the SOI marker
        return jpeg[:2] + app1 + jpeg[2:]

    return _encode


def render_symbol(
    text: str, barcode_format: str, max_width: int = 360, max_height: int = 150
) -> np.ndarray:
    """Render a barcode with zxing-cpp as a BGR image that fits the given box."""

    barcode = zxingcpp.create_barcode(text, getattr(zxingcpp.BarcodeFormat, barcode_format))
    unit = np.array(barcode.to_image(scale=1), dtype=np.uint8)
    scale = max(1, min(max_width // unit.shape[1], max_height // unit.shape[0]))
    symbol = np.array(barcode.to_image(scale=scale), dtype=np.uint8)
    if symbol.ndim == 3:
        symbol = symbol[:, :, 0]

    # Linear codes repeat the same row, so height can be padded or cut
    if symbol.shape[0] < 80:
        symbol = np.repeat(symbol, -(-80 // symbol.shape[0]), axis=0)
    if symbol.shape[0] > max_height:
        top = (symbol.shape[0] - max_height) // 2
        symbol = symbol[top : top + max_height]

    return cv2.cvtColor(symbol, cv2.COLOR_GRAY2BGR)


@pytest.fixture
def barcode_card_scan():
    """Scan with a 400x250 card carrying a Code128 "ABC123", rotated by 15 degrees."""
    card = np.full((250, 400, 3), CARD_FILL, dtype=np.uint8)
    symbol = render_symbol("ABC123", "Code128")
    h, w = symbol.shape[:2]
    y, x = (250 - h) // 2, (400 - w) // 2
    card[y : y + h, x : x + w] = symbol

    image = blank_scan()
    image[175:425, 200:600] = card
    rotation = cv2.getRotationMatrix2D((400, 300), 15, 1.0)
    return cv2.warpAffine(
        image, rotation, (800, 600), borderValue=(BACKGROUND, BACKGROUND, BACKGROUND)
    )


@pytest.fixture
def symbol_image():
    """Render a zxing-cpp barcode (see render_symbol)."""
    return render_symbol
