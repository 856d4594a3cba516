"""Unit tests for the identifier fallback chain."""

from unittest.mock import Mock, patch

import numpy as np
import pytest

from src.identification.config_loader import IdentificationConfig, OCREngineConfig
from src.identification.resolver import IdentifierResolver, create_ocr_engine
from src.identification.types import IdentifierSource, OCREngineResult


@pytest.fixture
def card_image():
    return np.full((250, 400, 3), 220, dtype=np.uint8)


def _ocr(text: str) -> Mock:
    recognizer = Mock()
    recognizer.extract_text.return_value = OCREngineResult(
        text=text, confidence=0.9, word_confidences=[0.9], success=bool(text)
    )
    return recognizer


def _decoder(value) -> Mock:
    decoder = Mock()
    decoder.decode.return_value = value
    return decoder


class TestFallbackChain:
    """Test the barcode -> OCR -> positional order."""

    def test_barcode_wins(self, card_image):
        ocr = _ocr("SERIAL 998877")
        resolver = IdentifierResolver(barcode_decoder=_decoder("ABC123"), text_recognizer=ocr)

        identification = resolver.resolve(card_image, index=1)

        assert identification.identifier == "ABC123"
        assert identification.source == IdentifierSource.BARCODE
        ocr.extract_text.assert_not_called()

    def test_ocr_when_no_barcode(self, card_image):
        decoder = _decoder(None)
        resolver = IdentifierResolver(
            barcode_decoder=decoder, text_recognizer=_ocr("No. 55 XK44219A")
        )

        identification = resolver.resolve(card_image, index=1)

        decoder.decode.assert_called_once()
        assert identification.identifier == "XK44219A"
        assert identification.source == IdentifierSource.OCR

    def test_ocr_token_fallback(self, card_image):
        resolver = IdentifierResolver(
            barcode_decoder=_decoder(None), text_recognizer=_ocr("Gold Club Member Card Since")
        )

        identification = resolver.resolve(card_image, index=1)

        # "Member" is a 6-letter alphanumeric run
        assert identification.identifier == "Member"

    def test_ocr_tokens_joined_when_no_run(self, card_image):
        resolver = IdentifierResolver(
            barcode_decoder=_decoder(None), text_recognizer=_ocr("A 1 bc de fg")
        )

        assert resolver.resolve(card_image, index=1).identifier == "A_1_bc_de"

    def test_positional_when_nothing_found(self, card_image, no_barcode_decoder, no_text_recognizer):
        resolver = IdentifierResolver(
            barcode_decoder=no_barcode_decoder, text_recognizer=no_text_recognizer
        )

        identification = resolver.resolve(card_image, index=3)

        assert identification.identifier == "card_3"
        assert identification.source == IdentifierSource.POSITIONAL
        assert resolver.filename_for(identification) == "card_3.png"

    def test_positional_names_are_unique(self, card_image, no_barcode_decoder, no_text_recognizer):
        resolver = IdentifierResolver(
            barcode_decoder=no_barcode_decoder, text_recognizer=no_text_recognizer
        )

        names = [resolver.resolve(card_image, index=i).identifier for i in range(1, 6)]

        assert names == ["card_1", "card_2", "card_3", "card_4", "card_5"]

    def test_empty_barcode_text_counts_as_nothing(self, card_image):
        resolver = IdentifierResolver(
            barcode_decoder=_decoder(""), text_recognizer=_ocr("")
        )

        assert resolver.resolve(card_image, index=2).identifier == "card_2"

    def test_positional_runs_after_every_service(self, card_image, no_barcode_decoder, no_text_recognizer):
        resolver = IdentifierResolver(
            barcode_decoder=no_barcode_decoder, text_recognizer=no_text_recognizer
        )

        identification = resolver.resolve(card_image, index=7)

        no_barcode_decoder.decode.assert_called_once()
        no_text_recognizer.extract_text.assert_called_once()
        assert identification.source == IdentifierSource.POSITIONAL
        assert identification.raw_value == "card_7"


class TestServiceFailures:
    """Service errors never escape the resolver."""

    def test_barcode_exception_falls_through_to_ocr(self, card_image):
        decoder = Mock()
        decoder.decode.side_effect = RuntimeError("decoder crashed")
        resolver = IdentifierResolver(barcode_decoder=decoder, text_recognizer=_ocr("ZX998877"))

        identification = resolver.resolve(card_image, index=1)

        assert identification.identifier == "ZX998877"
        assert identification.source == IdentifierSource.OCR

    def test_ocr_exception_falls_through_to_positional(self, card_image, no_barcode_decoder):
        ocr = Mock()
        ocr.extract_text.side_effect = OSError("tesseract missing")
        resolver = IdentifierResolver(barcode_decoder=no_barcode_decoder, text_recognizer=ocr)

        assert resolver.resolve(card_image, index=4).identifier == "card_4"

    def test_disabled_services(self, card_image):
        config = IdentificationConfig()
        config.barcode.enabled = False
        config.ocr.enabled = False

        resolver = IdentifierResolver(config=config)

        assert resolver.barcode_decoder is None
        assert resolver.text_recognizer is None
        assert resolver.resolve(card_image, index=1).identifier == "card_1"


class TestSanitization:
    """Every path is sanitized."""

    def test_barcode_text_sanitized(self, card_image):
        resolver = IdentifierResolver(
            barcode_decoder=_decoder("https://x.io/c?id=7"), text_recognizer=_ocr("")
        )

        identification = resolver.resolve(card_image, index=1)

        assert identification.identifier == "https___x_io_c_id_7"
        assert identification.raw_value == "https://x.io/c?id=7"

    def test_long_barcode_truncated(self, card_image):
        resolver = IdentifierResolver(
            barcode_decoder=_decoder("9" * 120), text_recognizer=_ocr("")
        )

        assert len(resolver.resolve(card_image, index=1).identifier) == 64

    def test_positional_prefix_sanitized(self, card_image, no_barcode_decoder, no_text_recognizer):
        config = IdentificationConfig()
        config.naming.positional_prefix = "my card"

        resolver = IdentifierResolver(
            config=config, barcode_decoder=no_barcode_decoder, text_recognizer=no_text_recognizer
        )

        assert resolver.resolve(card_image, index=1).identifier == "my_card_1"

    def test_ocr_fallback_sanitized(self, card_image, no_barcode_decoder):
        resolver = IdentifierResolver(
            barcode_decoder=no_barcode_decoder, text_recognizer=_ocr("Hi, I'm #1 here")
        )

        assert resolver.resolve(card_image, index=1).identifier == "Hi__I_m__1_here"


class TestCreateOcrEngine:
    """Tests for engine construction."""

    def test_unavailable_tesseract_disables_ocr(self):
        with patch(
            "src.identification.engine_tesseract.pytesseract.get_tesseract_version",
            side_effect=EnvironmentError("not installed"),
        ):
            assert create_ocr_engine(OCREngineConfig(type="tesseract")) is None

    def test_rapidocr_engine_is_lazy(self):
        engine = create_ocr_engine(OCREngineConfig(type="rapidocr"))

        assert engine is not None
        assert engine._engine is None
