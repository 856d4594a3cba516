"""Configuration loader with Pydantic validation for the Identification module.

This module provides type-safe configuration loading from YAML files using
Pydantic models for validation and default values.
"""

from pathlib import Path
from typing import List

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator


class BarcodeConfig(BaseModel):
    """Barcode decoding configuration.

    Attributes:
        enabled: Try barcode decoding before OCR
        formats: zxing-cpp format names to search for
        try_rotate: Let the decoder also search rotated orientations
    """

    enabled: bool = True
    formats: List[str] = Field(
        default_factory=lambda: [
            "Code128",
            "Code39",
            "EAN13",
            "EAN8",
            "ITF",
            "QRCode",
            "PDF417",
            "DataMatrix",
        ]
    )
    try_rotate: bool = True

    @field_validator("formats")
    @classmethod
    def _require_formats(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("At least one barcode format must be configured")
        return v


class OCREngineConfig(BaseModel):
    """OCR engine configuration.

    Attributes:
        enabled: Try text recognition when no barcode is found
        type: Engine type ("tesseract" or "rapidocr")
        lang: Tesseract language code
        psm: Tesseract page segmentation mode
        text_score: RapidOCR minimum text confidence (0.0-1.0)
    """

    enabled: bool = True
    type: str = "tesseract"
    lang: str = "eng"
    psm: int = Field(default=6, ge=0, le=13)
    text_score: float = Field(default=0.5, ge=0.0, le=1.0)

    @field_validator("type")
    @classmethod
    def _known_engine(cls, v: str) -> str:
        v = v.lower()
        if v not in ("tesseract", "rapidocr"):
            raise ValueError(f"Unknown OCR engine type: {v}")
        return v


class SerialPatternConfig(BaseModel):
    """Shape of a serial number picked out of OCR text.

    Attributes:
        min_length: Shortest alphanumeric run accepted as a serial
        max_length: Longest alphanumeric run accepted as a serial
        fallback_token_count: Tokens joined when no serial-shaped run exists
    """

    min_length: int = Field(default=6, ge=1)
    max_length: int = Field(default=24, ge=1)
    fallback_token_count: int = Field(default=4, ge=1)

    @model_validator(mode="after")
    def _check_range(self) -> "SerialPatternConfig":
        if self.min_length > self.max_length:
            raise ValueError(
                f"min_length ({self.min_length}) must not exceed max_length ({self.max_length})"
            )
        return self


class NamingConfig(BaseModel):
    """Output filename configuration.

    Attributes:
        positional_prefix: Prefix of the fallback name (``card_<n>``)
        max_length: Maximum identifier length before the extension
        extension: File extension appended to every identifier
    """

    positional_prefix: str = "card"
    max_length: int = Field(default=64, ge=1)
    extension: str = ".png"


class IdentificationConfig(BaseModel):
    """Complete identification module configuration."""

    barcode: BarcodeConfig = Field(default_factory=BarcodeConfig)
    ocr: OCREngineConfig = Field(default_factory=OCREngineConfig)
    serial: SerialPatternConfig = Field(default_factory=SerialPatternConfig)
    naming: NamingConfig = Field(default_factory=NamingConfig)


def load_config(config_path: Path) -> IdentificationConfig:
    """Load and validate configuration from YAML file.

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated IdentificationConfig object

    Raises:
        FileNotFoundError: If config file does not exist
        yaml.YAMLError: If YAML parsing fails
        pydantic.ValidationError: If configuration validation fails

    Example:
        >>> config = load_config(Path("src/identification/config.yaml"))
        >>> print(config.naming.max_length)
        64
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        config_dict = yaml.safe_load(f) or {}

    return IdentificationConfig(**config_dict)


def get_default_config() -> IdentificationConfig:
    """Get default configuration from bundled config.yaml file.

    Falls back to the model defaults if the bundled file is missing.
    """
    default_config_path = Path(__file__).parent / "config.yaml"
    if default_config_path.exists():
        return load_config(default_config_path)
    else:
        return IdentificationConfig()
