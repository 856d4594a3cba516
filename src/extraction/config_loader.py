"""
Configuration loader for the Extraction module.

Loads and validates configuration from config.yaml file.
"""

import logging
from pathlib import Path
from typing import Any, Dict

import yaml

from src.extraction.types import (
    CandidateConfig,
    ExtractionConfig,
    PreprocessingConfig,
    WarpConfig,
)

logger = logging.getLogger(__name__)

# Default configuration path (relative to this file)
DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"

VALID_INTERPOLATIONS = ["nearest", "linear", "cubic", "area", "lanczos"]
VALID_ROTATIONS = ["clockwise", "counterclockwise"]


def load_config(config_path: Path = DEFAULT_CONFIG_PATH) -> ExtractionConfig:
    """
    Load extraction configuration from YAML file.

    Args:
        config_path: Path to the configuration YAML file.

    Returns:
        Validated ExtractionConfig object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config is invalid or missing required fields.

    Example:
        >>> config = load_config()
        >>> print(config.candidates.min_area_ratio)
        0.01
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    logger.debug(f"Loading extraction config from {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        raw_config = yaml.safe_load(f)

    try:
        config = _parse_config(raw_config)
        _validate_config(config)
        logger.info("Successfully loaded extraction configuration")
        return config
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Invalid configuration file: {e}") from e


def _parse_config(raw: Dict[str, Any]) -> ExtractionConfig:
    """Parse raw dictionary into structured config objects."""
    return ExtractionConfig(
        preprocessing=PreprocessingConfig(
            blur_kernel_size=int(raw["preprocessing"]["blur_kernel_size"]),
            canny_low_threshold=float(raw["preprocessing"]["canny_low_threshold"]),
            canny_high_threshold=float(raw["preprocessing"]["canny_high_threshold"]),
            morph_kernel_size=int(raw["preprocessing"]["morph_kernel_size"]),
        ),
        candidates=CandidateConfig(
            approx_epsilon_ratio=float(raw["candidates"]["approx_epsilon_ratio"]),
            min_area_ratio=float(raw["candidates"]["min_area_ratio"]),
        ),
        warp=WarpConfig(
            interpolation=str(raw["warp"]["interpolation"]),
            border_trim_px=int(raw["warp"]["border_trim_px"]),
            rotate_direction=str(raw["warp"]["rotate_direction"]),
        ),
    )


def _validate_config(config: ExtractionConfig) -> None:
    """
    Validate configuration values for logical consistency.

    Raises:
        ValueError: If any configuration value is invalid.
    """
    pre = config.preprocessing
    for name, size in (
        ("blur_kernel_size", pre.blur_kernel_size),
        ("morph_kernel_size", pre.morph_kernel_size),
    ):
        if size < 1 or size % 2 == 0:
            raise ValueError(f"{name} must be a positive odd integer, got {size}")

    if pre.canny_low_threshold < 0:
        raise ValueError("canny_low_threshold cannot be negative")

    if pre.canny_low_threshold >= pre.canny_high_threshold:
        raise ValueError(
            f"canny_low_threshold ({pre.canny_low_threshold}) must be less than "
            f"canny_high_threshold ({pre.canny_high_threshold})"
        )

    if not 0 < config.candidates.approx_epsilon_ratio < 1:
        raise ValueError("approx_epsilon_ratio must be in (0, 1)")

    if not 0 < config.candidates.min_area_ratio < 1:
        raise ValueError("min_area_ratio must be in (0, 1)")

    if config.warp.border_trim_px < 0:
        raise ValueError("border_trim_px cannot be negative")

    if config.warp.interpolation not in VALID_INTERPOLATIONS:
        raise ValueError(
            f"Invalid interpolation: {config.warp.interpolation}. "
            f"Must be one of {VALID_INTERPOLATIONS}"
        )

    if config.warp.rotate_direction not in VALID_ROTATIONS:
        raise ValueError(
            f"Invalid rotate_direction: {config.warp.rotate_direction}. "
            f"Must be one of {VALID_ROTATIONS}"
        )

    logger.debug("Configuration validation passed")
