"""
Unit tests for the extraction config_loader module.
"""

import tempfile
from pathlib import Path

import pytest
import yaml

from src.extraction.config_loader import load_config
from src.extraction.types import ExtractionConfig


def _valid_config() -> dict:
    return {
        "preprocessing": {
            "blur_kernel_size": 5,
            "canny_low_threshold": 50,
            "canny_high_threshold": 150,
            "morph_kernel_size": 5,
        },
        "candidates": {"approx_epsilon_ratio": 0.02, "min_area_ratio": 0.01},
        "warp": {
            "interpolation": "cubic",
            "border_trim_px": 1,
            "rotate_direction": "clockwise",
        },
    }


def _write(config: dict) -> Path:
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        yaml.dump(config, f)
        return Path(f.name)


class TestLoadConfig:
    """Tests for load_config function."""

    def test_load_default_config(self):
        """Test loading the bundled configuration file."""
        config = load_config()

        assert isinstance(config, ExtractionConfig)
        assert config.preprocessing.blur_kernel_size == 5
        assert config.preprocessing.canny_low_threshold == 50
        assert config.preprocessing.canny_high_threshold == 150
        assert config.preprocessing.morph_kernel_size == 5
        assert config.candidates.approx_epsilon_ratio == 0.02
        assert config.candidates.min_area_ratio == 0.01
        assert config.warp.interpolation == "cubic"
        assert config.warp.border_trim_px == 1
        assert config.warp.rotate_direction == "clockwise"

    def test_load_custom_config(self):
        custom = _valid_config()
        custom["candidates"]["min_area_ratio"] = 0.05
        custom["warp"]["interpolation"] = "lanczos"
        path = _write(custom)

        try:
            config = load_config(path)

            assert config.candidates.min_area_ratio == 0.05
            assert config.warp.interpolation == "lanczos"
        finally:
            path.unlink()

    def test_missing_file_raises_error(self):
        with pytest.raises(FileNotFoundError):
            load_config(Path("nonexistent_config.yaml"))

    def test_missing_section(self):
        custom = _valid_config()
        del custom["warp"]
        path = _write(custom)

        try:
            with pytest.raises(ValueError, match="Invalid configuration file"):
                load_config(path)
        finally:
            path.unlink()

    @pytest.mark.parametrize(
        "section,key,value,message",
        [
            ("preprocessing", "blur_kernel_size", 4, "positive odd integer"),
            ("preprocessing", "morph_kernel_size", 0, "positive odd integer"),
            ("preprocessing", "canny_low_threshold", 200, "must be less than"),
            ("candidates", "min_area_ratio", 0.0, "min_area_ratio"),
            ("candidates", "approx_epsilon_ratio", 1.5, "approx_epsilon_ratio"),
            ("warp", "border_trim_px", -1, "border_trim_px"),
            ("warp", "interpolation", "bicubic", "Invalid interpolation"),
            ("warp", "rotate_direction", "sideways", "Invalid rotate_direction"),
        ],
    )
    def test_invalid_values(self, section, key, value, message):
        custom = _valid_config()
        custom[section][key] = value
        path = _write(custom)

        try:
            with pytest.raises(ValueError, match=message):
                load_config(path)
        finally:
            path.unlink()
