"""
Configuration loader for the Rectification module.

Loads and validates configuration from config.yaml file.
"""

import logging
from pathlib import Path
from typing import Any, Dict

import yaml

from src.enhancement.types import EnhancementOptions
from src.rectification.drawing_context import INTERPOLATION_FLAGS
from src.rectification.types import CornerConfig, RectificationConfig, ScannerConfig

logger = logging.getLogger(__name__)

# Default configuration path (relative to this file)
DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"

ENHANCEMENT_KEYS = {"contrast", "brightness"}


def load_config(config_path: Path = DEFAULT_CONFIG_PATH) -> ScannerConfig:
    """
    Load scanner configuration from YAML file.

    Args:
        config_path: Path to the configuration YAML file.

    Returns:
        Validated ScannerConfig object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config is invalid or missing required fields.

    Example:
        >>> config = load_config()
        >>> print(config.rectification.output_width)
        1200
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    logger.debug(f"Loading scanner config from {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        raw_config = yaml.safe_load(f)

    try:
        config = _parse_config(raw_config)
        _validate_config(config)
        logger.info("Successfully loaded scanner configuration")
        return config
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Invalid configuration file: {e}") from e


def _parse_config(raw: Dict[str, Any]) -> ScannerConfig:
    """Parse raw dictionary into structured config objects."""
    unknown = set(raw["enhancement"]) - ENHANCEMENT_KEYS
    if unknown:
        raise ValueError(f"Unknown enhancement options: {sorted(unknown)}")

    return ScannerConfig(
        rectification=RectificationConfig(
            output_width=int(raw["rectification"]["output_width"]),
            output_height=int(raw["rectification"]["output_height"]),
            interpolation=str(raw["rectification"]["interpolation"]),
        ),
        corners=CornerConfig(
            default_padding=float(raw["corners"]["default_padding"]),
            clamp_to_image=bool(raw["corners"]["clamp_to_image"]),
            reorder=bool(raw["corners"].get("reorder", False)),
        ),
        # EnhancementOptions rejects negative and non-finite values
        enhancement=EnhancementOptions(
            contrast=float(raw["enhancement"].get("contrast", 1.2)),
            brightness=float(raw["enhancement"].get("brightness", 1.05)),
        ),
    )


def _validate_config(config: ScannerConfig) -> None:
    """
    Validate configuration values for logical consistency.

    Raises:
        ValueError: If any configuration value is invalid.
    """
    if config.rectification.output_width < 1:
        raise ValueError("output_width must be at least 1")

    if config.rectification.output_height < 1:
        raise ValueError("output_height must be at least 1")

    if config.rectification.interpolation not in INTERPOLATION_FLAGS:
        raise ValueError(
            f"Invalid interpolation: {config.rectification.interpolation}. "
            f"Must be one of {list(INTERPOLATION_FLAGS)}"
        )

    if not 0 <= config.corners.default_padding < 0.5:
        raise ValueError("default_padding must be in [0, 0.5)")

    logger.debug("Configuration validation passed")
