"""Configuration loading and logging setup.

Configuration lives in a YAML file (``config.yaml`` at the repository root
by default). Keys missing from the file fall back to ``DEFAULT_CONFIG``.
"""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Dict, Optional, Union

import yaml

from raytracer.approx import DEFAULT_ULPS
from raytracer.canvas import MAX_COLOR_VALUE

logger = logging.getLogger(__name__)

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config.yaml"

DEFAULT_CONFIG: Dict = {
    "tolerance": {
        "ulps": DEFAULT_ULPS,
    },
    "ppm": {
        "max_color_value": MAX_COLOR_VALUE,
    },
    "logging": {
        "level": "INFO",
    },
}


def _merge(base: Dict, override: Dict) -> Dict:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def validate_config(config: Dict) -> None:
    """Check value ranges of a configuration dictionary.

    Args:
        config: Configuration dictionary

    Raises:
        ValueError: If a value is out of range or of the wrong type
    """
    for section in DEFAULT_CONFIG:
        if not isinstance(config.get(section), dict):
            raise ValueError(f"Config section '{section}' must be a mapping, got {config.get(section)!r}")

    ulps = config["tolerance"]["ulps"]
    if not isinstance(ulps, int) or isinstance(ulps, bool) or ulps < 0:
        raise ValueError(f"tolerance.ulps must be a non-negative integer, got {ulps!r}")

    max_value = config["ppm"]["max_color_value"]
    if not isinstance(max_value, int) or isinstance(max_value, bool) or not 0 < max_value <= 65535:
        raise ValueError(f"ppm.max_color_value must be an integer in 1..65535, got {max_value!r}")

    level = config["logging"]["level"]
    if not isinstance(logging.getLevelName(str(level).upper()), int):
        raise ValueError(f"logging.level is not a known level: {level!r}")


def load_config(config_path: Optional[Union[str, Path]] = None) -> Dict:
    """Load configuration from YAML file.

    Args:
        config_path: Path to configuration file. If omitted, the repository
            ``config.yaml`` is used when present, otherwise the defaults.

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If an explicit ``config_path`` does not exist
        ValueError: If the file is not a mapping or holds invalid values
    """
    if config_path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            logger.debug("No config.yaml found, using built-in defaults")
            return copy.deepcopy(DEFAULT_CONFIG)
        config_path = DEFAULT_CONFIG_PATH

    with open(config_path, "r") as f:
        loaded = yaml.safe_load(f) or {}

    if not isinstance(loaded, dict):
        raise ValueError(f"Configuration in {config_path} must be a mapping")

    config = _merge(DEFAULT_CONFIG, loaded)
    validate_config(config)

    logger.debug(f"Loaded configuration from {config_path}")
    return config


def setup_logging(config: Optional[Dict] = None) -> None:
    """Configure root logging with the project log format.

    Args:
        config: Configuration dictionary; the level is read from ``logging.level``
    """
    config = config or DEFAULT_CONFIG
    level = str(config["logging"]["level"]).upper()

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(),
        ],
    )
