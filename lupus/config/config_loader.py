"""
Configuration loader for YAML-based game configurations.
"""

import logging
import yaml
from pathlib import Path
from typing import Optional

from .game_config import GameConfig, HouseRules, default_config

logger = logging.getLogger(__name__)


def load_config_from_yaml(config_path: str) -> GameConfig:
    """
    Load game configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file

    Returns:
        GameConfig instance with values from YAML file

    Raises:
        FileNotFoundError: If the config file doesn't exist
        yaml.YAMLError: If the YAML file is invalid
        ValidationError: If the house rules are out of range
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_file, 'r') as f:
        config_dict = yaml.safe_load(f)

    if config_dict is None:
        return GameConfig()

    config = GameConfig()

    for key, value in config_dict.items():
        if key == "house_rules":
            config.house_rules = _load_house_rules(value)
        elif hasattr(config, key):
            setattr(config, key, value)
        else:
            # Warn about unknown keys but don't fail
            logger.warning("Unknown config key '%s' in YAML file", key)

    return config


def _load_house_rules(data) -> HouseRules:
    if not isinstance(data, dict):
        logger.warning("Ignoring house_rules: expected a mapping, got %r", data)
        return HouseRules()
    for key in data:
        if key not in HouseRules.__dataclass_fields__:
            logger.warning("Unknown house rule '%s' in YAML file", key)
    return HouseRules.from_dict(data)


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load configuration from YAML file or return default.

    Args:
        config_path: Optional path to YAML config file. If None, returns default config.

    Returns:
        GameConfig instance
    """
    if config_path is None:
        return default_config

    return load_config_from_yaml(config_path)
