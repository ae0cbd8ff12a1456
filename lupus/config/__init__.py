"""Game configuration module."""

from .game_config import GameConfig, HouseRules, default_config
from .config_loader import load_config, load_config_from_yaml
from .presets import RolePreset, DEFAULT_PRESETS, get_preset

__all__ = [
    'GameConfig',
    'HouseRules',
    'default_config',
    'load_config',
    'load_config_from_yaml',
    'RolePreset',
    'DEFAULT_PRESETS',
    'get_preset',
]
