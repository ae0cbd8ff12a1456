"""
Tests for YAML configuration loading.
"""

import logging

import pytest

from lupus.exceptions import ValidationError
from lupus.config import GameConfig, HouseRules, default_config, load_config, load_config_from_yaml


def write_config(tmp_path, text: str) -> str:
    path = tmp_path / "config.yaml"
    path.write_text(text)
    return str(path)


def test_load_config_defaults():
    assert load_config() is default_config
    assert load_config(None).default_player_count == 8


def test_load_config_from_yaml(tmp_path):
    path = write_config(tmp_path, """
default_player_count: 10
include_jester: true
random_seed: 5
use_announcements: false
house_rules:
  allow_skip_day_voting: true
  phase_timer_seconds: 90
  doctor_can_save_himself: true
""")
    config = load_config(path)
    assert config.default_player_count == 10
    assert config.include_jester
    assert config.random_seed == 5
    assert not config.use_announcements
    assert config.house_rules.allow_skip_day_voting
    assert config.house_rules.phase_timer_seconds == 90
    assert config.house_rules.doctor_can_save_himself
    assert not config.house_rules.allow_skip_hunter_revenge


def test_unknown_keys_warn(tmp_path, caplog):
    path = write_config(tmp_path, "agent_type: dummy\nhouse_rules:\n  night_owls: true\n")
    with caplog.at_level(logging.WARNING):
        config = load_config_from_yaml(path)
    assert isinstance(config, GameConfig)
    assert "agent_type" in caplog.text
    assert "night_owls" in caplog.text
    assert config.house_rules == HouseRules()


def test_empty_file_gives_defaults(tmp_path):
    config = load_config_from_yaml(write_config(tmp_path, ""))
    assert config == GameConfig()


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config_from_yaml(str(tmp_path / "missing.yaml"))


def test_out_of_range_timer(tmp_path):
    path = write_config(tmp_path, "house_rules:\n  phase_timer_seconds: 600\n")
    with pytest.raises(ValidationError):
        load_config_from_yaml(path)


def test_house_rules_reset():
    rules = HouseRules(allow_skip_werewolf_kill=True, phase_timer_seconds=60, id="table-1")
    rules.reset_to_defaults()
    assert rules == HouseRules(id="table-1")
