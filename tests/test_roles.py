"""
Tests for the role catalog.
"""

import dataclasses

import pytest

from lupus.core import ROLE_CATALOG, RoleID, Alignment, get_role, all_role_definitions
from lupus.core.roles import is_known_role, get_unique_roles


def test_catalog_covers_every_role():
    """Every role identity has exactly one catalog entry."""
    assert set(ROLE_CATALOG) == set(RoleID)
    for role_id, definition in ROLE_CATALOG.items():
        assert definition.id == role_id.value


def test_alignments():
    assert get_role("werewolf").alignment == Alignment.WEREWOLF
    assert get_role("jester").alignment == Alignment.NEUTRAL
    for role_id in ("villager", "seer", "doctor", "hunter", "medium", "mayor"):
        assert get_role(role_id).alignment == Alignment.VILLAGER


def test_only_werewolf_and_villager_repeat():
    assert set(get_unique_roles()) == {"seer", "doctor", "hunter", "jester", "medium", "mayor"}
    assert not get_role("werewolf").is_unique
    assert not get_role("villager").is_unique


def test_min_players():
    expected = {
        "villager": 1, "werewolf": 4, "seer": 6, "jester": 7,
        "doctor": 8, "medium": 8, "mayor": 9, "hunter": 10,
    }
    assert {d.id: d.min_players for d in all_role_definitions()} == expected


def test_unknown_role():
    assert not is_known_role("vampire")
    assert is_known_role("medium")
    with pytest.raises(ValueError):
        get_role("vampire")


def test_definitions_are_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        get_role("seer").name = "Oracle"
