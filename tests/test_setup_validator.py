"""
Tests for setup validation, balanced suggestions and match creation.
"""

import random

import pytest

from lupus.exceptions import ValidationError
from lupus.core import (
    GamePhase, MatchSetup, is_valid, validate, suggest_balanced_setup, start_game, update_role_count,
)
from lupus.core.setup_validator import werewolf_limit, get_setup_problems, MIN_PLAYERS, MAX_PLAYERS
from lupus.config import get_preset, DEFAULT_PRESETS


def test_eight_player_setup_is_valid(role_counts_8):
    assert is_valid(8, role_counts_8)


def test_role_sum_must_match_player_count():
    assert not is_valid(8, {"werewolf": 2, "villager": 5})
    assert not is_valid(8, {"werewolf": 2, "villager": 7})


def test_minimum_four_players():
    assert not is_valid(3, {"werewolf": 1, "villager": 2})
    assert is_valid(4, {"werewolf": 1, "villager": 3})


def test_werewolf_bounds():
    """At least one werewolf and strictly fewer than ceil(n/2)."""
    assert not is_valid(6, {"villager": 6})
    assert werewolf_limit(6) == 3
    assert is_valid(6, {"werewolf": 2, "villager": 4})
    assert not is_valid(6, {"werewolf": 3, "villager": 3})
    assert werewolf_limit(7) == 4
    assert is_valid(7, {"werewolf": 3, "villager": 4})
    assert not is_valid(7, {"werewolf": 4, "villager": 3})


def test_validate_lists_problems():
    with pytest.raises(ValidationError) as exc_info:
        validate(3, {"villager": 2, "seer": 2, "vampire": 1})
    problems = exc_info.value.problems
    assert any("werewolf" in p for p in problems)
    assert any("vampire" in p for p in problems)
    assert any("seer" in p for p in problems)
    assert exc_info.value.message.startswith("Invalid setup")


def test_problems_empty_for_valid_setup(role_counts_8):
    assert get_setup_problems(8, role_counts_8) == []


@pytest.mark.parametrize("player_count,expected", [
    (4, {"werewolf": 1, "villager": 3}),
    (6, {"werewolf": 1, "seer": 1, "villager": 4}),
    (8, {"werewolf": 2, "seer": 1, "doctor": 1, "villager": 4}),
    (10, {"werewolf": 2, "seer": 1, "doctor": 1, "mayor": 1, "hunter": 1, "villager": 4}),
])
def test_suggest_balanced_setup(player_count, expected):
    assert suggest_balanced_setup(player_count) == expected


def test_suggestion_with_jester():
    counts = suggest_balanced_setup(8, include_jester=True)
    assert counts["jester"] == 1
    assert sum(counts.values()) == 8


def test_suggestions_are_valid_across_range():
    for n in range(MIN_PLAYERS, MAX_PLAYERS + 1):
        for jester in (False, True):
            counts = suggest_balanced_setup(n, include_jester=jester)
            assert sum(counts.values()) == n
            assert is_valid(n, counts), (n, jester, counts)


def test_update_role_count_drops_zero():
    counts = {"werewolf": 2, "seer": 1}
    update_role_count(counts, "seer", 0)
    assert counts == {"werewolf": 2}
    update_role_count(counts, "doctor", 1)
    assert counts["doctor"] == 1


def test_start_game_assigns_every_role(role_counts_8):
    session = start_game(8, role_counts_8, ["Ann", " Bob ", "", None], rng=random.Random(1))
    assert session.phase == GamePhase.REVEAL
    assert session.round == 1
    assert len(session.players) == 8
    assert all(p.alive for p in session.players)

    assigned = {}
    for p in session.players:
        assigned[p.role_id] = assigned.get(p.role_id, 0) + 1
    assert assigned == role_counts_8

    names = [p.display_name for p in session.players]
    assert names[:4] == ["Ann", "Bob", "Player 3", "Player 4"]
    assert names[-1] == "Player 8"


def test_start_game_is_reproducible(role_counts_8):
    a = start_game(8, role_counts_8, rng=random.Random(7))
    b = start_game(8, role_counts_8, rng=random.Random(7))
    assert [p.role_id for p in a.players] == [p.role_id for p in b.players]


def test_start_game_rejects_invalid():
    with pytest.raises(ValidationError):
        start_game(5, {"werewolf": 3, "villager": 2})


def test_match_setup_caps_unique_roles():
    setup = MatchSetup(player_count=8)
    setup.update_role_count("seer", 3)
    assert setup.get_role_count("seer") == 1
    setup.update_role_count("jester", 1)
    assert setup.include_jester
    with pytest.raises(ValidationError):
        setup.update_role_count("vampire", 1)


def test_match_setup_clamps_player_count():
    setup = MatchSetup()
    setup.set_player_count(2)
    assert setup.player_count == MIN_PLAYERS
    setup.set_player_count(40)
    assert setup.player_count == MAX_PLAYERS
    assert len(setup.player_names) == MAX_PLAYERS


def test_presets_are_valid():
    assert len(DEFAULT_PRESETS) == 7
    for preset in DEFAULT_PRESETS:
        assert is_valid(preset.min_players, preset.role_counts), preset.id


def test_apply_preset():
    setup = MatchSetup()
    setup.apply_preset(get_preset("classic_8"))
    assert setup.player_count == 8
    assert setup.preset_id == "classic_8"
    assert setup.is_valid()
