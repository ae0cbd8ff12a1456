"""
Pytest fixtures for Lupus moderator tests.
"""

import random

import pytest
from typing import Dict, List, Optional

from lupus.core import (
    MatchSession, GamePhase, Player, RoleID, EliminationService, WinConditionEvaluator,
)
from lupus.config.game_config import GameConfig, HouseRules
from lupus.phases import NightResolutionEngine, VotingHandler
from lupus.adapters import EventEmitter, RecordingListener, InMemoryRecordStore
from lupus.moderator import Moderator


def make_session(roles: List[str], phase: GamePhase = GamePhase.NIGHT,
                 names: Optional[List[str]] = None) -> MatchSession:
    """Build a session with a fixed seating: one player per role id, in order."""
    names = names or [f"P{i + 1}" for i in range(len(roles))]
    players = [Player(display_name=name, role_id=role) for name, role in zip(names, roles)]
    return MatchSession(players=players, phase=phase)


def by_role(session: MatchSession, role_id: RoleID) -> List[Player]:
    return [p for p in session.players if p.has_role(role_id)]


def first(session: MatchSession, role_id: RoleID) -> Player:
    return by_role(session, role_id)[0]


@pytest.fixture
def house_rules():
    """Default (strict) house rules."""
    return HouseRules()


@pytest.fixture
def game_config():
    """Test configuration."""
    return GameConfig(
        random_seed=42,
        use_announcements=False  # Disable for cleaner test output
    )


@pytest.fixture
def elimination(house_rules):
    return EliminationService(house_rules, WinConditionEvaluator())


@pytest.fixture
def night_engine(house_rules, elimination):
    return NightResolutionEngine(house_rules, elimination)


@pytest.fixture
def voting(house_rules, elimination):
    return VotingHandler(house_rules, elimination)


@pytest.fixture
def eight_player_session() -> MatchSession:
    """2 werewolves, seer, doctor and 4 villagers, at night."""
    return make_session([
        "werewolf", "werewolf", "seer", "doctor",
        "villager", "villager", "villager", "villager",
    ])


@pytest.fixture
def recorder():
    return RecordingListener()


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.fixture
def moderator(game_config, store, recorder):
    """Moderator backed by an in-memory store with a recording listener."""
    return Moderator(
        game_config,
        store=store,
        event_emitter=EventEmitter([recorder]),
        rng=random.Random(game_config.random_seed),
    )


@pytest.fixture
def role_counts_8() -> Dict[str, int]:
    return {"werewolf": 2, "seer": 1, "doctor": 1, "villager": 4}
