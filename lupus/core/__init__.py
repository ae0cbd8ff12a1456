"""
Core match components: roles, players, the session record, setup, eliminations and win conditions.
"""

from .roles import Alignment, RoleID, RoleDefinition, ROLE_CATALOG, get_role, all_role_definitions
from .player import Player
from .game_engine import (
    MatchSession, GamePhase, NightStage, EventType, EliminationMethod, GameEvent,
)
from .setup_validator import (
    MatchSetup, is_valid, validate, suggest_balanced_setup, start_game, update_role_count,
)
from .win_conditions import WinConditionEvaluator, WinResult, Winner
from .elimination import EliminationService

__all__ = [
    'Alignment',
    'RoleID',
    'RoleDefinition',
    'ROLE_CATALOG',
    'get_role',
    'all_role_definitions',
    'Player',
    'MatchSession',
    'GamePhase',
    'NightStage',
    'EventType',
    'EliminationMethod',
    'GameEvent',
    'MatchSetup',
    'is_valid',
    'validate',
    'suggest_balanced_setup',
    'start_game',
    'update_role_count',
    'WinConditionEvaluator',
    'WinResult',
    'Winner',
    'EliminationService',
]
