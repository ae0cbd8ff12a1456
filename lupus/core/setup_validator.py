"""
Setup validation, balanced-setup suggestion and role assignment.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..exceptions import ValidationError
from .game_engine import MatchSession, GamePhase
from .player import Player
from .roles import RoleID, get_role, is_known_role

logger = logging.getLogger(__name__)

MIN_PLAYERS = 4
MAX_PLAYERS = 24

RoleCounts = Dict[str, int]


def total_roles(role_counts: RoleCounts) -> int:
    return sum(role_counts.values())


def werewolf_limit(player_count: int) -> int:
    """Werewolf count must stay strictly below ceil(player_count / 2)."""
    return player_count // 2 + player_count % 2


def is_valid(player_count: int, role_counts: RoleCounts) -> bool:
    """
    Check if a player count / role count configuration can start a match.

    Requires the totals to match, at least 4 players, at least one
    werewolf and fewer werewolves than half the table (rounded up).
    """
    total = total_roles(role_counts)
    werewolves = role_counts.get(RoleID.WEREWOLF.value, 0)

    if total != player_count or total < MIN_PLAYERS:
        return False
    if werewolves < 1:
        return False
    return werewolves < werewolf_limit(player_count)


def get_setup_problems(player_count: int, role_counts: RoleCounts) -> List[str]:
    """List every reason a configuration is rejected (empty when valid)."""
    problems = []
    total = total_roles(role_counts)
    if total != player_count:
        problems.append(f"role counts add up to {total}, expected {player_count}")
    if player_count < MIN_PLAYERS:
        problems.append(f"at least {MIN_PLAYERS} players are required")

    werewolves = role_counts.get(RoleID.WEREWOLF.value, 0)
    max_werewolves = werewolf_limit(player_count) - 1
    if werewolves < 1 or werewolves > max_werewolves:
        problems.append(f"werewolf count {werewolves} outside [1, {max_werewolves}]")

    for role_id, count in role_counts.items():
        if not is_known_role(role_id):
            problems.append(f"unknown role '{role_id}'")
        elif count < 0:
            problems.append(f"negative count for {role_id}")
        elif get_role(role_id).is_unique and count > 1:
            problems.append(f"{role_id} is unique but selected {count} times")
    return problems


def validate(player_count: int, role_counts: RoleCounts) -> None:
    """
    Raise ValidationError if the configuration cannot start a match.

    Raises:
        ValidationError: With the list of failed checks
    """
    problems = get_setup_problems(player_count, role_counts)
    if problems:
        raise ValidationError(problems)


def update_role_count(role_counts: RoleCounts, role_id: str, count: int) -> RoleCounts:
    """Set a role count in place, dropping entries that fall to zero or below."""
    role_counts[role_id] = count
    for key in [k for k, v in role_counts.items() if v <= 0]:
        del role_counts[key]
    return role_counts


def suggest_balanced_setup(player_count: int, include_jester: bool = False) -> RoleCounts:
    """
    Suggest a balanced role selection for a player count.

    Werewolves take a quarter of the table (at least one), then special
    roles unlock by player count and the rest are villagers.
    """
    role_counts: RoleCounts = {}
    werewolves = max(1, player_count // 4)
    update_role_count(role_counts, RoleID.WEREWOLF.value, werewolves)
    remaining = player_count - werewolves

    unlocks = [
        (RoleID.SEER, player_count >= 6),
        (RoleID.DOCTOR, player_count >= 8),
        (RoleID.MAYOR, player_count >= 9),
        (RoleID.HUNTER, player_count >= 10),
        (RoleID.JESTER, include_jester and player_count >= 7),
    ]
    for role_id, unlocked in unlocks:
        if unlocked and remaining > 0:
            update_role_count(role_counts, role_id.value, 1)
            remaining -= 1

    update_role_count(role_counts, RoleID.VILLAGER.value, max(0, remaining))

    logger.debug("Suggested balanced setup for %d players: %s", player_count, role_counts)
    return role_counts


def default_player_name(index: int) -> str:
    return f"Player {index + 1}"


def build_role_pool(role_counts: RoleCounts) -> List[str]:
    """Flatten role counts into one role id per seat."""
    pool = []
    for role_id, count in role_counts.items():
        pool.extend([role_id] * count)
    return pool


def start_game(player_count: int, role_counts: RoleCounts,
               player_names: Optional[List[str]] = None,
               phones: Optional[List[Optional[str]]] = None,
               rng: Optional[random.Random] = None) -> MatchSession:
    """
    Create a new match with a shuffled role assignment.

    Args:
        player_count: Number of seats
        role_counts: Role id -> count, must sum to player_count
        player_names: Names by seat; blank or missing ones get "Player N"
        phones: Optional phone numbers by seat
        rng: Random source, for reproducible assignment

    Returns:
        A MatchSession in the reveal phase

    Raises:
        ValidationError: If the configuration is not valid
    """
    validate(player_count, role_counts)

    pool = build_role_pool(role_counts)
    (rng or random.Random()).shuffle(pool)

    names = player_names or []
    phones = phones or []
    players = []
    for seat in range(player_count):
        name = names[seat].strip() if seat < len(names) and names[seat] else ""
        phone = phones[seat] if seat < len(phones) else None
        players.append(Player(
            display_name=name or default_player_name(seat),
            role_id=pool[seat],
            phone=phone,
        ))

    session = MatchSession(players=players, phase=GamePhase.REVEAL, round=1)
    logger.info("Started match %s with %d players", session.id, len(players))
    return session


@dataclass
class MatchSetup:
    """Editable setup draft: player count, roster and role selection."""
    player_count: int = 8
    role_counts: RoleCounts = field(default_factory=dict)
    player_names: List[str] = field(default_factory=list)
    phones: List[Optional[str]] = field(default_factory=list)
    include_jester: bool = False
    preset_id: Optional[str] = None

    def __post_init__(self):
        self._sync_roster()

    def _sync_roster(self) -> None:
        """Pad or truncate the roster to the player count."""
        self.player_names = (self.player_names + [""] * self.player_count)[:self.player_count]
        self.phones = (self.phones + [None] * self.player_count)[:self.player_count]

    def set_player_count(self, player_count: int) -> None:
        self.player_count = max(MIN_PLAYERS, min(MAX_PLAYERS, player_count))
        self._sync_roster()

    def set_player_name(self, index: int, name: str, phone: Optional[str] = None) -> None:
        if index < 0:
            return
        if index >= self.player_count:
            self.set_player_count(index + 1)
        self.player_names[index] = name
        if phone is not None:
            self.phones[index] = phone

    def update_role_count(self, role_id: str, count: int) -> None:
        """Change one role count. Unique roles are capped at one."""
        if not is_known_role(role_id):
            raise ValidationError([f"unknown role '{role_id}'"])
        if get_role(role_id).is_unique:
            count = min(count, 1)
        update_role_count(self.role_counts, role_id, count)
        self.include_jester = self.role_counts.get(RoleID.JESTER.value, 0) > 0

    def get_role_count(self, role_id: str) -> int:
        return self.role_counts.get(role_id, 0)

    @property
    def total_selected(self) -> int:
        return total_roles(self.role_counts)

    def is_valid(self) -> bool:
        return is_valid(self.player_count, self.role_counts)

    def suggest_balanced(self) -> None:
        self.role_counts = suggest_balanced_setup(self.player_count, self.include_jester)
        self.preset_id = None

    def apply_preset(self, preset) -> None:
        """Copy a RolePreset's player count and role counts into the draft."""
        self.set_player_count(preset.min_players)
        self.role_counts = dict(preset.role_counts)
        self.include_jester = self.role_counts.get(RoleID.JESTER.value, 0) > 0
        self.preset_id = preset.id
