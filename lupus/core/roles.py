"""
Role catalog: identities, alignments and default abilities for every role.
"""

from enum import Enum
from typing import Dict, List, Tuple
from dataclasses import dataclass


class Alignment(Enum):
    """Broad team membership of a role."""
    VILLAGER = "villager"
    WEREWOLF = "werewolf"
    NEUTRAL = "neutral"


class RoleID(Enum):
    """Stable role identities. Metadata lives in ROLE_CATALOG."""
    WEREWOLF = "werewolf"
    VILLAGER = "villager"
    SEER = "seer"
    DOCTOR = "doctor"
    HUNTER = "hunter"
    JESTER = "jester"
    MEDIUM = "medium"
    MAYOR = "mayor"


@dataclass(frozen=True)
class RoleDefinition:
    """Immutable catalog entry for a role."""
    id: str
    name: str
    alignment: Alignment
    abilities: Tuple[str, ...]
    is_unique: bool
    min_players: int
    notes: str
    emoji: str

    def __str__(self) -> str:
        return f"{self.emoji} {self.name} ({self.alignment.value})"

    @property
    def is_werewolf(self) -> bool:
        return self.alignment == Alignment.WEREWOLF


ROLE_CATALOG: Dict[RoleID, RoleDefinition] = {
    RoleID.WEREWOLF: RoleDefinition(
        id="werewolf", name="Werewolf", alignment=Alignment.WEREWOLF,
        abilities=("Kill at night",), is_unique=False, min_players=4,
        notes="Choose a villager to kill each night", emoji="🐺",
    ),
    RoleID.VILLAGER: RoleDefinition(
        id="villager", name="Villager", alignment=Alignment.VILLAGER,
        abilities=("Vote during day",), is_unique=False, min_players=1,
        notes="Vote to eliminate suspected werewolves", emoji="👨🏻",
    ),
    RoleID.SEER: RoleDefinition(
        id="seer", name="Seer", alignment=Alignment.VILLAGER,
        abilities=("Check alignment at night",), is_unique=True, min_players=6,
        notes="Learn if a player is a werewolf", emoji="🔮",
    ),
    RoleID.DOCTOR: RoleDefinition(
        id="doctor", name="Doctor", alignment=Alignment.VILLAGER,
        abilities=("Protect at night",), is_unique=True, min_players=8,
        notes="Save a player from werewolf attack", emoji="💊",
    ),
    RoleID.HUNTER: RoleDefinition(
        id="hunter", name="Hunter", alignment=Alignment.VILLAGER,
        abilities=("Kill when eliminated",), is_unique=True, min_players=10,
        notes="Take revenge when eliminated", emoji="🏹",
    ),
    RoleID.JESTER: RoleDefinition(
        id="jester", name="Jester", alignment=Alignment.NEUTRAL,
        abilities=("Win by being voted out",), is_unique=True, min_players=7,
        notes="Wins the game by being voted out during the day phase", emoji="🃏",
    ),
    RoleID.MEDIUM: RoleDefinition(
        id="medium", name="Medium", alignment=Alignment.VILLAGER,
        abilities=("Check eliminated players at night",), is_unique=True, min_players=8,
        notes="During night, check if an eliminated player was a werewolf or not", emoji="👻",
    ),
    RoleID.MAYOR: RoleDefinition(
        id="mayor", name="Mayor", alignment=Alignment.VILLAGER,
        abilities=("Vote during day", "Village leadership"), is_unique=True, min_players=9,
        notes="A respected village leader who votes during the day phase", emoji="🏛️",
    ),
}


def get_role(role_id: str) -> RoleDefinition:
    """
    Look up a role definition by its string id.

    Raises:
        KeyError: If the id is not a known role
    """
    return ROLE_CATALOG[RoleID(role_id)]


def is_known_role(role_id: str) -> bool:
    """Check if a string id names a catalog role."""
    return role_id in {r.value for r in RoleID}


def get_unique_roles() -> List[str]:
    """Get ids of roles that may appear at most once per match."""
    return [d.id for d in ROLE_CATALOG.values() if d.is_unique]


def all_role_definitions() -> List[RoleDefinition]:
    """Get all catalog entries in identity order."""
    return [ROLE_CATALOG[role_id] for role_id in RoleID]
