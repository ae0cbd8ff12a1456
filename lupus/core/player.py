"""
Player class representing a seat at the table.
"""

import uuid
from dataclasses import dataclass, field
from typing import Optional

from .roles import RoleDefinition, RoleID, get_role


@dataclass
class Player:
    """Represents a player in the match."""
    display_name: str
    role_id: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    alive: bool = True
    phone: Optional[str] = None  # From the roster, used only by the SMS collaborator

    def __str__(self) -> str:
        return f"{self.display_name} ({self.role_id})"

    @property
    def role(self) -> RoleDefinition:
        """Catalog entry for this player's role."""
        return get_role(self.role_id)

    @property
    def is_werewolf(self) -> bool:
        """Check if player is on the werewolf team."""
        return self.role_id == RoleID.WEREWOLF.value

    def has_role(self, role_id: RoleID) -> bool:
        return self.role_id == role_id.value

    def eliminate(self) -> None:
        """Mark player as eliminated."""
        self.alive = False
