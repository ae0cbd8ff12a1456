"""
Play-history name suggestions for the roster.
"""

import logging
import re
from datetime import datetime
from typing import List, Optional, Sequence

from .record_store import PersistenceGateway
from .records import EntityKind, FrequentPlayer

logger = logging.getLogger(__name__)

DEFAULT_NAME_PATTERN = re.compile(r"^Player\s*\d+$", re.IGNORECASE)


def is_default_player_name(name: str) -> bool:
    """Check if a name is a generated "Player N" placeholder."""
    return DEFAULT_NAME_PATTERN.match(name.strip()) is not None


class FrequentPlayerBook:
    """Tracks how often each name has played and suggests names for new rosters."""

    def __init__(self, store: PersistenceGateway):
        self.store = store
        self.players: List[FrequentPlayer] = store.load(EntityKind.FREQUENT_PLAYER)

    def find(self, name: str) -> Optional[FrequentPlayer]:
        lower = name.strip().lower()
        return next((p for p in self.players if p.display_name.lower() == lower), None)

    def record_players_used(self, names: Sequence[str]) -> bool:
        """
        Bump play counts for the names of a started match.
        Blank names and placeholders are ignored. Returns True if anything changed.
        """
        cleaned = []
        for name in names:
            name = name.strip()
            if name and not is_default_player_name(name) and name.lower() not in {c.lower() for c in cleaned}:
                cleaned.append(name)
        if not cleaned:
            return False

        now = datetime.now()
        for name in cleaned:
            player = self.find(name)
            if player:
                player.play_count += 1
                player.last_played_at = now
            else:
                player = FrequentPlayer(display_name=name, last_played_at=now)
                self.players.append(player)
            self.store.insert(player)
        return True

    def get_name_suggestions(self, prefix: str = "", limit: int = 6,
                             excluding: Sequence[str] = ()) -> List[str]:
        """Most played names first, ties broken by most recent play."""
        prefix = prefix.strip().lower()
        excluded = {name.lower() for name in excluding}
        ranked = sorted(self.players, key=lambda p: (p.play_count, p.last_played_at), reverse=True)

        suggestions: List[str] = []
        for player in ranked:
            lower = player.display_name.lower()
            if prefix and not lower.startswith(prefix):
                continue
            if lower in excluded or player.display_name in suggestions:
                continue
            suggestions.append(player.display_name)
        return suggestions[:limit]

    def delete(self, name: str) -> bool:
        player = self.find(name)
        if player is None:
            return False
        self.players.remove(player)
        self.store.delete(player)
        logger.info("Deleted frequent player: %s", name)
        return True
