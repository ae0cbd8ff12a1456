"""
Win-condition evaluation run after every elimination.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .game_engine import MatchSession, EventType

logger = logging.getLogger(__name__)


class Winner(Enum):
    JESTER = "jester"
    VILLAGERS = "villagers"
    WEREWOLVES = "werewolves"


@dataclass
class WinResult:
    """A decision that ends the match."""
    winner: Winner
    message: str
    player_id: Optional[str] = None  # Set for a jester win


class WinConditionEvaluator:
    """Decides whether a match has ended."""

    def check_win_condition(self, session: MatchSession) -> Optional[WinResult]:
        """
        Check the win conditions in priority order.
        Returns None if the match continues.
        """
        # Jester win is terminal regardless of the remaining counts
        jester_wins = session.events_of(EventType.JESTER_WIN)
        if jester_wins:
            event = jester_wins[0]
            return WinResult(Winner.JESTER, event.description, player_id=event.actor_id)

        werewolves = len(session.get_living_werewolves())
        non_werewolves = len(session.get_living_non_werewolves())

        if werewolves == 0:
            return WinResult(Winner.VILLAGERS, "Villagers win! All werewolves have been eliminated.")

        if werewolves >= non_werewolves:
            return WinResult(Winner.WEREWOLVES, "Werewolves win! They outnumber the remaining players.")

        return None

    def evaluate(self, session: MatchSession) -> Optional[WinResult]:
        """Like check_win_condition, but undecided while hunter revenge is pending."""
        if session.pending_hunter_revenge is not None:
            return None
        return self.check_win_condition(session)

    def check_and_end(self, session: MatchSession) -> Optional[WinResult]:
        """Evaluate and, on a decision, move the session to the ended phase."""
        if session.is_over:
            return None
        result = self.evaluate(session)
        if result:
            session.end(result.message)
            logger.info("Match %s ended: %s", session.id, result.message)
        return result
