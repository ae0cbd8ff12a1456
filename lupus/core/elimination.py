"""
Elimination service: removes players and applies hunter and jester side effects.
"""

import logging
from typing import List, Optional, TYPE_CHECKING

from ..exceptions import StateError
from .game_engine import MatchSession, EventType, EliminationMethod
from .player import Player
from .roles import RoleID
from .win_conditions import WinConditionEvaluator, WinResult

if TYPE_CHECKING:
    from ..config.game_config import HouseRules

logger = logging.getLogger(__name__)


class EliminationService:
    """Applies eliminations, then runs the win check unless revenge is pending."""

    def __init__(self, house_rules: 'HouseRules', evaluator: Optional[WinConditionEvaluator] = None):
        self.house_rules = house_rules
        self.evaluator = evaluator or WinConditionEvaluator()

    def eliminate(self, session: MatchSession, player_id: str,
                  method: EliminationMethod = EliminationMethod.UNKNOWN) -> bool:
        """
        Eliminate a player.
        Returns False if the player was already eliminated (nothing changes).
        """
        player = session.require_player(player_id)
        if session.is_eliminated(player.id):
            return False

        player.eliminate()
        session.eliminated_player_ids.append(player.id)
        session.log_event(
            EventType.PLAYER_ELIMINATED,
            f"{player.display_name} was eliminated",
            actor_id=player.id,
            method=method,
        )
        logger.info("%s has been eliminated by %s", player.display_name, method.value)

        # Hunter gets a revenge shot unless the hunter was shot by another hunter
        if player.has_role(RoleID.HUNTER) and method != EliminationMethod.HUNTER:
            session.pending_hunter_revenge = player.id
            logger.info("Hunter %s was eliminated and can take revenge", player.display_name)

        if player.has_role(RoleID.JESTER) and method == EliminationMethod.VOTE:
            session.log_event(
                EventType.JESTER_WIN,
                f"The Jester {player.display_name} wins the game!",
                actor_id=player.id,
                method=method,
            )

        self.evaluator.check_and_end(session)
        return True

    def get_hunter_targets(self, session: MatchSession) -> List[Player]:
        """Hunter can target any living player."""
        if session.pending_hunter_revenge is None:
            return []
        return session.get_alive_players()

    def execute_hunter_revenge(self, session: MatchSession, hunter_id: str, target_id: str) -> Optional[WinResult]:
        """
        Resolve a pending hunter revenge by eliminating the target.

        Raises:
            StateError: If no revenge is pending for this hunter or the target is not alive
        """
        if session.pending_hunter_revenge is None or session.pending_hunter_revenge != hunter_id:
            raise StateError(f"No hunter revenge pending for {hunter_id}")
        target = session.get_player(target_id)
        if target is None or target not in self.get_hunter_targets(session):
            raise StateError(f"Player {target_id} is not a valid revenge target")

        hunter = session.require_player(hunter_id)
        session.hunter_target = target.id
        self.eliminate(session, target.id, EliminationMethod.HUNTER)
        session.pending_hunter_revenge = None
        session.log_event(
            EventType.HUNTER_REVENGE,
            f"Hunter {hunter.display_name} takes revenge on {target.display_name}",
            actor_id=hunter.id,
            target_id=target.id,
            method=EliminationMethod.HUNTER,
        )
        return self.evaluator.check_and_end(session)

    def skip_hunter_revenge(self, session: MatchSession) -> Optional[WinResult]:
        """
        Drop a pending revenge without eliminating anyone.

        Raises:
            StateError: If skipping is not allowed or nothing is pending
        """
        if not self.house_rules.allow_skip_hunter_revenge:
            raise StateError("House rules do not allow skipping hunter revenge")
        if session.pending_hunter_revenge is None:
            raise StateError("No hunter revenge is pending")
        session.pending_hunter_revenge = None
        logger.info("Hunter revenge skipped")
        return self.evaluator.check_and_end(session)
