"""
Day vote handling: ballot tallies and vote eliminations.
"""

import logging
from typing import Dict, List, Optional, TYPE_CHECKING

from ..exceptions import StateError
from ..core import MatchSession, GamePhase, EliminationMethod, EliminationService, Player

if TYPE_CHECKING:
    from ..config.game_config import HouseRules

logger = logging.getLogger(__name__)


class VotingHandler:
    """Handles the day vote of a round."""

    def __init__(self, house_rules: 'HouseRules', elimination: EliminationService):
        self.house_rules = house_rules
        self.elimination = elimination

    def _require_day(self, session: MatchSession) -> None:
        if session.phase != GamePhase.DAY:
            raise StateError(f"Voting is only possible during the day, not {session.phase.value}")
        if session.pending_hunter_revenge is not None:
            raise StateError("Hunter revenge must be resolved before voting")

    def get_vote_targets(self, session: MatchSession) -> List[Player]:
        """Any living player can be voted out."""
        return session.get_alive_players()

    def get_vote_counts(self, session: MatchSession, ballots: Dict[str, str]) -> Dict[str, int]:
        """
        Count ballots {voter_id: target_id}.
        Ballots from eliminated voters or for eliminated targets are ignored.
        """
        alive_ids = {p.id for p in session.get_alive_players()}
        counts: Dict[str, int] = {}
        for voter, target in ballots.items():
            if voter in alive_ids and target in alive_ids:
                counts[target] = counts.get(target, 0) + 1
        return counts

    def get_elimination_target(self, counts: Dict[str, int]) -> Optional[str]:
        """
        Determine who should be eliminated based on vote counts.
        Returns None on a tie or when nobody received a vote.
        """
        if not counts:
            return None
        max_votes = max(counts.values())
        candidates = [player for player, votes in counts.items() if votes == max_votes]
        if len(candidates) == 1:
            return candidates[0]
        return None

    def resolve_vote(self, session: MatchSession, target_id: str) -> bool:
        """
        Eliminate the voted-out player.

        Raises:
            StateError: Outside the day, with revenge pending, or for a non-living target
        """
        self._require_day(session)
        target = session.get_player(target_id)
        if target is None or not target.alive:
            raise StateError(f"Player {target_id} cannot be voted out")
        logger.info("Village voted out %s", target.display_name)
        return self.elimination.eliminate(session, target.id, EliminationMethod.VOTE)

    def skip_vote(self, session: MatchSession) -> None:
        """
        End the day without an elimination.

        Raises:
            StateError: If the house rules do not allow skipping the vote
        """
        self._require_day(session)
        if not self.house_rules.allow_skip_day_voting:
            raise StateError("House rules do not allow skipping the day vote")
        logger.info("Day %d vote skipped", session.round)
