"""
Base input interface for the person (or script) holding the moderator device.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional

from ..core import Player, NightStage


@dataclass
class ChoiceContext:
    """What the moderator shows before asking for a choice."""
    round_number: int
    targets: List[Player]
    actor: Optional[Player] = None
    can_skip: bool = False


class BaseInput(ABC):
    """
    Abstract source of moderator decisions.

    Every choice method returns a player id from the offered targets, or
    None to skip (only honored where the context allows skipping).
    """

    @abstractmethod
    def choose_night_target(self, stage: NightStage, context: ChoiceContext) -> Optional[str]:
        """
        Pick the target of a night stage.

        Args:
            stage: The stage waiting for input
            context: Actor, eligible targets and whether skipping is allowed

        Returns:
            Target player id, or None for no target
        """
        pass

    @abstractmethod
    def choose_vote(self, context: ChoiceContext) -> Optional[str]:
        """
        Pick the player voted out by the village.

        Returns:
            Target player id, or None for no elimination
        """
        pass

    @abstractmethod
    def choose_hunter_target(self, hunter: Player, context: ChoiceContext) -> Optional[str]:
        """
        Pick the target of the hunter's revenge.

        Returns:
            Target player id, or None to hold fire
        """
        pass

    def confirm_reveal(self, player: Player) -> None:
        """Called once per player while roles are shown. Default does nothing."""
        pass

    def show_result(self, message: str) -> None:
        """Private feedback such as a seer reading. Default does nothing."""
        pass
