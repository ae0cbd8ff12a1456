"""
Random input with reproducible behavior, for simulations and tests.
"""

import random
from typing import List, Optional

from .base_input import BaseInput, ChoiceContext
from ..core import Player, NightStage


class RandomInput(BaseInput):
    """
    Seeded random decisions:
    - Night stages: random eligible target
    - Day vote: random living player, or a skip with `vote_skip_chance` when allowed
    - Hunter: random living player
    """

    def __init__(self, seed: Optional[int] = None, vote_skip_chance: float = 0.0):
        # Use seed if provided, otherwise non-deterministic
        self.random = random.Random(seed)
        self.vote_skip_chance = vote_skip_chance
        self.results: List[str] = []

    def _pick(self, targets: List[Player]) -> Optional[str]:
        if not targets:
            return None
        return self.random.choice(targets).id

    def choose_night_target(self, stage: NightStage, context: ChoiceContext) -> Optional[str]:
        return self._pick(context.targets)

    def choose_vote(self, context: ChoiceContext) -> Optional[str]:
        if context.can_skip and self.vote_skip_chance and self.random.random() < self.vote_skip_chance:
            return None
        return self._pick(context.targets)

    def choose_hunter_target(self, hunter: Player, context: ChoiceContext) -> Optional[str]:
        return self._pick(context.targets)

    def show_result(self, message: str) -> None:
        self.results.append(message)
