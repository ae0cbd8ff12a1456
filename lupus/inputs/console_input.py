"""
Console input: the moderator types choices from a numbered list.
"""

from typing import Callable, List, Optional

from .base_input import BaseInput, ChoiceContext
from ..core import Player, NightStage

SKIP_ANSWERS = {"", "s", "skip"}


class ConsoleInput(BaseInput):
    """Prompts on stdin. `input_func` and `output_func` can be swapped out in tests."""

    def __init__(self, input_func: Callable[[str], str] = input,
                 output_func: Callable[[str], None] = print):
        self.input_func = input_func
        self.output_func = output_func

    def _ask(self, title: str, context: ChoiceContext) -> Optional[str]:
        self.output_func(title)
        for number, player in enumerate(context.targets, 1):
            self.output_func(f"  {number}. {player.display_name}")
        hint = " (enter to skip)" if context.can_skip else ""

        while True:
            answer = self.input_func(f"Choose 1-{len(context.targets)}{hint}: ").strip().lower()
            if answer in SKIP_ANSWERS and context.can_skip:
                return None
            chosen = self._parse(answer, context.targets)
            if chosen is not None:
                return chosen.id
            self.output_func("Invalid choice, try again.")

    @staticmethod
    def _parse(answer: str, targets: List[Player]) -> Optional[Player]:
        if answer.isdigit() and 1 <= int(answer) <= len(targets):
            return targets[int(answer) - 1]
        # Accept a name as well as a number
        return next((p for p in targets if p.display_name.lower() == answer), None)

    def choose_night_target(self, stage: NightStage, context: ChoiceContext) -> Optional[str]:
        actor = f" ({context.actor.display_name})" if context.actor else ""
        return self._ask(f"Night {context.round_number}: {stage.value}{actor}, choose a target", context)

    def choose_vote(self, context: ChoiceContext) -> Optional[str]:
        return self._ask(f"Day {context.round_number}: who does the village vote out?", context)

    def choose_hunter_target(self, hunter: Player, context: ChoiceContext) -> Optional[str]:
        return self._ask(f"Hunter {hunter.display_name} takes revenge on", context)

    def confirm_reveal(self, player: Player) -> None:
        self.input_func(f"Pass the device to {player.display_name} and press enter")
        role = player.role
        self.output_func(f"{player.display_name}, you are the {role.emoji} {role.name}: {role.notes}")
        self.input_func("Press enter to hide your role")

    def show_result(self, message: str) -> None:
        self.output_func(message)
