"""
Command line runner for a moderated Lupus match.
"""

import argparse
import logging
import random
from typing import List, Optional

from lupus.exceptions import GameError, StateError
from lupus.config import GameConfig, load_config
from lupus.core import GamePhase, NightStage
from lupus.moderator import Moderator
from lupus.adapters import EventEmitter, RecordingListener, JsonRecordStore, InMemoryRecordStore
from lupus.inputs import BaseInput, ChoiceContext, ConsoleInput, RandomInput


class LupusGame:
    """Drives a Moderator with decisions from an input source until the match ends."""

    def __init__(self, config: GameConfig, game_input: BaseInput,
                 events_file: Optional[str] = None):
        self.config = config
        self.input = game_input

        # Generate seed if not provided, so a run can always be replayed
        if self.config.random_seed is None:
            self.config.random_seed = random.randint(0, 2**31 - 1)

        self.recorder = RecordingListener(events_file)
        self.event_emitter = EventEmitter([self.recorder])
        store = JsonRecordStore(config.storage_dir) if config.storage_dir else InMemoryRecordStore()
        self.moderator = Moderator(config, store=store, event_emitter=self.event_emitter)

    def run_game(self, player_names: Optional[List[str]] = None, preset_id: Optional[str] = None,
                 player_count: Optional[int] = None) -> str:
        """
        Run a complete match.
        Returns the end message.
        """
        moderator = self.moderator
        if preset_id:
            moderator.select_preset(preset_id)
        elif player_count:
            moderator.setup.set_player_count(player_count)
            moderator.setup.suggest_balanced()
        if player_names:
            if len(player_names) != moderator.setup.player_count and not preset_id:
                moderator.setup.set_player_count(len(player_names))
                moderator.setup.suggest_balanced()
            for index, name in enumerate(player_names):
                moderator.setup.set_player_name(index, name)

        session = moderator.start_game()
        print("=" * 60)
        print(f"LUPUS - {len(session.players)} players, seed {self.config.random_seed}")
        print("=" * 60)

        for player in list(session.players):
            self.input.confirm_reveal(player)
            moderator.next_reveal()

        while not session.is_over:
            hunter = session.get_pending_hunter()
            if hunter is not None:
                self._hunter_turn(hunter)
            elif session.phase == GamePhase.NIGHT:
                self._night_turn(session.current_stage)
            elif session.phase == GamePhase.DAY:
                self._day_turn()
            else:
                raise GameError(f"Unexpected phase {session.phase.value}")

        self._print_game_summary()
        return session.end_message

    def _night_turn(self, stage: NightStage) -> None:
        moderator = self.moderator
        session = moderator.session
        context = ChoiceContext(
            round_number=session.round,
            targets=moderator.eligible_targets(),
            actor=moderator.night.stage_actor(session, stage),
            can_skip=moderator.night.can_skip(stage),
        )
        timer = moderator.create_phase_timer()
        if timer:
            timer.start()
        choice = self.input.choose_night_target(stage, context)
        if timer and not timer.confirm():
            return  # The timer already completed this stage

        if choice is None:
            if context.can_skip:
                moderator.skip_night_stage()
            else:
                moderator.expire_night_stage(stage)
            return
        result = moderator.submit_night_action(choice)
        if result.is_werewolf is not None:
            target = session.get_player(result.target_id)
            verdict = "is a werewolf" if result.is_werewolf else "is not a werewolf"
            self.input.show_result(f"{target.display_name} {verdict}")

    def _day_turn(self) -> None:
        moderator = self.moderator
        session = moderator.session
        context = ChoiceContext(
            round_number=session.round,
            targets=moderator.voting.get_vote_targets(session),
            can_skip=moderator.house_rules.allow_skip_day_voting,
        )
        timer = moderator.create_phase_timer()
        if timer:
            timer.start()
        choice = self.input.choose_vote(context)
        if timer and not timer.confirm():
            return  # The timer already ended the day

        if choice is not None:
            moderator.vote(choice)
        elif context.can_skip:
            moderator.skip_vote()
        else:
            raise StateError("House rules require a vote before night falls")

    def _hunter_turn(self, hunter) -> None:
        moderator = self.moderator
        context = ChoiceContext(
            round_number=moderator.session.round,
            targets=moderator.hunter_targets(),
            actor=hunter,
            can_skip=moderator.can_skip_hunter_revenge(),
        )
        choice = self.input.choose_hunter_target(hunter, context)
        if choice is not None:
            moderator.execute_hunter_revenge(hunter.id, choice)
        elif context.can_skip:
            moderator.skip_hunter_revenge()
        else:
            raise StateError(f"Hunter {hunter.display_name} must choose a target")

    def _print_game_summary(self) -> None:
        session = self.moderator.session
        print("\n" + "=" * 60)
        print(f"GAME OVER - {session.end_message}")
        print("=" * 60)
        print(f"Rounds played: {session.round}")
        print(f"Random Seed: {self.config.random_seed}")

        print("\nPlayers:")
        for player in session.players:
            status = "alive" if player.alive else "eliminated"
            print(f"  • {player.display_name}: {player.role.name} ({status})")

        print("\nHistory:")
        for event in session.history:
            print(f"  - {event.description}")

        if self.moderator.degraded:
            print("\nWarning: the match could not be saved.")


def main():
    """Entry point for running a match."""
    parser = argparse.ArgumentParser(
        description="Moderate a Lupus (Werewolf) match",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --names Ann,Bob,Cid,Dan,Eve,Fay    # Play interactively
  python main.py --simulate --players 12 --seed 7   # Random autoplay
  python main.py --config configs/house_rules.yaml --preset classic_8
        """
    )
    parser.add_argument("--config", "-c", type=str, default=None,
                        help="Path to YAML configuration file (default: use default config)")
    parser.add_argument("--players", "-p", type=int, default=None,
                        help="Number of players (uses the balanced role suggestion)")
    parser.add_argument("--names", "-n", type=str, default=None,
                        help="Comma separated player names")
    parser.add_argument("--preset", type=str, default=None,
                        help="Role preset id (e.g. classic_8)")
    parser.add_argument("--jester", action="store_true",
                        help="Include the jester in the suggested setup")
    parser.add_argument("--seed", "-s", type=int, default=None,
                        help="Random seed for reproducible role assignment and autoplay")
    parser.add_argument("--storage", type=str, default=None,
                        help="Directory for JSON records (default: in memory)")
    parser.add_argument("--events-file", type=str, default=None,
                        help="Append every notification to this JSONL file")
    parser.add_argument("--simulate", action="store_true",
                        help="Make every decision at random instead of prompting")

    args = parser.parse_args()

    config = load_config(args.config) if args.config else GameConfig()
    if args.seed is not None:
        config.random_seed = args.seed
    if args.storage:
        config.storage_dir = args.storage
    if args.jester:
        config.include_jester = True

    logging.basicConfig(
        level=getattr(logging, str(config.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    names = [n.strip() for n in args.names.split(",")] if args.names else None

    try:
        game = LupusGame(config, ConsoleInput(), events_file=args.events_file)
        if args.simulate:
            # Autoplay replays with the same seed as the role assignment
            game.input = RandomInput(config.random_seed)
        game.run_game(player_names=names, preset_id=args.preset, player_count=args.players)
    except GameError as e:
        print(f"\n❌ ERROR: {e.message}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
