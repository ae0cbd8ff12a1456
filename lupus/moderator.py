"""
Moderator: owns the active match, drives phase transitions and pushes
state to the record store and the listeners.
"""

import functools
import logging
import random
import threading
from typing import Callable, Dict, List, Optional

from .exceptions import PersistenceError, StateError
from .config.game_config import GameConfig, HouseRules, default_config
from .config.presets import RolePreset, DEFAULT_PRESETS, get_preset
from .core import (
    MatchSession, MatchSetup, GamePhase, NightStage, Player, RoleDefinition,
    EliminationService, WinConditionEvaluator, all_role_definitions, start_game,
)
from .phases import NightResolutionEngine, VotingHandler, PhaseTimer, StageResult
from .adapters import (
    EntityKind, SavedConfig, PersistenceGateway, InMemoryRecordStore,
    EventEmitter, FrequentPlayerBook,
)

logger = logging.getLogger(__name__)


class NoSession:
    """No match is running."""

    def __repr__(self) -> str:
        return "NoSession()"


class ActiveSession:
    """A match is running."""

    def __init__(self, session: MatchSession):
        self.session = session

    def __repr__(self) -> str:
        return f"ActiveSession({self.session.id})"


def serialized(method):
    """Run a command under the moderator lock so timer threads cannot interleave."""
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)
    return wrapper


class Moderator:
    """Runs one match at a time on a shared device."""

    def __init__(self, config: GameConfig = default_config,
                 store: Optional[PersistenceGateway] = None,
                 event_emitter: Optional[EventEmitter] = None,
                 house_rules: Optional[HouseRules] = None,
                 rng: Optional[random.Random] = None):
        self.config = config
        self.store = store or InMemoryRecordStore()
        self.event_emitter = event_emitter or EventEmitter()
        self.rng = rng or random.Random(config.random_seed)
        self.announcements: List[str] = []
        self.degraded = False  # Set once a store write has failed
        self._lock = threading.RLock()

        self.state = NoSession()
        self._end_announced = False
        self.timer: Optional[PhaseTimer] = None

        self.roles: List[RoleDefinition] = []
        self.presets: List[RolePreset] = []
        self.saved_config: Optional[SavedConfig] = None
        self.frequent_players: Optional[FrequentPlayerBook] = None
        self.house_rules = house_rules or config.house_rules
        self._load_data(explicit_rules=house_rules is not None)

        self.setup = MatchSetup(
            player_count=config.default_player_count,
            include_jester=config.include_jester,
        )
        self.setup.suggest_balanced()

    # ------------------------------------------------------------------
    # Data loading and persistence
    # ------------------------------------------------------------------

    def _load_data(self, explicit_rules: bool = False) -> None:
        """Load stored records, seeding roles, presets and rules when missing."""
        try:
            self.roles = self.store.load(EntityKind.ROLE_DEFINITION)
            self.presets = self.store.load(EntityKind.ROLE_PRESET)
            configs = self.store.load(EntityKind.SAVED_CONFIG)
            self.saved_config = max(configs, key=lambda c: c.date) if configs else None
            stored_rules = self.store.load(EntityKind.HOUSE_RULES)
            self.frequent_players = FrequentPlayerBook(self.store)
        except PersistenceError as e:
            self._report_persistence_error(e)
            stored_rules = []
            self.frequent_players = FrequentPlayerBook(InMemoryRecordStore())

        expected = {d.id for d in all_role_definitions()}
        missing = expected - {r.id for r in self.roles}
        if missing:
            logger.info("Missing roles %s, re-seeding", sorted(missing))
            for role in self.roles:
                self.store.delete(role)
            self.roles = all_role_definitions()
            for role in self.roles:
                self.store.insert(role)

        if not self.presets:
            self.presets = list(DEFAULT_PRESETS)
            for preset in self.presets:
                self.store.insert(preset)

        if stored_rules and not explicit_rules:
            self.house_rules = stored_rules[0]
        elif not stored_rules:
            self.store.insert(self.house_rules)

        self._bind_services()
        self._commit()

    def _bind_services(self) -> None:
        self.evaluator = WinConditionEvaluator()
        self.elimination = EliminationService(self.house_rules, self.evaluator)
        self.night = NightResolutionEngine(self.house_rules, self.elimination)
        self.voting = VotingHandler(self.house_rules, self.elimination)

    def _commit(self) -> None:
        try:
            self.store.commit()
        except PersistenceError as e:
            self._report_persistence_error(e)

    def _report_persistence_error(self, error: PersistenceError) -> None:
        # In-memory state stays authoritative; the failure is surfaced, not retried
        self.degraded = True
        logger.error("Persistence failed, continuing without durability: %s", error.message)
        self.event_emitter.emit_persistence_error(error)

    def _persist(self) -> None:
        if isinstance(self.state, ActiveSession):
            self.store.insert(self.state.session)
        self._commit()

    @serialized
    def update_house_rules(self, house_rules: HouseRules) -> None:
        """Replace the house rules; they apply from the next action on."""
        self.house_rules = house_rules
        self._bind_services()
        self.store.insert(house_rules)
        self._commit()

    # ------------------------------------------------------------------
    # Session state
    # ------------------------------------------------------------------

    @property
    def has_session(self) -> bool:
        return isinstance(self.state, ActiveSession)

    @property
    def session(self) -> MatchSession:
        """
        The running match.

        Raises:
            StateError: If no match is running
        """
        if not isinstance(self.state, ActiveSession):
            raise StateError("No active session")
        return self.state.session

    def announce(self, message: str) -> None:
        """Make a moderator announcement."""
        if self.config.use_announcements:
            self.announcements.append(message)
            logger.info("[MODERATOR] %s", message)

    # ------------------------------------------------------------------
    # Setup
    # ------------------------------------------------------------------

    def select_preset(self, preset_id: str) -> RolePreset:
        """
        Load a preset into the setup draft.

        Raises:
            StateError: If the preset does not exist
        """
        preset = get_preset(preset_id, self.presets)
        if preset is None:
            raise StateError(f"Unknown preset: {preset_id}")
        self.setup.apply_preset(preset)
        return preset

    def restore_last_config(self) -> bool:
        """Copy the last saved setup into the draft. Returns False if there is none."""
        if self.saved_config is None:
            return False
        self.setup.set_player_count(self.saved_config.player_count)
        self.setup.role_counts = dict(self.saved_config.role_counts)
        self.setup.preset_id = self.saved_config.preset_id
        self.setup.include_jester = self.setup.get_role_count("jester") > 0
        return True

    @serialized
    def start_game(self, player_count: Optional[int] = None,
                   role_counts: Optional[Dict[str, int]] = None,
                   player_names: Optional[List[str]] = None,
                   phones: Optional[List[Optional[str]]] = None) -> MatchSession:
        """
        Start a match from the setup draft (arguments override the draft).

        Raises:
            ValidationError: If the configuration is not valid
        """
        if player_count is None:
            player_count = self.setup.player_count
        if role_counts is None:
            role_counts = self.setup.role_counts
        if player_names is None:
            player_names = self.setup.player_names
        if phones is None:
            phones = self.setup.phones

        session = start_game(player_count, role_counts, player_names, phones, rng=self.rng)
        self.cancel_timer()
        self.state = ActiveSession(session)
        self._end_announced = False
        self.announcements = []

        config = SavedConfig(
            player_count=player_count,
            role_counts=dict(role_counts),
            preset_id=self.setup.preset_id,
        )
        if self.saved_config is not None:
            self.store.delete(self.saved_config)
        self.store.insert(config)
        self.saved_config = config

        self.frequent_players.record_players_used([p.display_name for p in session.players])
        self._persist()

        self.announce(f"A new match begins with {len(session.players)} players.")
        self.event_emitter.emit_phase_changed(session.phase, session.round)
        return session

    # ------------------------------------------------------------------
    # Reveal
    # ------------------------------------------------------------------

    def current_reveal_player(self) -> Optional[Player]:
        session = self.session
        if session.phase != GamePhase.REVEAL or session.reveal_index >= len(session.players):
            return None
        return session.players[session.reveal_index]

    @serialized
    def next_reveal(self) -> Optional[Player]:
        """
        Move to the next player's reveal. After the last one the first night starts.
        Returns the next player to reveal, or None once the night has begun.
        """
        session = self.session
        if session.phase != GamePhase.REVEAL:
            raise StateError("Reveal is already complete")
        session.reveal_index += 1
        if session.reveal_index >= len(session.players):
            self._begin_night()
            return None
        self._persist()
        return session.players[session.reveal_index]

    @serialized
    def skip_reveal(self) -> None:
        session = self.session
        if session.phase != GamePhase.REVEAL:
            raise StateError("Reveal is already complete")
        session.reveal_index = len(session.players)
        self._begin_night()

    # ------------------------------------------------------------------
    # Night
    # ------------------------------------------------------------------

    def _begin_night(self) -> None:
        session = self.session
        session.start_night()
        self.night.begin_night(session)
        self.announce(f"Night {session.round} falls. Everyone closes their eyes.")
        self.event_emitter.emit_phase_changed(session.phase, session.round)
        self._persist()
        self._next_stage()

    def _next_stage(self) -> None:
        session = self.session
        stage = session.current_stage
        if stage is None:
            self._finish_night()
            return
        self.announce(f"The {stage.value} wakes up.")
        self.event_emitter.emit_night_stage_ready(stage, self.night.eligible_targets(session, stage))

    def _finish_night(self) -> None:
        session = self.session
        outcome = self.night.resolve_night(session)
        if outcome.eliminated_id:
            player = session.get_player(outcome.eliminated_id)
            self.announce(f"{player.display_name} did not survive the night.")
        elif outcome.saved_id:
            self.announce("The doctor saved someone tonight. Nobody died.")
        else:
            self.announce("The night passes quietly.")
        self._after_resolution()

    def eligible_targets(self) -> List[Player]:
        """Eligible targets of the current night stage."""
        session = self.session
        stage = session.current_stage
        if stage is None:
            return []
        return self.night.eligible_targets(session, stage)

    @serialized
    def submit_night_action(self, target_id: str) -> StageResult:
        """
        Complete the current night stage with a target.

        Raises:
            StateError: Outside a night stage or for an ineligible target
        """
        session = self.session
        stage = session.current_stage
        if stage is None:
            raise StateError(f"No night stage is waiting for input during {session.phase.value}")
        result = self.night.submit(session, stage, target_id)
        self._after_stage()
        return result

    @serialized
    def skip_night_stage(self) -> StageResult:
        session = self.session
        stage = session.current_stage
        if stage is None:
            raise StateError("No night stage to skip")
        result = self.night.skip(session, stage)
        self.announce(f"The {stage.value} stage was skipped.")
        self._after_stage()
        return result

    @serialized
    def expire_night_stage(self, stage: NightStage, selection: Optional[str] = None) -> Optional[StageResult]:
        """Timer path: complete `stage` if it is still current, else do nothing."""
        if not self.has_session:
            return None
        result = self.night.expire(self.session, stage, selection)
        if result is not None:
            self._after_stage()
        return result

    def _after_stage(self) -> None:
        self.cancel_timer()
        self._persist()
        self._next_stage()

    # ------------------------------------------------------------------
    # Day
    # ------------------------------------------------------------------

    @serialized
    def vote(self, target_id: str) -> None:
        """
        Eliminate the player chosen by the day vote.

        Raises:
            StateError: Outside the day, with revenge pending, or for a non-living target
        """
        self.voting.resolve_vote(self.session, target_id)
        self.cancel_timer()
        player = self.session.get_player(target_id)
        self.announce(f"The village voted out {player.display_name}.")
        self._after_resolution()

    @serialized
    def skip_vote(self) -> None:
        self.voting.skip_vote(self.session)
        self.cancel_timer()
        self.announce("The village decided not to vote today.")
        self._after_resolution()

    @serialized
    def resolve_ballots(self, ballots: Dict[str, str]) -> Optional[str]:
        """
        Resolve the day from individual ballots {voter_id: target_id}.
        A tie or an empty vote ends the day without elimination.
        Returns the eliminated player id, if any.
        """
        session = self.session
        counts = self.voting.get_vote_counts(session, ballots)
        target_id = self.voting.get_elimination_target(counts)
        if target_id is not None:
            self.vote(target_id)
            return target_id
        self._end_day_without_elimination()
        return None

    def _end_day_without_elimination(self) -> None:
        session = self.session
        if session.phase != GamePhase.DAY or session.pending_hunter_revenge is not None:
            raise StateError("The day cannot end right now")
        self.cancel_timer()
        self.announce("No player was eliminated.")
        self._after_resolution()

    # ------------------------------------------------------------------
    # Hunter revenge
    # ------------------------------------------------------------------

    def hunter_targets(self) -> List[Player]:
        return self.elimination.get_hunter_targets(self.session)

    def can_skip_hunter_revenge(self) -> bool:
        return self.house_rules.allow_skip_hunter_revenge

    def can_doctor_save_himself(self) -> bool:
        return self.night.can_doctor_save_himself(self.session)

    @serialized
    def execute_hunter_revenge(self, hunter_id: str, target_id: str) -> None:
        session = self.session
        self.elimination.execute_hunter_revenge(session, hunter_id, target_id)
        hunter = session.get_player(hunter_id)
        target = session.get_player(target_id)
        self.announce(f"Hunter {hunter.display_name} takes {target.display_name} down with them.")
        self._after_resolution()

    @serialized
    def skip_hunter_revenge(self) -> None:
        self.elimination.skip_hunter_revenge(self.session)
        self.announce("The hunter holds their fire.")
        self._after_resolution()

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _after_resolution(self) -> None:
        """
        Continue after an elimination point: end the match, wait for the
        hunter, or move night -> day / day -> night.
        """
        session = self.session
        if session.is_over:
            self._persist()
            self._announce_end()
            return

        hunter = session.get_pending_hunter()
        if hunter is not None:
            self._persist()
            self.announce(f"{hunter.display_name} was the hunter and may take revenge.")
            self.event_emitter.emit_hunter_revenge_pending(hunter.id, self.hunter_targets())
            return

        if session.phase == GamePhase.NIGHT:
            session.start_day()
            self.announce(f"Day {session.round} begins.")
            self.event_emitter.emit_phase_changed(session.phase, session.round)
            self._persist()
        elif session.phase == GamePhase.DAY:
            self._begin_night()

    def _announce_end(self) -> None:
        if self._end_announced:
            return
        self._end_announced = True
        self.cancel_timer()
        message = self.session.end_message
        self.announce(message)
        self.event_emitter.emit_phase_changed(GamePhase.ENDED, self.session.round)
        self.event_emitter.emit_game_ended(message)

    @serialized
    def end_game_and_return_home(self) -> None:
        """Discard the current match."""
        self.cancel_timer()
        self.state = NoSession()
        self._end_announced = False
        logger.info("Match discarded, returning home")

    # ------------------------------------------------------------------
    # Phase timer
    # ------------------------------------------------------------------

    def create_phase_timer(self, get_selection: Callable[[], Optional[str]] = lambda: None) -> Optional[PhaseTimer]:
        """
        Create (but not start) a timer for the current night stage or day vote.
        Returns None when the house rules disable the timer.
        """
        seconds = self.house_rules.phase_timer_seconds
        if seconds <= 0:
            return None
        session = self.session
        self.cancel_timer()

        if session.phase == GamePhase.NIGHT and session.current_stage is not None:
            stage = session.current_stage
            self.timer = PhaseTimer(seconds, lambda: self.expire_night_stage(stage, get_selection()))
        elif session.phase == GamePhase.DAY:
            round_number = session.round
            self.timer = PhaseTimer(seconds, lambda: self._expire_vote(round_number, get_selection()))
        else:
            raise StateError(f"No timed action during {session.phase.value}")
        return self.timer

    @serialized
    def _expire_vote(self, round_number: int, selection: Optional[str]) -> None:
        if not self.has_session:
            return
        session = self.session
        if (session.phase != GamePhase.DAY or session.round != round_number
                or session.pending_hunter_revenge is not None):
            return
        target = session.get_player(selection) if selection else None
        if target is not None and target.alive:
            self.vote(target.id)
        else:
            self._end_day_without_elimination()

    def cancel_timer(self) -> None:
        if self.timer is not None:
            self.timer.cancel()
            self.timer = None
