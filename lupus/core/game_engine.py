"""
Core match record: phases, the event log and the mutable session state.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import List, Optional, Dict, Any
from dataclasses import dataclass, field

from ..exceptions import StateError
from .player import Player
from .roles import RoleID


class GamePhase(Enum):
    """Current match phase. The same value is used by every consumer."""
    SETUP = "setup"
    REVEAL = "reveal"
    NIGHT = "night"
    DAY = "day"
    ENDED = "ended"


class NightStage(Enum):
    """Night stages, declared in resolution order."""
    WEREWOLF = "werewolf"
    SEER = "seer"
    DOCTOR = "doctor"
    MEDIUM = "medium"


class EventType(Enum):
    """Kinds of entries in the match history."""
    PLAYER_ELIMINATED = "player_eliminated"
    WEREWOLF_TARGET = "werewolf_target"
    DOCTOR_PROTECTION = "doctor_protection"
    PLAYER_SAVED = "player_saved"
    HUNTER_REVENGE = "hunter_revenge"
    MEDIUM_CHECK = "medium_check"
    JESTER_WIN = "jester_win"


class EliminationMethod(Enum):
    """How a player left the match."""
    VOTE = "vote"
    WEREWOLF = "werewolf"
    HUNTER = "hunter"
    UNKNOWN = "unknown"


@dataclass
class GameEvent:
    """One append-only history entry."""
    type: EventType
    description: str
    actor_id: Optional[str] = None
    target_id: Optional[str] = None
    method: Optional[EliminationMethod] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass
class MatchSession:
    """Complete state of one match."""
    players: List[Player] = field(default_factory=list)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    start_date: datetime = field(default_factory=datetime.now)
    phase: GamePhase = GamePhase.SETUP
    round: int = 1

    eliminated_player_ids: List[str] = field(default_factory=list)
    history: List[GameEvent] = field(default_factory=list)

    # Night action tracking
    werewolf_target: Optional[str] = None
    doctor_protection: Optional[str] = None
    last_doctor_protection: Optional[str] = None  # Kept across rounds for the consecutive-save rule
    doctor_self_save_used: bool = False
    night_stages: List[NightStage] = field(default_factory=list)  # Remaining stages of the current night

    # Hunter
    pending_hunter_revenge: Optional[str] = None
    hunter_target: Optional[str] = None

    reveal_index: int = 0
    end_message: Optional[str] = None

    def get_player(self, player_id: str) -> Optional[Player]:
        """Get player by id."""
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def require_player(self, player_id: str) -> Player:
        player = self.get_player(player_id)
        if player is None:
            raise StateError(f"Unknown player: {player_id}")
        return player

    def get_alive_players(self) -> List[Player]:
        """Get all living players in seating order."""
        return [p for p in self.players if p.alive]

    def get_eliminated_players(self) -> List[Player]:
        return [p for p in self.players if not p.alive]

    def is_eliminated(self, player_id: str) -> bool:
        return player_id in self.eliminated_player_ids

    def get_living_werewolves(self) -> List[Player]:
        return [p for p in self.get_alive_players() if p.is_werewolf]

    def get_living_non_werewolves(self) -> List[Player]:
        """Living players outside the werewolf team, jester included."""
        return [p for p in self.get_alive_players() if not p.is_werewolf]

    def get_living_villagers(self) -> List[Player]:
        """Living players on the village team (jester excluded)."""
        return [p for p in self.get_living_non_werewolves() if not p.has_role(RoleID.JESTER)]

    def find_living(self, role_id: RoleID) -> Optional[Player]:
        """First living holder of a role, if any."""
        return next((p for p in self.get_alive_players() if p.has_role(role_id)), None)

    def get_mayor(self) -> Optional[Player]:
        return self.find_living(RoleID.MAYOR)

    def get_pending_hunter(self) -> Optional[Player]:
        if self.pending_hunter_revenge is None:
            return None
        return self.get_player(self.pending_hunter_revenge)

    def events_of(self, event_type: EventType) -> List[GameEvent]:
        return [e for e in self.history if e.type == event_type]

    def log_event(self, event_type: EventType, description: str,
                  actor_id: Optional[str] = None, target_id: Optional[str] = None,
                  method: Optional[EliminationMethod] = None) -> GameEvent:
        """Append an event to the history and return it."""
        event = GameEvent(
            type=event_type,
            description=description,
            actor_id=actor_id,
            target_id=target_id,
            method=method,
        )
        self.history.append(event)
        return event

    @property
    def is_over(self) -> bool:
        return self.phase == GamePhase.ENDED

    @property
    def current_stage(self) -> Optional[NightStage]:
        if self.phase != GamePhase.NIGHT or not self.night_stages:
            return None
        return self.night_stages[0]

    def start_night(self) -> None:
        """
        Transition to night phase.
        The round counter only advances when coming from a day.
        """
        if self.phase not in (GamePhase.REVEAL, GamePhase.DAY):
            raise StateError(f"Cannot start night from phase {self.phase.value}")
        if self.phase == GamePhase.DAY:
            self.round += 1
        self.phase = GamePhase.NIGHT

    def start_day(self) -> None:
        """Transition to day phase. Round stays the same."""
        if self.phase != GamePhase.NIGHT:
            raise StateError(f"Cannot start day from phase {self.phase.value}")
        self.phase = GamePhase.DAY

    def end(self, message: str) -> None:
        """End the match with the evaluator's message."""
        self.phase = GamePhase.ENDED
        self.end_message = message
        self.night_stages = []

    def get_game_summary(self) -> Dict[str, Any]:
        """Get a summary of the current match state."""
        return {
            "id": self.id,
            "phase": self.phase.value,
            "round": self.round,
            "players": len(self.players),
            "alive_players": len(self.get_alive_players()),
            "alive_werewolves": len(self.get_living_werewolves()),
            "alive_non_werewolves": len(self.get_living_non_werewolves()),
            "pending_hunter_revenge": self.pending_hunter_revenge,
            "end_message": self.end_message,
        }
