"""
Event emitter delivering engine notifications to the UI collaborator.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from threading import Lock
from typing import Dict, Any, List, Optional, Sequence

from ..core import GamePhase, NightStage, Player

logger = logging.getLogger(__name__)


class GameListener:
    """Receives engine notifications. Override the callbacks you need."""

    def on_phase_changed(self, phase: GamePhase, round_number: int) -> None:
        pass

    def on_night_stage_ready(self, stage: NightStage, eligible_targets: Sequence[Player]) -> None:
        pass

    def on_game_ended(self, message: str) -> None:
        pass

    def on_hunter_revenge_pending(self, hunter_id: str, eligible_targets: Sequence[Player]) -> None:
        pass

    def on_persistence_error(self, error: Exception) -> None:
        pass


class EventEmitter:
    """Fans notifications out to the listeners registered by the composition root."""

    def __init__(self, listeners: Optional[List[GameListener]] = None):
        self.listeners: List[GameListener] = list(listeners or [])

    def subscribe(self, listener: GameListener) -> None:
        self.listeners.append(listener)

    def unsubscribe(self, listener: GameListener) -> None:
        if listener in self.listeners:
            self.listeners.remove(listener)

    def _emit(self, callback: str, *args) -> None:
        for listener in list(self.listeners):
            try:
                getattr(listener, callback)(*args)
            except Exception:
                # Don't let a broken listener break the match
                logger.exception("Listener %r failed in %s", listener, callback)

    def emit_phase_changed(self, phase: GamePhase, round_number: int) -> None:
        self._emit("on_phase_changed", phase, round_number)

    def emit_night_stage_ready(self, stage: NightStage, eligible_targets: Sequence[Player]) -> None:
        self._emit("on_night_stage_ready", stage, list(eligible_targets))

    def emit_game_ended(self, message: str) -> None:
        self._emit("on_game_ended", message)

    def emit_hunter_revenge_pending(self, hunter_id: str, eligible_targets: Sequence[Player]) -> None:
        self._emit("on_hunter_revenge_pending", hunter_id, list(eligible_targets))

    def emit_persistence_error(self, error: Exception) -> None:
        self._emit("on_persistence_error", error)


class RecordingListener(GameListener):
    """Keeps every notification as a sequenced dict, optionally appended to a JSONL file."""

    def __init__(self, events_file: Optional[str] = None):
        self.events: List[Dict[str, Any]] = []
        self.events_file = Path(events_file) if events_file else None
        self._lock = Lock()

    def record_event(self, event_type: str, data: Dict[str, Any]) -> None:
        with self._lock:
            event = {
                "timestamp": datetime.now().isoformat(),
                "event_type": event_type,
                "data": data,
                "sequence": len(self.events),
            }
            self.events.append(event)
            if self.events_file:
                with open(self.events_file, 'a') as f:
                    f.write(json.dumps(event) + '\n')

    def of_type(self, event_type: str) -> List[Dict[str, Any]]:
        return [e for e in self.events if e["event_type"] == event_type]

    def on_phase_changed(self, phase: GamePhase, round_number: int) -> None:
        self.record_event("phase_changed", {"phase": phase.value, "round": round_number})

    def on_night_stage_ready(self, stage: NightStage, eligible_targets: Sequence[Player]) -> None:
        self.record_event("night_stage_ready", {
            "stage": stage.value,
            "eligible_targets": [p.id for p in eligible_targets],
        })

    def on_game_ended(self, message: str) -> None:
        self.record_event("game_ended", {"message": message})

    def on_hunter_revenge_pending(self, hunter_id: str, eligible_targets: Sequence[Player]) -> None:
        self.record_event("hunter_revenge_pending", {
            "hunter_id": hunter_id,
            "eligible_targets": [p.id for p in eligible_targets],
        })

    def on_persistence_error(self, error: Exception) -> None:
        self.record_event("persistence_error", {"error": str(error)})
