"""
Record kinds and their conversion to and from plain JSON-ready dicts.
"""

import uuid
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Dict, Any, Optional

from ..config.game_config import HouseRules
from ..config.presets import RolePreset
from ..core import (
    Alignment, RoleDefinition, MatchSession, GamePhase, NightStage, Player,
    GameEvent, EventType, EliminationMethod,
)


class EntityKind(Enum):
    """Record kinds kept by the store."""
    ROLE_DEFINITION = "RoleDefinition"
    ROLE_PRESET = "RolePreset"
    SAVED_CONFIG = "SavedConfig"
    MATCH_SESSION = "MatchSession"
    HOUSE_RULES = "HouseRules"
    FREQUENT_PLAYER = "FrequentPlayer"


@dataclass
class SavedConfig:
    """The setup used by the most recent match."""
    player_count: int
    role_counts: Dict[str, int] = field(default_factory=dict)
    preset_id: Optional[str] = None
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    date: datetime = field(default_factory=datetime.now)


@dataclass
class FrequentPlayer:
    """A name offered as a roster suggestion."""
    display_name: str
    play_count: int = 1
    last_played_at: datetime = field(default_factory=datetime.now)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))


def kind_of(entity) -> EntityKind:
    """Map an entity instance to its record kind."""
    for kind, cls in _ENTITY_CLASSES.items():
        if isinstance(entity, cls):
            return kind
    raise TypeError(f"Not a storable entity: {type(entity).__name__}")


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _parse_dt(value: Optional[str]) -> datetime:
    return datetime.fromisoformat(value) if value else datetime.now()


def _session_to_record(session: MatchSession) -> Dict[str, Any]:
    return {
        "id": session.id,
        "start_date": _iso(session.start_date),
        "players": [asdict(p) for p in session.players],
        "phase": session.phase.value,
        "round": session.round,
        "eliminated_player_ids": list(session.eliminated_player_ids),
        "history": [
            {
                "id": e.id,
                "timestamp": _iso(e.timestamp),
                "type": e.type.value,
                "description": e.description,
                "actor_id": e.actor_id,
                "target_id": e.target_id,
                "method": e.method.value if e.method else None,
            }
            for e in session.history
        ],
        "werewolf_target": session.werewolf_target,
        "doctor_protection": session.doctor_protection,
        "last_doctor_protection": session.last_doctor_protection,
        "doctor_self_save_used": session.doctor_self_save_used,
        "night_stages": [s.value for s in session.night_stages],
        "pending_hunter_revenge": session.pending_hunter_revenge,
        "hunter_target": session.hunter_target,
        "reveal_index": session.reveal_index,
        "end_message": session.end_message,
    }


def _session_from_record(data: Dict[str, Any]) -> MatchSession:
    history = [
        GameEvent(
            id=e["id"],
            timestamp=_parse_dt(e.get("timestamp")),
            type=EventType(e["type"]),
            description=e.get("description", ""),
            actor_id=e.get("actor_id"),
            target_id=e.get("target_id"),
            method=EliminationMethod(e["method"]) if e.get("method") else None,
        )
        for e in data.get("history", [])
    ]
    return MatchSession(
        id=data["id"],
        start_date=_parse_dt(data.get("start_date")),
        players=[Player(**p) for p in data.get("players", [])],
        phase=GamePhase(data.get("phase", GamePhase.SETUP.value)),
        round=data.get("round", 1),
        eliminated_player_ids=list(data.get("eliminated_player_ids", [])),
        history=history,
        werewolf_target=data.get("werewolf_target"),
        doctor_protection=data.get("doctor_protection"),
        last_doctor_protection=data.get("last_doctor_protection"),
        doctor_self_save_used=data.get("doctor_self_save_used", False),
        night_stages=[NightStage(s) for s in data.get("night_stages", [])],
        pending_hunter_revenge=data.get("pending_hunter_revenge"),
        hunter_target=data.get("hunter_target"),
        reveal_index=data.get("reveal_index", 0),
        end_message=data.get("end_message"),
    )


def to_record(entity) -> Dict[str, Any]:
    """Convert an entity into a JSON-ready dict."""
    kind = kind_of(entity)
    if kind == EntityKind.MATCH_SESSION:
        return _session_to_record(entity)
    if kind == EntityKind.ROLE_DEFINITION:
        record = asdict(entity)
        record["alignment"] = entity.alignment.value
        record["abilities"] = list(entity.abilities)
        return record
    record = asdict(entity)
    if kind == EntityKind.SAVED_CONFIG:
        record["date"] = _iso(entity.date)
    elif kind == EntityKind.FREQUENT_PLAYER:
        record["last_played_at"] = _iso(entity.last_played_at)
    return record


def from_record(kind: EntityKind, data: Dict[str, Any]):
    """Rebuild an entity of the given kind from its dict form."""
    if kind == EntityKind.MATCH_SESSION:
        return _session_from_record(data)
    if kind == EntityKind.ROLE_DEFINITION:
        values = dict(data)
        values["alignment"] = Alignment(values["alignment"])
        values["abilities"] = tuple(values.get("abilities", ()))
        return RoleDefinition(**values)
    if kind == EntityKind.ROLE_PRESET:
        return RolePreset(**data)
    if kind == EntityKind.HOUSE_RULES:
        return HouseRules(**data)
    if kind == EntityKind.SAVED_CONFIG:
        values = dict(data)
        values["date"] = _parse_dt(values.get("date"))
        return SavedConfig(**values)
    values = dict(data)
    values["last_played_at"] = _parse_dt(values.get("last_played_at"))
    return FrequentPlayer(**values)


_ENTITY_CLASSES = {
    EntityKind.ROLE_DEFINITION: RoleDefinition,
    EntityKind.ROLE_PRESET: RolePreset,
    EntityKind.SAVED_CONFIG: SavedConfig,
    EntityKind.MATCH_SESSION: MatchSession,
    EntityKind.HOUSE_RULES: HouseRules,
    EntityKind.FREQUENT_PLAYER: FrequentPlayer,
}
