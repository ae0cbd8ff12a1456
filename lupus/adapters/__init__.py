"""
Edge adapters: record stores, notifications and roster suggestions.
"""

from .records import EntityKind, SavedConfig, FrequentPlayer, to_record, from_record
from .record_store import PersistenceGateway, InMemoryRecordStore, JsonRecordStore
from .event_emitter import EventEmitter, GameListener, RecordingListener
from .frequent_players import FrequentPlayerBook, is_default_player_name

__all__ = [
    'EntityKind',
    'SavedConfig',
    'FrequentPlayer',
    'to_record',
    'from_record',
    'PersistenceGateway',
    'InMemoryRecordStore',
    'JsonRecordStore',
    'EventEmitter',
    'GameListener',
    'RecordingListener',
    'FrequentPlayerBook',
    'is_default_player_name',
]
