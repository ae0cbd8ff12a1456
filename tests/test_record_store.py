"""
Tests for the record stores and record conversion.
"""

import json
import random
from unittest.mock import patch

import pytest

from lupus.exceptions import PersistenceError
from lupus.core import GamePhase, NightStage, EventType, EliminationMethod, start_game, all_role_definitions
from lupus.config import HouseRules, DEFAULT_PRESETS
from lupus.adapters import (
    EntityKind, SavedConfig, FrequentPlayer, JsonRecordStore,
)
from lupus.adapters.records import to_record, from_record, kind_of


def test_insert_is_visible_before_commit(store):
    config = SavedConfig(player_count=8, role_counts={"werewolf": 2, "villager": 6})
    store.insert(config)
    assert store.has_pending_changes
    assert store.load(EntityKind.SAVED_CONFIG) == [config]

    store.commit()
    assert not store.has_pending_changes
    assert store.load(EntityKind.SAVED_CONFIG) == [config]


def test_insert_replaces_by_id(store):
    player = FrequentPlayer(display_name="Ann")
    store.insert(player)
    player.play_count = 3
    store.insert(player)
    store.commit()
    loaded = store.load(EntityKind.FREQUENT_PLAYER)
    assert len(loaded) == 1
    assert loaded[0].play_count == 3


def test_delete(store):
    rules = HouseRules()
    store.insert(rules)
    store.commit()
    store.delete(rules)
    assert store.load(EntityKind.HOUSE_RULES) == []
    store.commit()
    assert store.load(EntityKind.HOUSE_RULES) == []


def test_failed_commit_keeps_staged_changes(store):
    store.insert(HouseRules())
    with patch.object(store, "_write", side_effect=PersistenceError("HouseRules", OSError("disk full"))):
        with pytest.raises(PersistenceError) as exc_info:
            store.commit()
    assert exc_info.value.kind == "HouseRules"
    assert store.has_pending_changes

    store.commit()
    assert not store.has_pending_changes
    assert len(store.load(EntityKind.HOUSE_RULES)) == 1


def test_failing_commits_keep_one_staged_op_per_entity(store):
    """Repeated saves of the same entity while writes fail do not pile up."""
    player = FrequentPlayer(display_name="Ann")
    with patch.object(store, "_write", side_effect=PersistenceError("FrequentPlayer", OSError("disk full"))):
        sizes = []
        for count in range(1, 6):
            player.play_count = count
            store.insert(player)
            with pytest.raises(PersistenceError):
                store.commit()
            sizes.append(store.staged_count)
    assert sizes == [1, 1, 1, 1, 1]
    assert store.load(EntityKind.FREQUENT_PLAYER)[0].play_count == 5

    store.delete(player)
    assert store.staged_count == 1
    assert store.load(EntityKind.FREQUENT_PLAYER) == []


def test_kind_of_rejects_unknown_entities():
    with pytest.raises(TypeError):
        kind_of(object())


def test_session_record_round_trip():
    session = start_game(6, {"werewolf": 1, "seer": 1, "villager": 4}, ["Ann", "Bob"], rng=random.Random(3))
    session.phase = GamePhase.NIGHT
    session.night_stages = [NightStage.SEER]
    victim = session.players[0]
    victim.alive = False
    session.eliminated_player_ids.append(victim.id)
    session.log_event(EventType.PLAYER_ELIMINATED, "Ann was eliminated", actor_id=victim.id,
                      method=EliminationMethod.WEREWOLF)

    record = to_record(session)
    json.dumps(record)  # Must be plain JSON
    restored = from_record(EntityKind.MATCH_SESSION, record)

    assert restored.id == session.id
    assert restored.phase == GamePhase.NIGHT
    assert restored.night_stages == [NightStage.SEER]
    assert restored.players == session.players
    assert restored.history[0].method == EliminationMethod.WEREWOLF
    assert restored.history[0].timestamp == session.history[0].timestamp


def test_catalog_records_convert():
    for definition in all_role_definitions():
        assert from_record(EntityKind.ROLE_DEFINITION, to_record(definition)) == definition
    preset = DEFAULT_PRESETS[0]
    assert from_record(EntityKind.ROLE_PRESET, to_record(preset)) == preset


def test_json_store_persists_across_instances(tmp_path):
    store = JsonRecordStore(str(tmp_path))
    config = SavedConfig(player_count=6, role_counts={"werewolf": 1, "villager": 5}, preset_id="classic_6")
    store.insert(config)
    store.insert(HouseRules(allow_skip_day_voting=True))
    store.commit()

    assert (tmp_path / "SavedConfig.json").exists()
    reopened = JsonRecordStore(str(tmp_path))
    assert reopened.load(EntityKind.SAVED_CONFIG) == [config]
    assert reopened.load(EntityKind.HOUSE_RULES)[0].allow_skip_day_voting


def test_json_store_rejects_corrupt_file(tmp_path):
    (tmp_path / "HouseRules.json").write_text("{not json")
    with pytest.raises(PersistenceError):
        JsonRecordStore(str(tmp_path))


def test_json_store_write_failure(tmp_path):
    store = JsonRecordStore(str(tmp_path))
    store.insert(HouseRules())
    with patch("lupus.adapters.record_store.open", side_effect=OSError("read-only"), create=True):
        with pytest.raises(PersistenceError):
            store.commit()
    assert store.has_pending_changes
