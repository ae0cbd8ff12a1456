"""
Tests for notification delivery.
"""

import json
from unittest.mock import Mock

from lupus.core import GamePhase, NightStage, Player
from lupus.adapters import EventEmitter, GameListener, RecordingListener


class BrokenListener(GameListener):
    def on_phase_changed(self, phase, round_number):
        raise RuntimeError("boom")


def test_broken_listener_does_not_stop_delivery():
    recorder = RecordingListener()
    emitter = EventEmitter([BrokenListener(), recorder])
    emitter.emit_phase_changed(GamePhase.NIGHT, 1)
    assert recorder.of_type("phase_changed")[0]["data"] == {"phase": "night", "round": 1}


def test_subscribe_and_unsubscribe():
    listener = Mock(spec=GameListener)
    emitter = EventEmitter()
    emitter.subscribe(listener)
    emitter.emit_game_ended("Villagers win!")
    listener.on_game_ended.assert_called_once_with("Villagers win!")

    emitter.unsubscribe(listener)
    emitter.emit_game_ended("again")
    assert listener.on_game_ended.call_count == 1


def test_recording_listener_writes_jsonl(tmp_path):
    events_file = tmp_path / "events.jsonl"
    recorder = RecordingListener(str(events_file))
    emitter = EventEmitter([recorder])
    target = Player(display_name="Ann", role_id="villager")

    emitter.emit_night_stage_ready(NightStage.WEREWOLF, [target])
    emitter.emit_hunter_revenge_pending("hunter-id", [target])

    lines = [json.loads(line) for line in events_file.read_text().splitlines()]
    assert [e["event_type"] for e in lines] == ["night_stage_ready", "hunter_revenge_pending"]
    assert lines[0]["data"]["eligible_targets"] == [target.id]
    assert [e["sequence"] for e in lines] == [0, 1]
