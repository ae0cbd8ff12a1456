"""
Tests for frequent player name suggestions.
"""

from datetime import datetime, timedelta

from lupus.adapters import EntityKind, FrequentPlayer, FrequentPlayerBook
from lupus.adapters.frequent_players import is_default_player_name


def test_default_names_are_recognized():
    assert is_default_player_name("Player 3")
    assert is_default_player_name("player12")
    assert not is_default_player_name("Playa 3")
    assert not is_default_player_name("Ann")


def test_record_players_used(store):
    book = FrequentPlayerBook(store)
    assert book.record_players_used(["Ann", "Bob", "Player 3", "  ", "ann"])
    assert {p.display_name for p in book.players} == {"Ann", "Bob"}

    book.record_players_used(["Ann"])
    assert book.find("ann").play_count == 2
    assert len(store.load(EntityKind.FREQUENT_PLAYER)) == 2


def test_only_placeholders_changes_nothing(store):
    book = FrequentPlayerBook(store)
    assert not book.record_players_used(["Player 1", "Player 2"])
    assert not store.has_pending_changes


def test_suggestions_ranked_by_play_count_then_recency(store):
    now = datetime.now()
    for name, count, age in [("Ann", 3, 5), ("Bob", 5, 10), ("Cid", 3, 1), ("Dan", 1, 0)]:
        store.insert(FrequentPlayer(display_name=name, play_count=count, last_played_at=now - timedelta(days=age)))
    book = FrequentPlayerBook(store)

    assert book.get_name_suggestions() == ["Bob", "Cid", "Ann", "Dan"]
    assert book.get_name_suggestions(limit=2) == ["Bob", "Cid"]
    assert book.get_name_suggestions(prefix="a") == ["Ann"]
    assert book.get_name_suggestions(excluding=["bob"]) == ["Cid", "Ann", "Dan"]


def test_delete(store):
    book = FrequentPlayerBook(store)
    book.record_players_used(["Ann"])
    assert book.delete("ANN")
    assert not book.delete("Ann")
    assert store.load(EntityKind.FREQUENT_PLAYER) == []
