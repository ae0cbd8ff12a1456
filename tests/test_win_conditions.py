"""
Tests for win condition evaluation.
"""

from lupus.core import GamePhase, EventType, RoleID, WinConditionEvaluator, Winner

from conftest import make_session, first, by_role


def test_match_continues():
    session = make_session(["werewolf", "villager", "villager", "villager"])
    assert WinConditionEvaluator().check_win_condition(session) is None


def test_villagers_win_when_no_werewolves():
    session = make_session(["werewolf", "villager", "villager", "villager"])
    first(session, RoleID.WEREWOLF).eliminate()
    result = WinConditionEvaluator().check_win_condition(session)
    assert result.winner == Winner.VILLAGERS
    assert result.message == "Villagers win! All werewolves have been eliminated."


def test_werewolves_win_at_parity():
    """Parity already counts as a werewolf win."""
    session = make_session(["werewolf", "werewolf", "villager", "villager", "villager"])
    by_role(session, RoleID.VILLAGER)[0].eliminate()
    result = WinConditionEvaluator().check_win_condition(session)
    assert result.winner == Winner.WEREWOLVES
    assert result.message == "Werewolves win! They outnumber the remaining players."


def test_jester_counts_as_non_werewolf():
    session = make_session(["werewolf", "jester", "villager"])
    assert WinConditionEvaluator().check_win_condition(session) is None


def test_jester_win_takes_priority():
    session = make_session(["werewolf", "werewolf", "jester", "villager"])
    jester = first(session, RoleID.JESTER)
    jester.eliminate()
    session.log_event(EventType.JESTER_WIN, f"The Jester {jester.display_name} wins the game!", actor_id=jester.id)
    result = WinConditionEvaluator().check_win_condition(session)
    assert result.winner == Winner.JESTER
    assert result.player_id == jester.id
    assert result.message == "The Jester P3 wins the game!"


def test_pending_revenge_defers_decision():
    session = make_session(["werewolf", "hunter", "villager"])
    hunter = first(session, RoleID.HUNTER)
    hunter.eliminate()
    session.pending_hunter_revenge = hunter.id

    evaluator = WinConditionEvaluator()
    assert evaluator.evaluate(session) is None
    assert evaluator.check_and_end(session) is None
    assert session.phase == GamePhase.NIGHT

    session.pending_hunter_revenge = None
    result = evaluator.check_and_end(session)
    assert result.winner == Winner.WEREWOLVES
    assert session.is_over
    assert session.end_message == result.message


def test_check_and_end_is_noop_when_over():
    session = make_session(["werewolf", "villager", "villager", "villager"])
    session.end("done")
    first(session, RoleID.WEREWOLF).eliminate()
    assert WinConditionEvaluator().check_and_end(session) is None
    assert session.end_message == "done"
