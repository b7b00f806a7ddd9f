"""Tests for undo/redo over plan snapshots."""

from weekplan.plans.history import PlanHistory
from weekplan.plans.mutations import add_participant, delete_session


def test_undo_and_redo(week_plan):
    """Test stepping back and forward through pushed snapshots."""
    history = PlanHistory(week_plan)
    assert history.can_undo is False

    first = add_participant(week_plan, "g1", "p1")
    history.push(first)
    second = delete_session(first, "s2")
    history.push(second)

    assert history.undo() is first
    assert history.undo() is week_plan
    assert history.undo() is None
    assert history.can_redo is True
    assert history.redo() is first
    assert history.present is first


def test_push_clears_redo(week_plan):
    """Test that a new push discards the redo stack."""
    history = PlanHistory(week_plan)
    history.push(delete_session(week_plan, "s1"))
    history.undo()
    history.push(delete_session(week_plan, "s2"))
    assert history.can_redo is False


def test_pushing_present_is_ignored(week_plan):
    """Test that pushing the unchanged present records nothing."""
    history = PlanHistory(week_plan)
    history.push(add_participant(week_plan, "s1", "p1"))
    assert history.can_undo is False


def test_limit_drops_oldest(week_plan):
    """Test that the oldest snapshots fall off past the limit."""
    history = PlanHistory(week_plan, limit=2)
    plan = week_plan
    for session_id in ("s1", "s2", "g1"):
        plan = delete_session(plan, session_id)
        history.push(plan)
    history.undo()
    history.undo()
    assert history.can_undo is False
    assert len(history.present.sessions) == 2


def test_reset_forgets_history(week_plan):
    """Test that reset clears both stacks."""
    history = PlanHistory(week_plan)
    history.push(delete_session(week_plan, "s1"))
    history.reset(week_plan)
    assert (history.can_undo, history.can_redo) == (False, False)
