"""Read-side views over a plan snapshot."""

from collections import defaultdict
from collections.abc import Iterable
from datetime import date as date_type

from weekplan.sessions.types import Plan, Session, session_sort_key


def sort_sessions(sessions: Iterable[Session]) -> list[Session]:
    return sorted(sessions, key=session_sort_key)


def select_schedule_sessions(plan: Plan) -> list[Session]:
    """Every session, in presentation order (schedule and calendar views)."""
    return sort_sessions(plan.sessions)


def select_roster_sessions(plan: Plan) -> list[Session]:
    """Sessions shown on the roster: those not flagged exclude_from_roster."""
    return [session for session in select_schedule_sessions(plan) if not session.exclude_from_roster]


def sessions_by_date(plan: Plan) -> dict[date_type, list[Session]]:
    """Group dated sessions by date, each group ordered by start."""
    grouped: dict[date_type, list[Session]] = defaultdict(list)
    for session in select_schedule_sessions(plan):
        if session.date is not None:
            grouped[session.date].append(session)
    return dict(grouped)
