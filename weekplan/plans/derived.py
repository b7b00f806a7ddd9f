"""Derived read models: per-participant counts and week labels."""

from collections import Counter
from datetime import date as date_type

from weekplan.sessions.types import Plan
from weekplan.utils.calendar import iso_week_number


def compute_training_counts(plan: Plan) -> Counter[str]:
    """Number of sessions each participant is booked into."""
    counts: Counter[str] = Counter()
    for session in plan.sessions:
        counts.update(session.participants)
    return counts


def plan_date_set(plan: Plan) -> set[date_type]:
    return {session.date for session in plan.sessions if session.date is not None}


def week_label(plan: Plan) -> str:
    """Calendar-week label of the plan's dates, e.g. "KW 9" or "KW 9+10"; "KW ?" when undated."""
    weeks = sorted({iso_week_number(d) for d in plan_date_set(plan)})
    if not weeks:
        return "KW ?"
    return "KW " + "+".join(str(week) for week in weeks)
