"""Week templates: start a new week from nothing, the master plan, or the current week."""

import re
from collections.abc import Iterable
from datetime import date as date_type
from datetime import timedelta
from enum import StrEnum

from loguru import logger

from weekplan.plans.selectors import sort_sessions
from weekplan.sessions.types import Plan, Session
from weekplan.utils.calendar import week_days, week_start, weekday_label, weekday_offset_from_label
from weekplan.utils.ids import random_id

_WEEK_ID_RE = re.compile(r"WEEK_(\d{4}-\d{2}-\d{2})")


class NewWeekMode(StrEnum):
    EMPTY = "EMPTY"
    MASTER = "MASTER"
    COPY_CURRENT = "COPY_CURRENT"


def week_id_for(monday: date_type, *, copy: bool = False) -> str:
    suffix = "_copy" if copy else ""
    return f"WEEK_{monday.isoformat()}{suffix}"


def plan_week_start(plan: Plan, today: date_type | None = None) -> date_type:
    """Monday of the plan's week.

    Taken from a ``WEEK_YYYY-MM-DD`` week id when present, else from the
    earliest session date, else from today.
    """
    match = _WEEK_ID_RE.match(plan.week_id or "")
    if match:
        try:
            return week_start(date_type.fromisoformat(match.group(1)))
        except ValueError:
            logger.debug(f"Ignoring malformed week id {plan.week_id!r}")

    dates = sorted(session.date for session in plan.sessions if session.date is not None)
    if dates:
        return week_start(dates[0])
    return week_start(today or date_type.today())


def week_dates(plan: Plan, today: date_type | None = None) -> list[date_type]:
    """Monday..Sunday of the plan's week."""
    return week_days(plan_week_start(plan, today))


def _weekday_offset(session: Session) -> int:
    offset = weekday_offset_from_label(session.day)
    if offset is not None:
        return offset
    if session.date is not None:
        return session.date.weekday()
    return 0


def apply_week_dates(sessions: Iterable[Session], monday: date_type, *, locale: str | None = None) -> list[Session]:
    """Move sessions onto the same weekdays of the week starting at monday.

    The weekday comes from the day label when it is readable, else from the
    old date, else Monday. Day labels are refreshed; the result is sorted.
    """
    monday = week_start(monday)
    moved = []
    for session in sessions:
        new_date = monday + timedelta(days=_weekday_offset(session))
        moved.append(session.model_copy(update={"date": new_date, "day": weekday_label(new_date, locale)}))
    return sort_sessions(moved)


def new_week(
    mode: NewWeekMode,
    monday: date_type,
    *,
    current: Plan | None = None,
    master: Plan | None = None,
    keep_participants: bool = False,
    locale: str | None = None,
) -> Plan:
    """Create the plan for a new week.

    Args:
        mode: EMPTY (no sessions), MASTER (master template, no participants)
            or COPY_CURRENT (current week's sessions under fresh ids)
        monday: Any day of the target week
        current: Current plan (COPY_CURRENT)
        master: Master template (MASTER)
        keep_participants: Keep participants when copying the current week
        locale: Weekday label locale

    Returns:
        New plan for the target week
    """
    monday = week_start(monday)

    if mode == NewWeekMode.MASTER:
        template = master.sessions if master else ()
        sessions = [
            session.model_copy(update={"participants": ()})
            for session in apply_week_dates(template, monday, locale=locale)
        ]
        plan = Plan(week_id=week_id_for(monday)).with_sessions(sessions)
    elif mode == NewWeekMode.COPY_CURRENT:
        source = current.sessions if current else ()
        copied = [
            session.model_copy(
                update={
                    "id": random_id("sess_"),
                    "participants": session.participants if keep_participants else (),
                }
            )
            for session in source
        ]
        plan = Plan(week_id=week_id_for(monday, copy=True)).with_sessions(apply_week_dates(copied, monday, locale=locale))
    else:
        plan = Plan(week_id=week_id_for(monday))

    logger.info(f"Created week {plan.week_id} ({mode}) with {len(plan.sessions)} sessions")
    return plan
