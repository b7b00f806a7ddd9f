"""Pure plan edits.

Every function takes a plan snapshot and returns a new one; nothing is
mutated in place. When an edit changes nothing (unknown id, participant
already present, ...) the input plan object itself is returned, so callers
can detect "no change" by identity.
"""

import math
from collections.abc import Callable
from datetime import date as date_type
from typing import Any

from loguru import logger

from weekplan.calendar.conflicts import find_overlapping_bookings
from weekplan.config.settings import settings
from weekplan.errors import ConflictError
from weekplan.sessions.adapter import to_canonical
from weekplan.sessions.types import MAX_END_MIN, MAX_START_MIN, Plan, PreBlockKind, Session
from weekplan.utils.calendar import weekday_label

ParticipantSortKey = Callable[[str], Any]


def _ordered(participants: list[str], sort_key: ParticipantSortKey | None) -> tuple[str, ...]:
    if sort_key is not None:
        participants = sorted(participants, key=sort_key)
    return tuple(participants)


def check_assignment(plan: Plan, session_id: str, participant_id: str) -> None:
    """Ensure participant_id can join session_id without a double-booking.

    Raises:
        ConflictError: If the participant is already in another session
            overlapping the target on the same date
    """
    target = plan.get(session_id)
    if target is None:
        return
    overlapping = find_overlapping_bookings(plan.sessions, target, participant_id)
    if overlapping:
        raise ConflictError(participant_id, session_id, [session.id for session in overlapping])


def add_participant(
    plan: Plan,
    session_id: str,
    participant_id: str,
    *,
    sort_key: ParticipantSortKey | None = None,
) -> Plan:
    """Add a participant to a session (idempotent) and re-sort its participants."""
    session = plan.get(session_id)
    if session is None or participant_id in session.participants:
        return plan
    participants = _ordered([*session.participants, participant_id], sort_key)
    return plan.replace_session(session.model_copy(update={"participants": participants}), sort=False)


def remove_participant(
    plan: Plan,
    session_id: str,
    participant_id: str,
    *,
    sort_key: ParticipantSortKey | None = None,
) -> Plan:
    session = plan.get(session_id)
    if session is None or participant_id not in session.participants:
        return plan
    participants = _ordered([pid for pid in session.participants if pid != participant_id], sort_key)
    return plan.replace_session(session.model_copy(update={"participants": participants}), sort=False)


def remove_participant_everywhere(plan: Plan, participant_id: str) -> Plan:
    """Drop a participant from every session (e.g. after deleting them from the roster)."""
    if not any(participant_id in session.participants for session in plan.sessions):
        return plan
    return plan.with_sessions(
        (
            session.model_copy(update={"participants": tuple(pid for pid in session.participants if pid != participant_id)})
            if participant_id in session.participants
            else session
            for session in plan.sessions
        ),
        sort=False,
    )


def relocate_session(
    plan: Plan,
    session_id: str,
    target_date: date_type,
    start_min: int,
    *,
    locale: str | None = None,
) -> Plan:
    """Move a session to another day/start, keeping its duration; re-sorts the plan."""
    session = plan.get(session_id)
    if session is None:
        return plan
    start = min(MAX_START_MIN, max(0, int(start_min)))
    moved = session.model_copy(
        update={
            "date": target_date,
            "day": weekday_label(target_date, locale),
            "start_min": start,
            "duration_min": min(session.duration_min, MAX_END_MIN - start),
        }
    )
    logger.debug(f"Relocated session {session_id} to {target_date} {moved.time_label}")
    return plan.replace_session(moved)


def can_resize(session: Session) -> bool:
    """Only non-game sessions have a draggable trailing edge."""
    return not session.is_game


def resize_session(plan: Plan, session_id: str, end_min: int, *, min_duration_min: int | None = None) -> Plan:
    """Set a non-game session's duration from its new end, never below the resize floor."""
    session = plan.get(session_id)
    if session is None or not can_resize(session):
        return plan
    floor = settings.resize_min_duration_min if min_duration_min is None else min_duration_min
    duration = max(floor, int(end_min) - session.start_min)
    if duration == session.duration_min:
        return plan
    return plan.replace_session(session.model_copy(update={"duration_min": duration}))


def pre_block_minutes(
    session: Session,
    kind: PreBlockKind,
    boundary_min: int,
    *,
    max_min: int | None = None,
    step_min: int | None = None,
) -> int:
    """Minutes a pre-block must last for its leading edge to sit at boundary_min.

    Warm-up ends at the session start; travel ends where the warm-up begins.
    The result is clamped to [0, max_min] and rounded to step_min.
    """
    max_min = settings.pre_block_max_min if max_min is None else max_min
    step_min = step_min or settings.pre_block_step_min

    block_end = session.start_min
    if kind == PreBlockKind.TRAVEL:
        block_end -= max(0, int(session.warmup_min or 0))

    minutes = min(max_min, max(0, block_end - int(boundary_min)))
    return math.floor(minutes / step_min + 0.5) * step_min


def _pre_block_field(kind: PreBlockKind) -> str:
    return "travel_min" if kind == PreBlockKind.TRAVEL else "warmup_min"


def resize_pre_block(plan: Plan, session_id: str, kind: PreBlockKind, boundary_min: int) -> Plan:
    session = plan.get(session_id)
    if session is None:
        return plan
    minutes = pre_block_minutes(session, kind, boundary_min)
    return plan.replace_session(session.model_copy(update={_pre_block_field(kind): minutes}), sort=False)


def set_travel_minutes(plan: Plan, session_id: str, minutes: int | None) -> Plan:
    """Store an externally computed travel duration (e.g. from a routing lookup)."""
    session = plan.get(session_id)
    if session is None:
        return plan
    value = None if minutes is None else max(0, int(minutes))
    return plan.replace_session(session.model_copy(update={"travel_min": value}), sort=False)


def toggle_pre_block(plan: Plan, session_id: str, kind: PreBlockKind, *, default_min: int | None = None) -> Plan:
    """Switch a pre-block off (0) when present, else on with the default length."""
    session = plan.get(session_id)
    if session is None:
        return plan
    field = _pre_block_field(kind)
    current = max(0, int(getattr(session, field) or 0))
    default_min = settings.pre_block_toggle_min if default_min is None else default_min
    return plan.replace_session(session.model_copy(update={field: 0 if current > 0 else default_min}), sort=False)


def delete_session(plan: Plan, session_id: str) -> Plan:
    if plan.get(session_id) is None:
        return plan
    return plan.with_sessions((session for session in plan.sessions if session.id != session_id), sort=False)


def upsert_session(plan: Plan, raw: Session | dict[str, Any]) -> Plan:
    """Insert or replace a session (matched by id) after canonicalising it; re-sorts the plan."""
    session = to_canonical(raw)
    if plan.get(session.id) is None:
        return plan.with_sessions([*plan.sessions, session])
    return plan.replace_session(session)
