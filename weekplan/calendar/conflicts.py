"""Participant conflict detection for calendar sessions.

A conflict is two sessions on the same date whose time ranges overlap and
which share at least one participant. Detection is a pure function over a
plan snapshot and is simply re-run on every read; plans hold a few dozen
sessions per week, so the pairwise scan is cheap.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date as date_type

from pydantic import BaseModel, Field

from weekplan.sessions.types import Plan, Session


class SessionConflict(BaseModel):
    """One participant double-booked between two sessions (seen from session_id)."""

    session_id: str = Field(description="Session the conflict is reported on")
    other_session_id: str = Field(description="Overlapping session sharing the participant")
    participant_id: str = Field(description="Shared participant")


def _time_ranges_overlap(start1: int, end1: int, start2: int, end2: int) -> bool:
    """Half-open interval intersection; an empty interval never overlaps anything."""
    if start1 >= end1 or start2 >= end2:
        return False
    return start1 < end2 and start2 < end1


def sessions_overlap(a: Session, b: Session) -> bool:
    """Check if two sessions overlap in time on the same date.

    Args:
        a: First session
        b: Second session

    Returns:
        True if both have the same (known) date and their
        [start_min, start_min + duration_min) intervals intersect
    """
    if a.date is None or b.date is None or a.date != b.date:
        return False
    return _time_ranges_overlap(a.start_min, a.end_min, b.start_min, b.end_min)


def _group_by_date(sessions: Iterable[Session]) -> dict[date_type, list[Session]]:
    by_date: dict[date_type, list[Session]] = defaultdict(list)
    for session in sessions:
        if session.date is not None:
            by_date[session.date].append(session)
    return by_date


def compute_conflicts_by_session(sessions: Plan | Sequence[Session]) -> dict[str, list[SessionConflict]]:
    """Find every participant double-booking in a plan.

    Sessions are compared pairwise within the same date only. For each
    overlapping pair, every shared participant yields one conflict on each
    side, so the result is symmetric.

    Args:
        sessions: Plan snapshot or its sessions

    Returns:
        Mapping of every session id to its conflicts (empty list when none)
    """
    items = sessions.sessions if isinstance(sessions, Plan) else tuple(sessions)
    conflicts: dict[str, list[SessionConflict]] = {session.id: [] for session in items}

    for same_day in _group_by_date(items).values():
        for i, a in enumerate(same_day):
            for b in same_day[i + 1:]:
                if not sessions_overlap(a, b):
                    continue
                b_participants = set(b.participants)
                for pid in (pid for pid in a.participants if pid in b_participants):
                    conflicts[a.id].append(SessionConflict(session_id=a.id, other_session_id=b.id, participant_id=pid))
                    conflicts[b.id].append(SessionConflict(session_id=b.id, other_session_id=a.id, participant_id=pid))

    return conflicts


def find_overlapping_bookings(sessions: Iterable[Session], target: Session, participant_id: str) -> list[Session]:
    """Sessions other than target that already hold participant_id and overlap target.

    Used before an assignment happens, so it cannot rely on the precomputed
    conflict map.
    """
    return [
        session
        for session in sessions
        if session.id != target.id and participant_id in session.participants and sessions_overlap(session, target)
    ]


def conflicted_participants(conflicts: dict[str, list[SessionConflict]], session_id: str) -> set[str]:
    """Participant ids flagged as double-booked on one session."""
    return {conflict.participant_id for conflict in conflicts.get(session_id, [])}
