"""Adapter between raw/legacy session records and the canonical Session.

Raw records come from persisted blobs, templates and older exports. They may
carry only the legacy ``time`` string, use camelCase or snake_case keys, or be
partially corrupt. Everything is coerced rather than rejected: missing
collections become empty, missing strings become empty, unparseable times fall
back to 18:00 with the default duration.
"""

import math
from collections.abc import Iterable, Mapping
from typing import Any

from loguru import logger

from weekplan.errors import FormatError
from weekplan.sessions.time_range import format_time_range, parse_time_range
from weekplan.sessions.types import (
    DEFAULT_GAME_DURATION_MIN,
    DEFAULT_SESSION_DURATION_MIN,
    DEFAULT_SESSION_START_MIN,
    MAX_END_MIN,
    MIN_SESSION_DURATION_MIN,
    Session,
    is_game_info,
)
from weekplan.utils.calendar import parse_iso_date


def _pick(raw: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    return None


def _finite_int(value: Any) -> int | None:
    """Floor a numeric value to int; None for missing, non-numeric, NaN or infinite values."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return math.floor(number)


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)


def _str_tuple(value: Any) -> tuple[str, ...]:
    if isinstance(value, (list, tuple)):
        return tuple(str(item) for item in value)
    return ()


def dedupe_participants(ids: Iterable[Any] | None) -> tuple[str, ...]:
    """Drop duplicate participant ids, keeping first-seen order."""
    return tuple(dict.fromkeys(str(item) for item in (ids or ())))


def normalize_duration(value: int | None, default: int = DEFAULT_SESSION_DURATION_MIN) -> int:
    if value is None:
        return default
    return max(MIN_SESSION_DURATION_MIN, value)


def default_duration_for(info: str | None) -> int:
    return DEFAULT_GAME_DURATION_MIN if is_game_info(info) else DEFAULT_SESSION_DURATION_MIN


def derive_start_duration(time_label: str | None, info: str | None = None) -> tuple[int, int]:
    """Derive (start_min, duration_min) from a legacy time-range string.

    Args:
        time_label: Legacy ``HH:MM–HH:MM`` (or bare ``HH:MM``) string
        info: Fixture annotation, used to pick the game default duration

    Returns:
        Parsed start and normalised duration, or the 18:00 default pair when
        the string is missing or malformed
    """
    default_duration = default_duration_for(info)
    try:
        start_min, end_min = parse_time_range(time_label or "")
    except FormatError as e:
        if time_label:
            logger.debug(f"Falling back to default session time: {e}")
        return DEFAULT_SESSION_START_MIN, default_duration
    return start_min, normalize_duration(end_min - start_min, default_duration)


def to_canonical(raw: Mapping[str, Any] | Session) -> Session:
    """Build a canonical Session from a raw record.

    Explicit startMin/durationMin win over the legacy ``time`` string; the
    string is only parsed when a canonical field is missing.

    Args:
        raw: Raw session mapping (camelCase or snake_case keys) or a Session

    Returns:
        Canonical Session with deduplicated participants
    """
    if isinstance(raw, Session):
        raw = raw.model_dump()

    info = _optional_str(_pick(raw, "info"))
    start_min = _finite_int(_pick(raw, "startMin", "start_min"))
    duration_min = _finite_int(_pick(raw, "durationMin", "duration_min"))

    if start_min is None or duration_min is None:
        time_start, time_duration = derive_start_duration(_optional_str(_pick(raw, "time")), info)
        if start_min is None:
            start_min = time_start
        if duration_min is None:
            duration_min = time_duration

    # The end must stay renderable as a two-digit HH:MM
    start_min = min(max(0, start_min), MAX_END_MIN - MIN_SESSION_DURATION_MIN)
    duration_min = min(normalize_duration(duration_min, default_duration_for(info)), MAX_END_MIN - start_min)

    return Session(
        id=str(_pick(raw, "id") or ""),
        date=parse_iso_date(_pick(raw, "date")),
        day=str(_pick(raw, "day") or ""),
        teams=_str_tuple(_pick(raw, "teams")),
        start_min=start_min,
        duration_min=duration_min,
        location=str(_pick(raw, "location") or ""),
        info=info,
        warmup_min=_finite_int(_pick(raw, "warmupMin", "warmup_min")),
        travel_min=_finite_int(_pick(raw, "travelMin", "travel_min")),
        participants=dedupe_participants(_str_tuple(_pick(raw, "participants"))),
        exclude_from_roster=_pick(raw, "excludeFromRoster", "exclude_from_roster") is True,
        roster_label=_optional_str(_pick(raw, "kaderLabel", "roster_label")) or None,
        row_color=_optional_str(_pick(raw, "rowColor", "row_color")),
    )


def to_legacy_string(session: Session) -> str:
    """Render the legacy ``HH:MM–HH:MM`` string; exact inverse of the parser."""
    return format_time_range(session.start_min, session.duration_min)


def to_legacy_session(session: Session) -> dict[str, Any]:
    """Serialize a session for a persisted blob: canonical fields plus the derived ``time``."""
    payload = session.model_dump(mode="json", by_alias=True)
    payload["time"] = to_legacy_string(session)
    return payload
