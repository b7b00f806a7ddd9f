"""Session domain model: canonical shape, legacy time-string adapter, validation."""

from weekplan.sessions.adapter import dedupe_participants, to_canonical, to_legacy_session, to_legacy_string
from weekplan.sessions.types import ErrorKind, Plan, PreBlockKind, Session, is_away_info, is_game_info, session_sort_key
from weekplan.sessions.validators import ensure_valid_session, validate_plan, validate_session

__all__ = [
    "ErrorKind",
    "Plan",
    "PreBlockKind",
    "Session",
    "dedupe_participants",
    "ensure_valid_session",
    "is_away_info",
    "is_game_info",
    "session_sort_key",
    "to_canonical",
    "to_legacy_session",
    "to_legacy_string",
    "validate_plan",
    "validate_session",
]
