"""Advisory session validation.

validate_session collects every problem instead of raising so a caller can
decide whether to block a save; ensure_valid_session is the blocking variant.
"""

from weekplan.errors import SessionValidationError
from weekplan.sessions.types import MAX_END_MIN, MAX_START_MIN, MIN_SESSION_DURATION_MIN, ErrorKind, Plan, Session


def validate_session(session: Session) -> list[ErrorKind]:
    """Validate a canonical session.

    Args:
        session: Session to check

    Returns:
        Zero or more error kinds, in a stable order
    """
    errors: list[ErrorKind] = []
    if not session.id.strip():
        errors.append(ErrorKind.MISSING_ID)
    if session.date is None:
        errors.append(ErrorKind.MISSING_DATE)
    if not session.day.strip():
        errors.append(ErrorKind.MISSING_DAY)
    if not session.location.strip():
        errors.append(ErrorKind.MISSING_LOCATION)
    if not session.teams:
        errors.append(ErrorKind.MISSING_TEAMS)
    if not 0 <= session.start_min <= MAX_START_MIN:
        errors.append(ErrorKind.INVALID_START)
    if session.duration_min < MIN_SESSION_DURATION_MIN or session.end_min > MAX_END_MIN:
        errors.append(ErrorKind.INVALID_DURATION)
    return errors


def ensure_valid_session(session: Session) -> Session:
    """Return the session unchanged, or raise if it has any validation error.

    Raises:
        SessionValidationError: If validate_session reports anything
    """
    errors = validate_session(session)
    if errors:
        raise SessionValidationError(session.id, [str(error) for error in errors])
    return session


def validate_plan(plan: Plan) -> dict[str, list[ErrorKind]]:
    """Map session id to its error kinds, for sessions with at least one error."""
    report: dict[str, list[ErrorKind]] = {}
    for index, session in enumerate(plan.sessions):
        errors = validate_session(session)
        if errors:
            report[session.id or f"#{index}"] = errors
    return report
