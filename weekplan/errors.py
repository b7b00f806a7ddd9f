"""Canonical weekplan error types.

Only the adapters' strict helpers and the mutation checks raise these; the
public entry points catch them and degrade to defaults, no-ops or transient
messages so that a partially corrupt plan never takes the tool down.

- SessionValidationError: opt-in hard failure for callers blocking a save
- FormatError: unparseable legacy time-range string
- ConflictError: participant double-booking on an assignment
- GatingAbort: identifier prompt cancelled
"""

from collections.abc import Sequence


class WeekPlanError(Exception):
    """Base exception for the scheduling core."""

    pass


class SessionValidationError(WeekPlanError):
    """Raised when a session fails validation and the caller asked to block.

    Attributes:
        code: Error code (always "INVALID_SESSION")
        session_id: Id of the offending session (may be empty)
        details: Error kinds reported by validate_session
    """

    def __init__(self, session_id: str, details: Sequence[str]):
        self.code = "INVALID_SESSION"
        self.session_id = session_id
        self.details = list(details)
        super().__init__(f"{self.code} ({session_id or '<no id>'}): {self.details}")


class FormatError(WeekPlanError, ValueError):
    """Raised when a legacy time-range string cannot be parsed."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid time range: {value!r}")


class ConflictError(WeekPlanError):
    """Raised when assigning a participant would double-book them.

    Attributes:
        participant_id: Participant being assigned
        target_session_id: Session the participant was dropped on
        conflicting_session_ids: Overlapping sessions already holding the participant
    """

    def __init__(self, participant_id: str, target_session_id: str, conflicting_session_ids: Sequence[str]):
        self.participant_id = participant_id
        self.target_session_id = target_session_id
        self.conflicting_session_ids = list(conflicting_session_ids)
        super().__init__(
            f"Participant {participant_id} already booked in overlapping sessions "
            f"{', '.join(self.conflicting_session_ids)} (target {target_session_id})"
        )


class GatingAbort(WeekPlanError):
    """Raised when the identifier prompt is cancelled (no mutation, nothing to report)."""

    pass