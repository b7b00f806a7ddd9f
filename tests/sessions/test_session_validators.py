"""Tests for advisory session validation."""

import pytest

from weekplan.errors import SessionValidationError
from weekplan.sessions.adapter import to_canonical
from weekplan.sessions.types import ErrorKind, Plan
from weekplan.sessions.validators import ensure_valid_session, validate_plan, validate_session


class TestValidateSession:
    def test_valid_session_has_no_errors(self, make_session):
        """Test that a complete session validates cleanly."""
        assert validate_session(make_session()) == []

    def test_reports_every_missing_field(self):
        """An empty record collects all problems instead of stopping at the first."""
        errors = validate_session(to_canonical({}))
        assert errors == [
            ErrorKind.MISSING_ID,
            ErrorKind.MISSING_DATE,
            ErrorKind.MISSING_DAY,
            ErrorKind.MISSING_LOCATION,
            ErrorKind.MISSING_TEAMS,
        ]

    def test_blank_strings_count_as_missing(self, make_session):
        """Test that whitespace-only id and location count as missing."""
        errors = validate_session(make_session(id="  ", location=" "))
        assert ErrorKind.MISSING_ID in errors
        assert ErrorKind.MISSING_LOCATION in errors

    def test_start_past_end_of_day_is_invalid(self, make_session):
        """Test the 0..1439 start range."""
        assert validate_session(make_session(start_min=1440)) == [ErrorKind.INVALID_START]
        assert validate_session(make_session(start_min=1439)) == []

    def test_short_duration_is_invalid(self, make_session):
        """Only constructible directly; the adapter never produces it."""
        assert validate_session(make_session(duration_min=10)) == [ErrorKind.INVALID_DURATION]

    def test_end_past_99_59_is_invalid(self, make_session):
        """Test that an end the legacy HH:MM string cannot express is flagged."""
        assert validate_session(make_session(start_min=1000, duration_min=5000)) == [ErrorKind.INVALID_DURATION]
        assert validate_session(make_session(start_min=1000, duration_min=4999)) == []

    def test_error_kinds_are_strings(self):
        """Test that error kinds compare equal to their string values."""
        assert ErrorKind.INVALID_START == "invalid_start_min"


class TestEnsureValidSession:
    def test_returns_valid_session(self, make_session):
        """Test that a valid session passes through unchanged."""
        session = make_session()
        assert ensure_valid_session(session) is session

    def test_raises_with_details(self, make_session):
        """Test that the raised error carries the code and error kinds."""
        with pytest.raises(SessionValidationError) as exc_info:
            ensure_valid_session(make_session(id="bad", teams=()))
        assert exc_info.value.code == "INVALID_SESSION"
        assert exc_info.value.session_id == "bad"
        assert exc_info.value.details == ["missing_teams"]


def test_validate_plan_keys_by_id_or_index(make_session):
    """Test that the plan report keys sessions by id, or by index without one."""
    plan = Plan(sessions=(make_session(id="ok"), make_session(id="", location=""), make_session(id="x", teams=())))
    report = validate_plan(plan)
    assert set(report) == {"#1", "x"}
    assert report["#1"] == [ErrorKind.MISSING_ID, ErrorKind.MISSING_LOCATION]
