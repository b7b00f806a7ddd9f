"""Canonical session and plan shapes.

A session's time is always the explicit pair (start_min, duration_min); the
legacy ``HH:MM–HH:MM`` string is derived on demand (see time_label) and is
never stored. Sessions and plans are frozen: every edit produces a new value
via model_copy, so snapshots can be compared by identity.

Pre-activity blocks (warm-up, travel) are not entities of their own. They are
derived from warmup_min / travel_min each time the calendar is laid out.
"""

from collections.abc import Iterable
from datetime import date as date_type
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from weekplan.sessions.time_range import format_time_range

MIN_SESSION_DURATION_MIN = 15
DEFAULT_SESSION_START_MIN = 18 * 60
DEFAULT_SESSION_DURATION_MIN = 90
DEFAULT_GAME_DURATION_MIN = 120
MAX_START_MIN = 24 * 60 - 1
# Latest end the two-digit HH:MM encoding can express (99:59)
MAX_END_MIN = 99 * 60 + 59

HOME_MARKER = "vs"
AWAY_MARKER = "@"


class ErrorKind(StrEnum):
    MISSING_ID = "missing_id"
    MISSING_DATE = "missing_date"
    MISSING_DAY = "missing_day"
    MISSING_LOCATION = "missing_location"
    MISSING_TEAMS = "missing_teams"
    INVALID_START = "invalid_start_min"
    INVALID_DURATION = "invalid_duration_min"


class PreBlockKind(StrEnum):
    TRAVEL = "TRAVEL"
    WARMUP = "WARMUP"


def is_game_info(info: str | None) -> bool:
    """Whether a fixture annotation marks a game (``vs X`` home, ``@ X`` away)."""
    text = str(info or "").strip().lower()
    return (
        text.startswith(HOME_MARKER)
        or text.startswith(AWAY_MARKER)
        or f" {HOME_MARKER} " in text
        or f" {AWAY_MARKER} " in text
    )


def is_away_info(info: str | None) -> bool:
    return str(info or "").strip().startswith(AWAY_MARKER)


def normalize_opponent_info(raw: str | None) -> str:
    """Canonicalise ``@X`` / ``vsX`` to ``@ X`` / ``vs X``; other text is only trimmed."""
    text = str(raw or "").strip()
    if not text:
        return ""
    lower = text.lower()
    if lower.startswith(AWAY_MARKER):
        rest = text[len(AWAY_MARKER):].strip()
        return f"{AWAY_MARKER} {rest}" if rest else AWAY_MARKER
    if lower.startswith(HOME_MARKER):
        rest = text[len(HOME_MARKER):].strip()
        return f"{HOME_MARKER} {rest}" if rest else HOME_MARKER
    return text


class Session(BaseModel):
    """A scheduled activity on the weekly grid.

    Attributes:
        id: Opaque id, stable across edits
        date: Calendar date (None when unknown in legacy data)
        day: Short weekday label derived from date
        teams: Squad codes
        start_min: Minutes since midnight (0-1439)
        duration_min: Duration in minutes (>= 15)
        location: Free-text location
        info: Opponent/fixture annotation; "vs ..." / "@ ..." marks a game
        warmup_min: Warm-up minutes before a game (derived pre-block)
        travel_min: Travel minutes before an away game (derived pre-block)
        participants: Participant ids, no duplicates
        exclude_from_roster: Visible on the schedule but not on the roster
        roster_label: Optional squad label shown on the roster
        row_color: Optional display color hint
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str = ""
    date: date_type | None = None
    day: str = ""
    teams: tuple[str, ...] = ()
    start_min: int = DEFAULT_SESSION_START_MIN
    duration_min: int = DEFAULT_SESSION_DURATION_MIN
    location: str = ""
    info: str | None = None
    warmup_min: int | None = None
    travel_min: int | None = None
    participants: tuple[str, ...] = ()
    exclude_from_roster: bool = False
    roster_label: str | None = Field(default=None, alias="kaderLabel")
    row_color: str | None = None

    @property
    def end_min(self) -> int:
        return self.start_min + self.duration_min

    @property
    def time_label(self) -> str:
        """Legacy ``HH:MM–HH:MM`` view of the canonical time."""
        return format_time_range(self.start_min, self.duration_min)

    @property
    def is_game(self) -> bool:
        return is_game_info(self.info)

    @property
    def is_away(self) -> bool:
        return is_away_info(self.info)

    @property
    def warmup_minutes(self) -> int:
        """Effective warm-up minutes (0 unless this is a game)."""
        if not self.is_game:
            return 0
        return max(0, int(self.warmup_min or 0))

    @property
    def travel_minutes(self) -> int:
        """Effective travel minutes (0 unless this is an away game)."""
        if not (self.is_game and self.is_away):
            return 0
        return max(0, int(self.travel_min or 0))


def session_sort_key(session: Session) -> tuple[date_type, int]:
    """Presentation order: (date, start_min); sessions without a date sort first."""
    return (session.date or date_type.min, session.start_min)


class Plan(BaseModel):
    """An ordered collection of sessions plus an identifying label."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    week_id: str = "LAST"
    sessions: tuple[Session, ...] = ()

    def get(self, session_id: str) -> Session | None:
        for session in self.sessions:
            if session.id == session_id:
                return session
        return None

    def with_sessions(self, sessions: Iterable[Session], *, sort: bool = True) -> "Plan":
        """Return a new plan holding sessions, re-sorted by (date, start_min) unless told otherwise."""
        items = list(sessions)
        if sort:
            items.sort(key=session_sort_key)
        return self.model_copy(update={"sessions": tuple(items)})

    def replace_session(self, session: Session, *, sort: bool = True) -> "Plan":
        """Return a new plan with the session of the same id value-replaced."""
        return self.with_sessions(
            (session if existing.id == session.id else existing for existing in self.sessions),
            sort=sort,
        )
