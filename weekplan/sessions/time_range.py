"""Legacy time-range strings.

The display encoding of a session time is ``HH:MM–HH:MM`` (en dash) or a
bare ``HH:MM`` for zero-length placeholders. Hyphens are accepted on input
and normalised to en dashes. Hours are not wrapped at midnight so that any
canonical (start, duration) pair renders to a string parsing back to itself.
"""

import re

from weekplan.errors import FormatError

EN_DASH = "–"

_HHMM_RE = re.compile(r"^\d{2}:\d{2}$")


def is_hhmm(value: str) -> bool:
    return bool(_HHMM_RE.match((value or "").strip()))


def normalize_dash(value: str) -> str:
    return str(value or "").replace("-", EN_DASH)


def parse_hhmm(value: str) -> int:
    """Convert an ``HH:MM`` string to minutes since midnight.

    Raises:
        FormatError: If value is not exactly two two-digit fields
    """
    text = (value or "").strip()
    if not is_hhmm(text):
        raise FormatError(value)
    hours, minutes = text.split(":")
    return int(hours) * 60 + int(minutes)


def min_to_hhmm(minutes: int) -> str:
    hours, mins = divmod(int(minutes), 60)
    return f"{hours:02d}:{mins:02d}"


def split_time_range(value: str) -> tuple[str, str] | None:
    """Split a legacy range into its start/end ``HH:MM`` parts.

    A bare ``HH:MM`` yields the same value twice. Returns None when the
    value is empty or malformed.
    """
    raw = str(value or "").strip()
    if not raw:
        return None
    if is_hhmm(raw):
        return raw, raw

    parts = [part.strip() for part in normalize_dash(raw).split(EN_DASH)]
    if len(parts) != 2 or not is_hhmm(parts[0]) or not is_hhmm(parts[1]):
        return None
    return parts[0], parts[1]


def parse_time_range(value: str) -> tuple[int, int]:
    """Parse a legacy range strictly into ``(start_min, end_min)``.

    Raises:
        FormatError: If the value is not a valid range or single time
    """
    parts = split_time_range(value)
    if parts is None:
        raise FormatError(value)
    start, end = parts
    return parse_hhmm(start), parse_hhmm(end)


def format_time_range(start_min: int, duration_min: int) -> str:
    """Render ``HH:MM–HH:MM``; a non-positive duration renders a bare ``HH:MM``."""
    start = min_to_hhmm(start_min)
    if duration_min <= 0:
        return start
    return f"{start}{EN_DASH}{min_to_hhmm(start_min + duration_min)}"
