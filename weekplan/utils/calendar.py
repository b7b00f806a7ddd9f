"""Canonical week-window helpers.

Week boundaries are Monday-Sunday (ISO week).
"""

from datetime import date, timedelta

from weekplan.config.settings import settings

WEEKDAY_SHORT_LABELS: dict[str, tuple[str, ...]] = {
    "de": ("Mo", "Di", "Mi", "Do", "Fr", "Sa", "So"),
    "en": ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"),
}


def week_start(d: date) -> date:
    """Return Monday of the calendar week containing d."""
    return d - timedelta(days=d.weekday())


def week_end(d: date) -> date:
    """Return Sunday of the calendar week containing d."""
    return week_start(d) + timedelta(days=6)


def week_days(d: date) -> list[date]:
    """Return Monday..Sunday of the calendar week containing d."""
    monday = week_start(d)
    return [monday + timedelta(days=offset) for offset in range(7)]


def parse_iso_date(value: object) -> date | None:
    """Parse a YYYY-MM-DD value, returning None for anything else."""
    if isinstance(value, date):
        return value
    text = str(value or "").strip()
    if len(text) != 10:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def weekday_label(d: date | None, locale: str | None = None) -> str:
    """Short weekday label for d ("Di" / "Tue"), empty when d is unknown."""
    if d is None:
        return ""
    labels = WEEKDAY_SHORT_LABELS.get(locale or settings.weekday_locale, WEEKDAY_SHORT_LABELS["de"])
    return labels[d.weekday()]


def weekday_offset_from_label(label: str) -> int | None:
    """Monday-based offset for a short weekday label in any supported locale."""
    text = str(label or "").strip().lower()
    if not text:
        return None
    for labels in WEEKDAY_SHORT_LABELS.values():
        for offset, candidate in enumerate(labels):
            if text.startswith(candidate.lower()):
                return offset
    return None


def iso_week_number(d: date) -> int:
    return d.isocalendar().week
