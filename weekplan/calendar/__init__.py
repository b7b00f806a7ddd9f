"""Calendar views: participant conflict detection and the day/week layout engine."""

from weekplan.calendar.conflicts import (
    SessionConflict,
    compute_conflicts_by_session,
    conflicted_participants,
    find_overlapping_bookings,
    sessions_overlap,
)
from weekplan.calendar.layout import (
    AutoScope,
    DayLayout,
    LayoutItem,
    LayoutItemKind,
    PlacedItem,
    TimeWindow,
    WindowMode,
    assign_columns,
    compute_auto_window,
    layout_day,
    layout_week,
    resolve_view_window,
    time_slots,
)

__all__ = [
    "AutoScope",
    "DayLayout",
    "LayoutItem",
    "LayoutItemKind",
    "PlacedItem",
    "SessionConflict",
    "TimeWindow",
    "WindowMode",
    "assign_columns",
    "compute_auto_window",
    "compute_conflicts_by_session",
    "conflicted_participants",
    "find_overlapping_bookings",
    "layout_day",
    "layout_week",
    "resolve_view_window",
    "sessions_overlap",
    "time_slots",
]
