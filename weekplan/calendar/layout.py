"""Calendar layout engine.

Turns one day's sessions into a logical layout model for a renderer:

1. Unpack every session into layout items. Games contribute derived
   pre-activity blocks: warm-up immediately before the start and, for away
   games, travel immediately before the warm-up.
2. Pick the visible time window, either automatically (earliest start to
   latest end over the day or the whole week, padded, snapped and widened to
   a minimum span) or from a manual range.
3. Clip items to the window and drop empty results, then assign columns with
   a greedy interval-colouring sweep. Column counts are normalised per
   cluster of transitively overlapping items, not across the whole day.

No pixels are produced here: the output is (column, column_count) per item
plus the window, which is all a renderer needs to divide horizontal space.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from datetime import date as date_type
from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from weekplan.config.settings import settings
from weekplan.sessions.types import Plan, Session

# Narrowest window the auto-fit clamps will produce before the span rule applies
_MIN_VISIBLE_MIN = 30


class LayoutItemKind(StrEnum):
    SESSION = "SESSION"
    WARMUP = "WARMUP"
    TRAVEL = "TRAVEL"


class WindowMode(StrEnum):
    AUTO = "auto"
    MANUAL = "manual"


class AutoScope(StrEnum):
    WEEK = "week"
    DAY = "day"


class TimeWindow(BaseModel):
    """Visible minute range [start, end) of a calendar column."""

    model_config = ConfigDict(frozen=True)

    start: int
    end: int

    @property
    def span(self) -> int:
        return self.end - self.start


def full_day_window() -> TimeWindow:
    """The fixed fallback window from settings (06:00-23:00 by default)."""
    return TimeWindow(start=settings.calendar_day_start_min, end=settings.calendar_day_end_min)


class LayoutItem(BaseModel):
    """A block to place: a session or one of its derived pre-blocks."""

    model_config = ConfigDict(frozen=True)

    session_id: str
    kind: LayoutItemKind
    start: int
    end: int

    @property
    def item_id(self) -> str:
        if self.kind == LayoutItemKind.SESSION:
            return self.session_id
        return f"{self.session_id}__{self.kind}"


class PlacedItem(LayoutItem):
    """A clipped layout item with its column assignment.

    Attributes:
        column: Zero-based column index inside its cluster
        column_count: Number of columns the cluster needs
        cluster: Index of the overlap cluster within the day
    """

    column: int
    column_count: int
    cluster: int


class DayLayout(BaseModel):
    day: date_type | None = None
    window: TimeWindow
    items: list[PlacedItem] = []

    def placement(self, item_id: str) -> PlacedItem | None:
        for item in self.items:
            if item.item_id == item_id:
                return item
        return None


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def _snap(value: float, step: int) -> int:
    """Round to the nearest multiple of step (halves round up)."""
    return math.floor(value / step + 0.5) * step


def session_layout_items(session: Session) -> list[LayoutItem]:
    """Unpack a session into its own item plus any derived pre-blocks.

    Pre-blocks are only synthesized for games and only when their minute
    value is positive; travel exists only for away games.
    """
    start = session.start_min
    items = [LayoutItem(session_id=session.id, kind=LayoutItemKind.SESSION, start=start, end=session.end_min)]

    warmup = session.warmup_minutes
    travel = session.travel_minutes
    if warmup > 0:
        items.append(LayoutItem(session_id=session.id, kind=LayoutItemKind.WARMUP, start=start - warmup, end=start))
    if travel > 0:
        items.append(
            LayoutItem(
                session_id=session.id,
                kind=LayoutItemKind.TRAVEL,
                start=start - warmup - travel,
                end=start - warmup,
            )
        )
    return items


def build_layout_items(sessions: Iterable[Session]) -> list[LayoutItem]:
    return [item for session in sessions for item in session_layout_items(session)]


def clip_items(items: Iterable[LayoutItem], window: TimeWindow) -> list[LayoutItem]:
    """Clip every item to the window independently and drop empty results."""
    clipped: list[LayoutItem] = []
    for item in items:
        start = max(window.start, item.start)
        end = min(window.end, item.end)
        if end > start:
            clipped.append(item.model_copy(update={"start": start, "end": end}))
    return clipped


def assign_columns(items: Iterable[LayoutItem]) -> list[PlacedItem]:
    """Greedy interval colouring, normalised per overlap cluster.

    Items are swept in (start, end) order. A cluster grows while the next item
    starts before the running maximum end; inside a cluster each item takes the
    first lane whose last end is <= its start, else a new lane. Every item of a
    cluster reports the cluster's lane count as its column_count.

    Args:
        items: Items to place (already clipped)

    Returns:
        Placed items in sweep order
    """
    ordered = sorted(items, key=lambda item: (item.start, item.end))
    placed: list[PlacedItem] = []

    i = 0
    cluster_index = 0
    while i < len(ordered):
        j = i
        cluster_end = ordered[i].end
        while j + 1 < len(ordered) and ordered[j + 1].start < cluster_end:
            j += 1
            cluster_end = max(cluster_end, ordered[j].end)

        lane_ends: list[int] = []
        columns: list[int] = []
        for item in ordered[i:j + 1]:
            column = next((lane for lane, lane_end in enumerate(lane_ends) if lane_end <= item.start), None)
            if column is None:
                column = len(lane_ends)
                lane_ends.append(item.end)
            else:
                lane_ends[column] = item.end
            columns.append(column)

        column_count = max(1, len(lane_ends))
        for item, column in zip(ordered[i:j + 1], columns, strict=True):
            placed.append(
                PlacedItem(
                    **item.model_dump(),
                    column=column,
                    column_count=column_count,
                    cluster=cluster_index,
                )
            )

        cluster_index += 1
        i = j + 1

    return placed


def layout_day(sessions: Iterable[Session], window: TimeWindow, day: date_type | None = None) -> DayLayout:
    """Lay out one day's sessions (and their pre-blocks) inside a window."""
    items = clip_items(build_layout_items(sessions), window)
    return DayLayout(day=day, window=window, items=assign_columns(items))


def compute_auto_window(
    sessions: Iterable[Session],
    *,
    bounds: TimeWindow | None = None,
    snap_min: int | None = None,
    pad_min: int | None = None,
    min_span_min: int | None = None,
) -> TimeWindow:
    """Fit the visible window to the given sessions and their pre-blocks.

    The earliest start and latest end are padded, snapped and clamped to the
    bounds. A result narrower than min_span_min is re-centred around its
    midpoint with exactly min_span_min.

    Args:
        sessions: Sessions of one day, or of the whole visible week
        bounds: Outer limits, also the result when there is nothing to fit
        snap_min: Snap granularity (defaults to settings)
        pad_min: Padding on each side (defaults to settings)
        min_span_min: Minimum span (defaults to settings)

    Returns:
        Auto-fitted window
    """
    bounds = bounds or full_day_window()
    snap_min = snap_min or settings.calendar_time_snap_min
    pad_min = settings.auto_window_pad_min if pad_min is None else pad_min
    min_span_min = settings.auto_window_min_span_min if min_span_min is None else min_span_min

    items = build_layout_items(sessions)
    if not items:
        return bounds

    earliest = min(item.start for item in items)
    latest = max(item.end for item in items)

    start = _clamp(_snap(earliest - pad_min, snap_min), bounds.start, bounds.end - _MIN_VISIBLE_MIN)
    end = _clamp(_snap(latest + pad_min, snap_min), bounds.start + _MIN_VISIBLE_MIN, bounds.end)

    if end - start < min_span_min:
        if bounds.span <= min_span_min:
            return bounds
        mid = (start + end) / 2
        recentred = _clamp(_snap(mid - min_span_min / 2, snap_min), bounds.start, bounds.end - min_span_min)
        return TimeWindow(start=recentred, end=recentred + min_span_min)

    return TimeWindow(start=start, end=end)


def best_auto_day(sessions_by_day: Sequence[Sequence[Session]], *, bounds: TimeWindow | None = None) -> int:
    """Index of the day whose auto window starts earliest (ties: more sessions); 0 when all are empty."""
    best_day = 0
    best_start: int | None = None
    best_count = -1

    for index, day_sessions in enumerate(sessions_by_day):
        if not day_sessions:
            continue
        window = compute_auto_window(day_sessions, bounds=bounds)
        count = len(day_sessions)
        if best_start is None or window.start < best_start or (window.start == best_start and count > best_count):
            best_day = index
            best_start = window.start
            best_count = count

    return best_day


def manual_window(start: int, end: int, *, bounds: TimeWindow | None = None, snap_min: int | None = None) -> TimeWindow:
    """Snap and clamp a user-chosen range; never narrower than 30 minutes."""
    bounds = bounds or full_day_window()
    snap_min = snap_min or settings.calendar_time_snap_min
    low, high = sorted((start, end))
    snapped_start = _clamp(_snap(low, snap_min), bounds.start, bounds.end - _MIN_VISIBLE_MIN)
    snapped_end = _clamp(_snap(high, snap_min), snapped_start + _MIN_VISIBLE_MIN, bounds.end)
    return TimeWindow(start=snapped_start, end=snapped_end)


def resolve_view_window(
    sessions_by_day: Sequence[Sequence[Session]],
    *,
    mode: WindowMode = WindowMode.AUTO,
    scope: AutoScope = AutoScope.WEEK,
    day_index: int | None = None,
    manual: TimeWindow | None = None,
    bounds: TimeWindow | None = None,
) -> TimeWindow:
    """Choose the visible window for the current view settings.

    Args:
        sessions_by_day: Sessions grouped per displayed day (Monday first)
        mode: Automatic fit or manual range
        scope: Fit over the whole week or over a single day (auto mode)
        day_index: Day to fit in day scope; defaults to best_auto_day
        manual: Range used in manual mode; defaults to the full-day window
        bounds: Outer limits (defaults to settings)

    Returns:
        Window to render
    """
    bounds = bounds or full_day_window()
    if mode == WindowMode.MANUAL:
        if manual is None:
            return bounds
        return manual_window(manual.start, manual.end, bounds=bounds)

    if scope == AutoScope.DAY:
        index = best_auto_day(sessions_by_day, bounds=bounds) if day_index is None else day_index
        day_sessions = sessions_by_day[index] if 0 <= index < len(sessions_by_day) else []
        return compute_auto_window(day_sessions, bounds=bounds)

    return compute_auto_window([session for day in sessions_by_day for session in day], bounds=bounds)


def time_slots(window: TimeWindow, slot_min: int | None = None) -> list[int]:
    """Start minutes of the droppable slots of a window, end inclusive."""
    step = slot_min or settings.calendar_slot_min
    return list(range(window.start, window.end + 1, step))


def sessions_by_day(plan: Plan, days: Sequence[date_type]) -> list[list[Session]]:
    """Group a plan's sessions onto the given days, each day ordered by start."""
    grouped: dict[date_type, list[Session]] = {day: [] for day in days}
    for session in plan.sessions:
        if session.date in grouped:
            grouped[session.date].append(session)
    return [sorted(grouped[day], key=lambda s: s.start_min) for day in days]


def layout_week(
    plan: Plan,
    days: Sequence[date_type],
    *,
    mode: WindowMode = WindowMode.AUTO,
    scope: AutoScope = AutoScope.WEEK,
    day_index: int | None = None,
    manual: TimeWindow | None = None,
) -> list[DayLayout]:
    """Lay out every given day with one shared view window."""
    grouped = sessions_by_day(plan, days)
    window = resolve_view_window(grouped, mode=mode, scope=scope, day_index=day_index, manual=manual)
    return [layout_day(day_sessions, window, day) for day, day_sessions in zip(days, grouped, strict=True)]
