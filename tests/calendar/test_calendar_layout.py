"""Tests for the calendar layout engine: auto window, pre-blocks, column assignment."""

from datetime import date

import pytest

from weekplan.calendar.layout import (
    AutoScope,
    LayoutItem,
    LayoutItemKind,
    TimeWindow,
    WindowMode,
    assign_columns,
    best_auto_day,
    build_layout_items,
    clip_items,
    compute_auto_window,
    full_day_window,
    layout_day,
    layout_week,
    manual_window,
    resolve_view_window,
    session_layout_items,
    time_slots,
)
from weekplan.utils.calendar import week_days


def _item(session_id: str, start: int, end: int) -> LayoutItem:
    return LayoutItem(session_id=session_id, kind=LayoutItemKind.SESSION, start=start, end=end)


class TestPreBlocks:
    def test_away_game_yields_travel_then_warmup(self, week_plan):
        """Test that travel ends where the warm-up starts, which ends at kick-off."""
        items = {item.item_id: item for item in session_layout_items(week_plan.get("g1"))}
        assert (items["g1"].start, items["g1"].end) == (1200, 1320)
        assert (items["g1__WARMUP"].start, items["g1__WARMUP"].end) == (1170, 1200)
        assert (items["g1__TRAVEL"].start, items["g1__TRAVEL"].end) == (1110, 1170)

    def test_home_game_has_no_travel_block(self, make_session):
        """Test that home games only get a warm-up block."""
        session = make_session(info="vs Kiel", warmup_min=45, travel_min=60)
        kinds = [item.kind for item in session_layout_items(session)]
        assert kinds == [LayoutItemKind.SESSION, LayoutItemKind.WARMUP]

    def test_zero_minutes_yield_no_block(self, make_session):
        """Test that zero pre-block minutes produce no item."""
        session = make_session(info="@ Kiel", warmup_min=0, travel_min=0)
        assert len(session_layout_items(session)) == 1

    def test_training_never_has_pre_blocks(self, make_session):
        """Test that trainings ignore stored pre-block minutes."""
        assert len(session_layout_items(make_session(warmup_min=30))) == 1


class TestAutoWindow:
    def test_empty_day_uses_full_day_bounds(self):
        """Test that nothing to fit returns the full-day window."""
        window = compute_auto_window([])
        assert (window.start, window.end) == (360, 1380)
        assert window == full_day_window()

    def test_narrow_range_is_widened_around_its_middle(self, make_session):
        """18:00-19:30 pads to 17:30-20:00 (150 min) and is re-centred to 180 min."""
        window = compute_auto_window([make_session(start_min=1080, duration_min=90)])
        assert (window.start, window.end) == (1035, 1215)
        assert window.span == 180

    def test_wide_range_is_padded(self, make_session):
        """Test the 30 minute padding on both sides."""
        sessions = [
            make_session(id="a", start_min=480, duration_min=60),
            make_session(id="b", start_min=1200, duration_min=90),
        ]
        window = compute_auto_window(sessions)
        assert (window.start, window.end) == (450, 1320)

    def test_edges_snap_to_quarter_hours(self, make_session):
        """Test that window edges snap to 15 minutes."""
        window = compute_auto_window([make_session(start_min=1088, duration_min=240)])
        assert (window.start, window.end) == (1065, 1365)

    def test_result_is_clamped_to_bounds(self, make_session):
        """Test that the window never leaves the day bounds."""
        sessions = [
            make_session(id="a", start_min=300, duration_min=60),
            make_session(id="b", start_min=1320, duration_min=90),
        ]
        window = compute_auto_window(sessions)
        assert (window.start, window.end) == (360, 1380)

    def test_pre_blocks_extend_the_window(self, week_plan):
        """Test that travel and warm-up count when fitting."""
        window = compute_auto_window([week_plan.get("g1")])
        assert (window.start, window.end) == (1080, 1350)

    def test_narrow_bounds_are_returned_as_is(self, make_session):
        """Test that bounds narrower than the minimum span are used directly."""
        bounds = TimeWindow(start=600, end=720)
        assert compute_auto_window([make_session(start_min=630, duration_min=30)], bounds=bounds) == bounds

    def test_best_auto_day_prefers_earliest_start(self, make_session):
        """Test choosing the day whose window starts first."""
        days = [
            [],
            [make_session(id="a", start_min=1080)],
            [make_session(id="b", start_min=600)],
        ]
        assert best_auto_day(days) == 2
        assert best_auto_day([[], []]) == 0


class TestViewWindow:
    def test_manual_window_is_snapped_and_ordered(self):
        """Test that a reversed manual range is ordered and snapped."""
        window = resolve_view_window([], mode=WindowMode.MANUAL, manual=TimeWindow(start=1210, end=482))
        assert (window.start, window.end) == (480, 1215)

    def test_manual_window_is_at_least_thirty_minutes(self):
        """Test the 30 minute minimum of manual windows."""
        window = manual_window(1000, 1010)
        assert (window.start, window.end) == (1005, 1035)

    def test_manual_mode_without_range_shows_full_day(self):
        """Test that manual mode without a range falls back to the full day."""
        assert resolve_view_window([], mode=WindowMode.MANUAL) == full_day_window()

    def test_day_scope_fits_one_day(self, make_session):
        """Test that day scope fits a single day tighter than the week."""
        days = [[make_session(id="a", start_min=480, duration_min=60)], [make_session(id="b", start_min=1200)]]
        week = resolve_view_window(days, scope=AutoScope.WEEK)
        day = resolve_view_window(days, scope=AutoScope.DAY, day_index=1)
        assert week.start == 450
        assert day.start > week.start

    def test_time_slots_include_window_end(self):
        """Test that slots run from start to end inclusive."""
        assert time_slots(TimeWindow(start=1080, end=1200), 30) == [1080, 1110, 1140, 1170, 1200]


class TestAssignColumns:
    def test_chained_overlaps_form_one_cluster(self):
        """A overlaps B, B overlaps C, A does not overlap C: two lanes, C reuses A's lane."""
        placed = {item.item_id: item for item in assign_columns([_item("C", 720, 800), _item("A", 600, 700), _item("B", 650, 750)])}

        assert (placed["A"].column, placed["B"].column, placed["C"].column) == (0, 1, 0)
        assert {item.column_count for item in placed.values()} == {2}
        assert len({item.cluster for item in placed.values()}) == 1

    def test_mutual_overlaps_need_three_lanes(self):
        """Test that A, B and C all overlapping each other get three distinct columns."""
        placed = {item.item_id: item for item in assign_columns([_item("C", 680, 760), _item("A", 600, 700), _item("B", 650, 750)])}

        assert (placed["A"].column, placed["B"].column, placed["C"].column) == (0, 1, 2)
        assert {item.column_count for item in placed.values()} == {3}
        assert len({item.cluster for item in placed.values()}) == 1

    def test_clusters_are_normalised_independently(self):
        """Test that a separate later cluster keeps a single column."""
        placed = {
            item.item_id: item
            for item in assign_columns([_item("A", 600, 700), _item("B", 650, 750), _item("D", 900, 960)])
        }
        assert placed["D"].column == 0
        assert placed["D"].column_count == 1
        assert placed["D"].cluster != placed["A"].cluster

    def test_touching_items_start_a_new_cluster(self):
        """Test that items meeting at a boundary do not share a cluster."""
        placed = assign_columns([_item("A", 600, 660), _item("B", 660, 720)])
        assert [(item.column, item.column_count) for item in placed] == [(0, 1), (0, 1)]

    def test_columns_never_exceed_count(self):
        """Test that every column index is below its cluster's count."""
        items = [_item(str(i), 600 + 10 * i, 700 + 10 * i) for i in range(6)]
        for item in assign_columns(items):
            assert 0 <= item.column < item.column_count

    def test_same_lane_items_do_not_overlap(self):
        """Test that items sharing a column never overlap."""
        items = [_item("a", 0, 50), _item("b", 10, 30), _item("c", 30, 60), _item("d", 55, 90)]
        placed = assign_columns(items)
        for first in placed:
            for second in placed:
                if first is second or first.cluster != second.cluster or first.column != second.column:
                    continue
                assert first.end <= second.start or second.end <= first.start


class TestClipping:
    def test_items_are_clipped_to_window(self, week_plan):
        """Test that items are cut to the visible window."""
        items = clip_items(build_layout_items([week_plan.get("g1")]), TimeWindow(start=1140, end=1380))
        travel = next(item for item in items if item.kind == LayoutItemKind.TRAVEL)
        assert (travel.start, travel.end) == (1140, 1170)

    def test_items_outside_window_are_dropped(self, week_plan):
        """Test that items fully outside the window disappear."""
        items = clip_items(build_layout_items([week_plan.get("g1")]), TimeWindow(start=1200, end=1380))
        assert [item.kind for item in items] == [LayoutItemKind.SESSION]


class TestLayoutDayAndWeek:
    def test_pre_blocks_stack_without_sharing_columns(self, week_plan):
        """Test that a game and its pre-blocks stay in one column."""
        layout = layout_day([week_plan.get("g1")], full_day_window(), date(2026, 2, 25))
        assert [item.item_id for item in layout.items] == ["g1__TRAVEL", "g1__WARMUP", "g1"]
        assert all(item.column_count == 1 for item in layout.items)

    def test_week_layout_shares_one_window(self, week_plan):
        """Test that every day of a week layout uses the same window."""
        layouts = layout_week(week_plan, week_days(date(2026, 2, 23)))
        assert len(layouts) == 7
        assert {(layout.window.start, layout.window.end) for layout in layouts} == {(1050, 1350)}

        tuesday = layouts[1]
        assert tuesday.day == date(2026, 2, 24)
        assert tuesday.placement("s1").column_count == 2
        assert tuesday.placement("s2").column == 1
        assert layouts[0].items == []

    @pytest.mark.parametrize("scope", list(AutoScope))
    def test_week_layout_scopes(self, week_plan, scope):
        """Test week and day scope of the shared window."""
        layouts = layout_week(week_plan, week_days(date(2026, 2, 23)), scope=scope)
        assert all(layout.window.span >= 180 for layout in layouts)
