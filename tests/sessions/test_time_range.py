"""Tests for legacy time-range string parsing and rendering."""

import pytest

from weekplan.errors import FormatError
from weekplan.sessions.time_range import (
    EN_DASH,
    format_time_range,
    min_to_hhmm,
    normalize_dash,
    parse_hhmm,
    parse_time_range,
    split_time_range,
)


class TestParseHhmm:
    def test_parses_minutes_since_midnight(self):
        """Test converting HH:MM to minutes."""
        assert parse_hhmm("18:30") == 1110
        assert parse_hhmm(" 06:05 ") == 365

    @pytest.mark.parametrize("value", ["", "6:00", "18.30", "18:3", "abc", "18:30:00"])
    def test_rejects_malformed_values(self, value):
        """Test that anything but two two-digit fields is rejected."""
        with pytest.raises(FormatError):
            parse_hhmm(value)

    def test_format_error_is_a_value_error(self):
        """Callers catching ValueError also see FormatError."""
        with pytest.raises(ValueError):
            parse_hhmm("nope")


class TestSplitTimeRange:
    def test_en_dash_range(self):
        """Test splitting an en dash range."""
        assert split_time_range(f"18:00{EN_DASH}19:30") == ("18:00", "19:30")

    def test_hyphen_range_is_accepted(self):
        """Test that a hyphen works like an en dash."""
        assert split_time_range("18:00-19:30") == ("18:00", "19:30")
        assert split_time_range("18:00 - 19:30") == ("18:00", "19:30")

    def test_bare_time_is_a_placeholder(self):
        """Test that a bare HH:MM yields the same time twice."""
        assert split_time_range("18:00") == ("18:00", "18:00")

    @pytest.mark.parametrize("value", ["", "   ", "18:00-", "18:00–19:30–20:00", "abends", None])
    def test_malformed_returns_none(self, value):
        """Test that malformed ranges split to None."""
        assert split_time_range(value) is None


class TestParseTimeRange:
    def test_returns_start_and_end_minutes(self):
        """Test parsing a range to start and end minutes."""
        assert parse_time_range("17:00–18:30") == (1020, 1110)

    def test_raises_on_garbage(self):
        """Test that strict parsing raises FormatError."""
        with pytest.raises(FormatError) as exc_info:
            parse_time_range("morgen früh")
        assert exc_info.value.value == "morgen früh"


class TestFormatTimeRange:
    def test_renders_en_dash(self):
        """Test rendering with an en dash."""
        assert format_time_range(1080, 90) == "18:00–19:30"

    def test_zero_duration_renders_bare_time(self):
        """Test that a zero duration renders a bare HH:MM."""
        assert format_time_range(1080, 0) == "18:00"

    def test_does_not_wrap_past_midnight(self):
        """Late sessions keep parseable strings instead of wrapping to 00:xx."""
        assert format_time_range(23 * 60, 120) == "23:00–25:00"
        assert parse_time_range("23:00–25:00") == (1380, 1500)

    def test_min_to_hhmm_pads(self):
        """Test zero padding of hours and minutes."""
        assert min_to_hhmm(65) == "01:05"

    def test_normalize_dash(self):
        """Test replacing hyphens with en dashes."""
        assert normalize_dash("10:00-11:00") == "10:00–11:00"
