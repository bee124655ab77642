"""Tests for periods, windows and timestamp parsing."""

from datetime import datetime, timedelta, timezone

import pytest

from rewind.core.errors import InvalidPeriodError
from rewind.core.time import Period, Window, compute_window, parse_timestamp, to_utc


class TestPeriod:
    """Tests for period selector validation."""

    @pytest.mark.parametrize("value", ["week", "month", "year"])
    def test_parse_known_values(self, value):
        assert Period.parse(value).value == value

    def test_parse_passes_through_enum(self):
        assert Period.parse(Period.MONTH) is Period.MONTH

    @pytest.mark.parametrize("value", ["decade", "", "WEEK", None, 7])
    def test_parse_rejects_unknown_values(self, value):
        with pytest.raises(InvalidPeriodError) as exc_info:
            Period.parse(value)
        assert exc_info.value.value == value

    def test_invalid_period_is_value_error(self):
        with pytest.raises(ValueError):
            compute_window("fortnight")


class TestComputeWindow:
    """Tests for window arithmetic."""

    def test_week_is_exactly_seven_days(self, now):
        window = compute_window("week", now)
        assert window.end == now
        assert window.end - window.start == timedelta(days=7)

    def test_month_uses_calendar_subtraction(self, now):
        window = compute_window("month", now)
        assert window.start == datetime(2026, 9, 19, 12, 0, tzinfo=timezone.utc)

    def test_year_uses_calendar_subtraction(self, now):
        window = compute_window("year", now)
        assert window.start == datetime(2025, 10, 19, 12, 0, tzinfo=timezone.utc)

    def test_month_clamps_to_end_of_february(self):
        window = compute_window("month", datetime(2025, 3, 31, 8, tzinfo=timezone.utc))
        assert window.start == datetime(2025, 2, 28, 8, tzinfo=timezone.utc)

    def test_month_clamps_to_leap_day(self):
        window = compute_window("month", datetime(2024, 3, 31, tzinfo=timezone.utc))
        assert window.start == datetime(2024, 2, 29, tzinfo=timezone.utc)

    def test_year_from_leap_day(self):
        window = compute_window("year", datetime(2024, 2, 29, tzinfo=timezone.utc))
        assert window.start == datetime(2023, 2, 28, tzinfo=timezone.utc)

    @pytest.mark.parametrize("period", list(Period))
    def test_start_never_after_end(self, period, now):
        window = compute_window(period, now)
        assert window.start <= window.end

    def test_naive_now_is_treated_as_utc(self):
        window = compute_window("week", datetime(2026, 10, 19, 12, 0))
        assert window.end.tzinfo is not None
        assert window.end == datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)

    def test_defaults_to_current_time(self):
        before = datetime.now(timezone.utc)
        window = compute_window("week")
        after = datetime.now(timezone.utc)
        assert before <= window.end <= after

    def test_labels(self, now):
        assert compute_window("week", now).label == "Random Week in Crackd History"
        assert compute_window("month", now).label == "Random Month in Crackd History"
        assert compute_window("year", now).label == "Random Year in Crackd History"

    def test_iso_bounds(self, now):
        window = compute_window("week", now)
        assert window.end_iso == "2026-10-19T12:00:00+00:00"
        assert window.start_iso == "2026-10-12T12:00:00+00:00"


class TestWindowContains:
    """Tests for inclusive window membership."""

    def test_bounds_are_inclusive(self, week_window):
        assert week_window.contains(week_window.start)
        assert week_window.contains(week_window.end)

    def test_outside_bounds(self, week_window):
        assert not week_window.contains(week_window.start - timedelta(seconds=1))
        assert not week_window.contains(week_window.end + timedelta(seconds=1))

    def test_missing_timestamp_is_outside(self, week_window):
        assert not week_window.contains(None)

    def test_other_timezones_are_converted(self):
        window = Window(
            period=Period.WEEK,
            start=datetime(2026, 10, 12, tzinfo=timezone.utc),
            end=datetime(2026, 10, 19, tzinfo=timezone.utc),
        )
        # 2026-10-19T01:00+02:00 is 2026-10-18T23:00Z
        moment = datetime(2026, 10, 19, 1, 0, tzinfo=timezone(timedelta(hours=2)))
        assert window.contains(moment)


class TestParseTimestamp:
    """Tests for record timestamp parsing."""

    def test_iso_with_zulu(self):
        parsed = parse_timestamp("2026-10-18T10:00:00Z")
        assert parsed == datetime(2026, 10, 18, 10, 0, tzinfo=timezone.utc)

    def test_iso_with_offset(self):
        parsed = parse_timestamp("2026-10-18T10:00:00+02:00")
        assert parsed == datetime(2026, 10, 18, 8, 0, tzinfo=timezone.utc)

    def test_naive_string_is_utc(self):
        parsed = parse_timestamp("2026-10-18 10:00:00")
        assert parsed == datetime(2026, 10, 18, 10, 0, tzinfo=timezone.utc)

    def test_datetime_passthrough(self):
        value = datetime(2026, 10, 18, 10, 0)
        assert parse_timestamp(value) == to_utc(value)

    @pytest.mark.parametrize("value", [None, "", "garbage", 12345, ["2026-10-18"]])
    def test_unusable_values(self, value):
        assert parse_timestamp(value) is None

    @pytest.mark.parametrize("value", ["12", "Oct", "Oct 18", "10:30"])
    def test_incomplete_dates_are_not_filled_from_the_clock(self, value):
        assert parse_timestamp(value) is None

    def test_complete_non_iso_date(self):
        parsed = parse_timestamp("Sun, 18 Oct 2026 10:00:00 GMT")
        assert parsed == datetime(2026, 10, 18, 10, 0, tzinfo=timezone.utc)
