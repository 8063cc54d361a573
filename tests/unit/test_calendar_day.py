"""
Unit tests for calendar day normalization

Tests that plain dates keep their calendar day in any host zone and that
timestamps are truncated in the local zone.
"""
import time
from datetime import date, datetime, timedelta, timezone

import pytest

from workboard.errors import ValidationError
from workboard.services.calendar_day import (
    current_week_bounds,
    days_between,
    format_day,
    iter_days,
    to_calendar_day,
)

TOKYO = timezone(timedelta(hours=9))
NEW_YORK = timezone(timedelta(hours=-4))


class TestPlainDates:
    """Test yyyy-MM-dd strings and date values are kept as authored"""

    def test_plain_string(self):
        assert to_calendar_day("2024-03-10") == date(2024, 3, 10)

    def test_date_value_unchanged(self):
        assert to_calendar_day(date(2024, 3, 10)) == date(2024, 3, 10)

    @pytest.mark.skipif(not hasattr(time, "tzset"), reason="tzset not available on this platform")
    @pytest.mark.parametrize("tz_name", ["UTC0", "HST10", "LINT-14", "EST5EDT"])
    def test_plain_string_stable_across_host_zones(self, monkeypatch, tz_name):
        """Test '2024-03-10' never shifts to a neighbouring day"""
        monkeypatch.setenv("TZ", tz_name)
        time.tzset()
        try:
            assert to_calendar_day("2024-03-10") == date(2024, 3, 10)
            assert format_day("2024-03-10") == "2024-03-10"
        finally:
            monkeypatch.undo()
            time.tzset()


class TestTimestamps:
    """Test ISO timestamps are truncated to the local calendar day"""

    def test_aware_timestamp_converted_to_zone(self):
        assert to_calendar_day("2024-03-10T23:30:00+00:00", tz=TOKYO) == date(2024, 3, 11)
        assert to_calendar_day("2024-03-10T23:30:00+00:00", tz=NEW_YORK) == date(2024, 3, 10)

    def test_z_suffix(self):
        assert to_calendar_day("2024-03-10T02:00:00Z", tz=NEW_YORK) == date(2024, 3, 9)

    def test_naive_timestamp_is_local_wall_clock(self):
        assert to_calendar_day("2024-03-10T23:59:59") == date(2024, 3, 10)
        assert to_calendar_day(datetime(2024, 3, 10, 0, 0, 1)) == date(2024, 3, 10)

    def test_aware_datetime_value(self):
        value = datetime(2024, 3, 10, 20, 0, tzinfo=timezone.utc)
        assert to_calendar_day(value, tz=TOKYO) == date(2024, 3, 11)

    def test_invalid_string_raises(self):
        with pytest.raises(ValidationError, match="Invalid date"):
            to_calendar_day("10/03/2024")

    def test_invalid_type_raises(self):
        with pytest.raises(ValidationError, match="Invalid date type"):
            to_calendar_day(20240310)


class TestRanges:
    """Test inclusive day ranges and week bounds"""

    def test_days_between_inclusive(self):
        assert days_between(date(2024, 3, 4), date(2024, 3, 4)) == 1
        assert days_between(date(2024, 3, 4), date(2024, 3, 10)) == 7
        assert days_between(date(2024, 3, 10), date(2024, 3, 4)) == 0

    def test_iter_days_crosses_month_end(self):
        days = list(iter_days(date(2024, 2, 28), date(2024, 3, 1)))
        assert days == [date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)]

    def test_current_week_bounds(self):
        """Test week runs Monday to Sunday around the given day"""
        start, end = current_week_bounds(date(2024, 3, 6))
        assert start == date(2024, 3, 4)
        assert end == date(2024, 3, 10)
        assert start.weekday() == 0, "Start should be Monday"
        assert end.weekday() == 6, "End should be Sunday"

    def test_current_week_bounds_on_sunday(self):
        start, end = current_week_bounds(date(2024, 3, 10))
        assert (start, end) == (date(2024, 3, 4), date(2024, 3, 10))
