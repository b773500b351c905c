"""
Unit tests for calendar-month helpers.
"""
from datetime import datetime, timedelta, timezone

import pytest

from family_finance.utils.dates import (
    last_completed_month,
    midpoint,
    month_bounds,
    naive,
    previous_month,
    shift_months,
)


@pytest.mark.unit
class TestDateHelpers:
    """Test month arithmetic."""

    def test_naive_keeps_wall_clock(self):
        aware = datetime(2024, 6, 15, 9, 30, tzinfo=timezone(timedelta(hours=-5)))

        result = naive(aware)

        assert result.tzinfo is None
        assert result == datetime(2024, 6, 15, 9, 30)

    def test_naive_passthrough(self):
        moment = datetime(2024, 6, 15)
        assert naive(moment) is moment

    def test_shift_months_clamps_day(self):
        assert shift_months(datetime(2024, 3, 31), -1) == datetime(2024, 2, 29)
        assert shift_months(datetime(2024, 1, 31), 1) == datetime(2024, 2, 29)

    def test_shift_months_across_year(self):
        assert shift_months(datetime(2024, 2, 10, 8, 0), -3) == datetime(2023, 11, 10, 8, 0)

    def test_month_bounds(self):
        assert month_bounds(2024, 12) == (datetime(2024, 12, 1), datetime(2025, 1, 1))

    def test_previous_month_wraps_year(self):
        assert previous_month(2024, 1) == (2023, 12)
        assert previous_month(2024, 7) == (2024, 6)

    def test_last_completed_month(self):
        assert last_completed_month(datetime(2024, 6, 15)) == (2024, 5)
        assert last_completed_month(datetime(2024, 1, 1)) == (2023, 12)

        assert midpoint(datetime(2024, 1, 1), datetime(2024, 1, 3)) == datetime(2024, 1, 2)
