"""
Unit tests for period resolution.

Periods subtract calendar months, clamping the day to the target
month's length, and unknown values fall back to three months.
"""
from datetime import datetime

import pytest

from fitlog.services.statistics.period import (
    ALL_TIME_START,
    Period,
    parse_period,
    resolve_start,
    subtract_months,
)

pytestmark = pytest.mark.unit


# =============================================================================
# parse_period
# =============================================================================


class TestParsePeriod:
    """Mapping raw values to periods."""

    @pytest.mark.parametrize("raw,expected", [
        ("1month", Period.ONE_MONTH),
        ("3months", Period.THREE_MONTHS),
        ("6months", Period.SIX_MONTHS),
        ("1year", Period.ONE_YEAR),
        ("2years", Period.TWO_YEARS),
        ("all", Period.ALL),
    ])
    def test_known_values(self, raw, expected):
        assert parse_period(raw) is expected

    def test_legacy_alias(self):
        """'1months' is accepted as one month."""
        assert parse_period("1months") is Period.ONE_MONTH

    @pytest.mark.parametrize("raw", ["bogus", "", None, "12weeks"])
    def test_unknown_values_fall_back_to_three_months(self, raw):
        assert parse_period(raw) is Period.THREE_MONTHS


# =============================================================================
# Calendar month subtraction
# =============================================================================


class TestSubtractMonths:
    """Calendar-based month arithmetic."""

    def test_keeps_day_and_time(self):
        now = datetime(2024, 5, 15, 10, 30)
        assert subtract_months(now, 3) == datetime(2024, 2, 15, 10, 30)

    def test_crosses_year_boundary(self):
        assert subtract_months(datetime(2024, 1, 15), 3) == datetime(2023, 10, 15)

    def test_clamps_to_leap_february(self):
        assert subtract_months(datetime(2024, 3, 31), 1) == datetime(2024, 2, 29)

    def test_clamps_to_common_february(self):
        assert subtract_months(datetime(2023, 3, 31), 1) == datetime(2023, 2, 28)

    def test_clamps_to_thirty_day_month(self):
        assert subtract_months(datetime(2024, 5, 31), 1) == datetime(2024, 4, 30)


# =============================================================================
# resolve_start
# =============================================================================


class TestResolveStart:
    """Start of the lookback window."""

    def test_three_months(self):
        now = datetime(2024, 5, 29, 12, 0)
        assert resolve_start("3months", now) == datetime(2024, 2, 29, 12, 0)

    def test_one_year_from_leap_day(self):
        assert resolve_start("1year", datetime(2024, 2, 29)) == datetime(2023, 2, 28)

    def test_two_years(self):
        assert resolve_start("2years", datetime(2024, 5, 29)) == datetime(2022, 5, 29)

    def test_all_uses_fixed_start(self):
        assert resolve_start("all", datetime(2024, 5, 29)) == ALL_TIME_START

    def test_unknown_period_never_raises(self):
        now = datetime(2024, 5, 29)
        assert resolve_start("forever", now) == resolve_start("3months", now)

    def test_accepts_enum(self):
        now = datetime(2024, 5, 29)
        assert resolve_start(Period.SIX_MONTHS, now) == datetime(2023, 11, 29)
