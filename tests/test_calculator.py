"""
Unit tests for the StatsCalculator entry points.
"""
from datetime import date, datetime

import pytest

from fitlog.core.errors import InvalidParameterError
from fitlog.services.statistics.buckets import Interval
from fitlog.services.statistics.calculator import StatsCalculator, coerce_enum

pytestmark = pytest.mark.unit

# Wednesday
NOW = datetime(2024, 5, 29, 12, 0)


@pytest.fixture
def calculator():
    return StatsCalculator()


class TestParameters:
    """Enum coercion."""

    def test_coerce_enum_accepts_values(self):
        assert coerce_enum(Interval, "2weeks", "interval") is Interval.TWO_WEEKS

    def test_coerce_enum_rejects_unknown(self):
        with pytest.raises(InvalidParameterError) as exc_info:
            coerce_enum(Interval, "fortnightly", "interval")

        assert exc_info.value.status_code == 400
        assert exc_info.value.details[0]["path"] == ["interval"]

    def test_invalid_rm_target(self, calculator):
        with pytest.raises(InvalidParameterError):
            calculator.compute_strength_trend([], "3months", "all", "3RM", now=NOW)

    def test_invalid_body_part(self, calculator):
        with pytest.raises(InvalidParameterError):
            calculator.compute_volume_trend([], "3months", "1week", "glutes", now=NOW)

    def test_unknown_period_is_not_an_error(self, calculator):
        assert calculator.compute_strength_trend([], "decade", "all", "1RM", now=NOW) == []


class TestWindow:
    """Window and fetch-start computation."""

    def test_weekly_fetch_start_reaches_back_to_monday(self, calculator):
        # 3 months back is Thursday 2024-02-29
        assert calculator.fetch_start("3months", "1week", NOW) == datetime(2024, 2, 26)

    def test_monthly_fetch_start_is_start_day_midnight(self, calculator):
        assert calculator.fetch_start("3months", "1month", NOW) == datetime(2024, 2, 29)

    def test_start_day_records_before_now_time_are_counted(self, calculator):
        """A record earlier in the day than "now" still falls in the window."""
        fetch_start = calculator.fetch_start("3months", "1month", NOW)
        record = {"recorded_at": datetime(2024, 2, 29, 8), "weight": 100, "reps": 1}

        assert record["recorded_at"] >= fetch_start
        points = calculator.compute_strength_trend([record], "3months", "1month", "1RM", now=NOW)
        assert [(p.label, p.value) for p in points] == [("2024-02", 100.0)]

    def test_window_today_is_now_date(self, calculator):
        window = calculator.window("1month", Interval.ALL, NOW)
        assert window.today == date(2024, 5, 29)
        assert window.start == date(2024, 4, 29)


class TestTrends:
    """End-to-end engine calls."""

    def test_volume_zero_fill_over_empty_span(self, calculator):
        """One zero point per calendar month touched by the window."""
        result = calculator.compute_volume_trend([], "3months", "1month", "chest", now=NOW)

        assert [(p.label, p.value) for p in result["points"]] == [
            ("2024-02", 0),
            ("2024-03", 0),
            ("2024-04", 0),
            ("2024-05", 0),
        ]

    def test_future_records_are_ignored(self, calculator):
        records = [
            {"recorded_at": datetime(2024, 5, 20), "weight": 100, "reps": 1},
            {"recorded_at": datetime(2024, 6, 1), "weight": 150, "reps": 1},
        ]
        points = calculator.compute_strength_trend(records, "1month", "all", "1RM", now=NOW)
        assert [p.value for p in points] == [100.0]

    def test_oversized_numbers_are_absent(self, calculator):
        records = [
            {"recorded_at": datetime(2024, 5, 20), "weight": 10 ** 400, "reps": 1},
            {"recorded_at": datetime(2024, 5, 21), "weight": 90, "reps": 1},
        ]
        points = calculator.compute_strength_trend(records, "1month", "all", "1RM", now=NOW)
        assert [(p.label, p.value) for p in points] == [("2024-05-21", 90.0)]

    def test_cardio_defaults_to_raw_resolution(self, calculator):
        records = [{"recorded_at": datetime(2024, 5, 20), "distance": 5000, "duration": 1500}]
        result = calculator.compute_cardio_trend(records, "1month", now=NOW)
        assert [p.label for p in result["distance"]] == ["2024-05-20"]
        assert result["avgSpeed"][0].value == 12.0

    def test_body_metric_trend(self, calculator):
        records = [{"recordDate": "2024-05-20T07:00:00", "bodyWeight": 80.0}]
        result = calculator.compute_body_metric_trend(records, "1year", "1month", now=NOW)
        assert [(p.label, p.value) for p in result["bodyWeight"]] == [("2024-05", 80.0)]

    def test_deterministic(self, calculator):
        records = [
            {"recorded_at": datetime(2024, 5, d), "weight": 50 + d, "reps": 8}
            for d in (2, 9, 16, 23)
        ]
        first = calculator.compute_strength_trend(records, "3months", "1week", "over8RM", now=NOW)
        second = calculator.compute_strength_trend(
            list(reversed(records)), "3months", "1week", "over8RM", now=NOW
        )
        assert first == second


class TestCalculatorStreaks:
    """Today-policy configuration."""

    def test_grace_policy_is_configurable(self):
        days = [date(2024, 5, 27), date(2024, 5, 28)]
        today = date(2024, 5, 29)

        assert StatsCalculator().compute_streaks(days, today=today).current_streak == 2
        strict = StatsCalculator(allow_pending_today=False)
        assert strict.compute_streaks(days, today=today).current_streak == 0

    def test_monthly_calendar(self):
        result = StatsCalculator().monthly_calendar(
            [datetime(2024, 5, 28)], 2024, 5, today=date(2024, 5, 29)
        )
        assert result.active_days == 1
        assert result.streaks.current_streak == 1
