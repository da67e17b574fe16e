"""
Unit tests for strength trends and repetition-max conversion.
"""
from datetime import date, datetime

import pytest

from fitlog.services.statistics.buckets import Interval
from fitlog.services.statistics.samples import StrengthSample
from fitlog.services.statistics.strategies import RMTarget, StrengthStrategy, TrendWindow
from fitlog.services.statistics.strategies.strength import (
    comparable_weight,
    epley_one_rm,
    epley_weight_for_reps,
)

pytestmark = pytest.mark.unit

TODAY = date(2024, 5, 29)
ALL_WINDOW = TrendWindow(start=date(2024, 5, 1), today=TODAY, interval=Interval.ALL)
WEEK_WINDOW = TrendWindow(start=date(2024, 5, 13), today=TODAY, interval=Interval.ONE_WEEK)


def _set(day, weight, reps, hour=10):
    return {"recorded_at": datetime(2024, 5, day, hour), "weight": weight, "reps": reps}


# =============================================================================
# RM conversion
# =============================================================================


class TestComparableWeight:
    """Converting sets to the RM target."""

    @pytest.mark.parametrize("target,reps", [
        (RMTarget.ONE_RM, 1),
        (RMTarget.FIVE_RM, 5),
        (RMTarget.OVER_8RM, 8),
        (RMTarget.OVER_8RM, 12),
    ])
    def test_reference_reps_are_exact(self, target, reps):
        weight = comparable_weight(StrengthSample(datetime(2024, 5, 1), 100.0, reps), target)
        assert weight.value == 100.0
        assert weight.estimated is False

    def test_one_rm_is_estimated_with_epley(self):
        weight = comparable_weight(StrengthSample(datetime(2024, 5, 1), 100.0, 5), RMTarget.ONE_RM)
        assert weight.value == pytest.approx(116.6667, abs=1e-3)
        assert weight.estimated is True

    def test_five_rm_from_ten_reps(self):
        weight = comparable_weight(StrengthSample(datetime(2024, 5, 1), 100.0, 10), RMTarget.FIVE_RM)
        assert weight.value == pytest.approx(114.2857, abs=1e-3)
        assert weight.estimated is True

    def test_epley_round_trip(self):
        assert epley_weight_for_reps(epley_one_rm(80.0, 5), 5) == pytest.approx(80.0)

    def test_over_8rm_needs_eight_reps(self):
        assert comparable_weight(StrengthSample(datetime(2024, 5, 1), 100.0, 7), RMTarget.OVER_8RM) is None

    @pytest.mark.parametrize("weight,reps", [(None, 5), (100.0, None), (100.0, 0), (-5.0, 5)])
    def test_ineligible_sets(self, weight, reps):
        sample = StrengthSample(datetime(2024, 5, 1), weight, reps)
        assert comparable_weight(sample, RMTarget.ONE_RM) is None


# =============================================================================
# Trend computation
# =============================================================================


class TestStrengthTrend:
    """Daily and bucketed maxima."""

    def test_day_flag_follows_winning_set(self):
        """An estimated set that wins makes the day estimated."""
        records = [_set(10, 100, 1), _set(10, 90, 5, hour=11)]
        points = StrengthStrategy(RMTarget.ONE_RM).run(records, ALL_WINDOW)

        assert len(points) == 1
        assert points[0].label == "2024-05-10"
        assert points[0].value == 105.0
        assert points[0].is_estimated is True

    def test_exact_winner_is_not_estimated(self):
        records = [_set(10, 100, 1), _set(10, 80, 3)]
        points = StrengthStrategy(RMTarget.ONE_RM).run(records, ALL_WINDOW)

        assert points[0].value == 100.0
        assert points[0].is_estimated is False

    def test_days_without_eligible_sets_are_omitted(self):
        records = [_set(10, 100, 5), _set(12, 60, 10)]
        points = StrengthStrategy(RMTarget.OVER_8RM).run(records, ALL_WINDOW)

        assert [p.label for p in points] == ["2024-05-12"]

    def test_weekly_buckets(self):
        records = [_set(14, 60, 8), _set(16, 65, 8), _set(28, 70, 10)]
        points = StrengthStrategy(RMTarget.OVER_8RM).run(records, WEEK_WINDOW)

        assert [p.label for p in points] == ["05-13 ~ 05-19", "05-27 ~ 05-29"]
        assert points[0].value == 65.0
        # Two days folded into one point
        assert points[0].is_estimated is True
        assert points[1].value == 70.0
        assert points[1].is_estimated is False

    def test_records_outside_window_are_ignored(self):
        records = [
            {"recorded_at": datetime(2024, 4, 30), "weight": 200, "reps": 1},
            {"recorded_at": datetime(2024, 5, 30), "weight": 200, "reps": 1},
            _set(20, 100, 1),
        ]
        points = StrengthStrategy(RMTarget.ONE_RM).run(records, ALL_WINDOW)
        assert [p.value for p in points] == [100.0]

    def test_anomalies_produce_no_points(self):
        records = [_set(10, None, 5), _set(11, "abc", 5), _set(12, -20, 5), _set(13, 50, 0)]
        assert StrengthStrategy(RMTarget.ONE_RM).run(records, ALL_WINDOW) == []

    def test_values_are_rounded(self):
        points = StrengthStrategy(RMTarget.ONE_RM).run([_set(10, 100, 5)], ALL_WINDOW)
        assert points[0].value == 116.7
