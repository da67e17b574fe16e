"""
Strength Strategy - Per-exercise weight trend.

Sets with different rep counts are made comparable by converting
them to the requested repetition maximum with the Epley formula:

    1RM = weight * (1 + reps / 30)

A value is exact when the set was performed at the target rep count
(or, for over8RM, with at least 8 reps); any conversion marks it as
estimated.
"""
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import List, Optional, Tuple

from fitlog.services.statistics.buckets import Interval, group_by_day
from fitlog.services.statistics.samples import StrengthSample
from fitlog.services.statistics.strategies.base import (
    DataPoint,
    TrendStrategy,
    TrendWindow,
    round_value,
)


class RMTarget(str, Enum):
    """Repetition-max target of a weight trend."""
    ONE_RM = "1RM"
    FIVE_RM = "5RM"
    OVER_8RM = "over8RM"


EPLEY_DIVISOR = 30
OVER_8RM_MIN_REPS = 8


def epley_one_rm(weight: float, reps: int) -> float:
    """Estimate the one-repetition max from a set."""
    return weight * (1 + reps / EPLEY_DIVISOR)


def epley_weight_for_reps(one_rm: float, reps: int) -> float:
    """Invert Epley: the weight liftable for ``reps`` given a 1RM."""
    return one_rm / (1 + reps / EPLEY_DIVISOR)


@dataclass(frozen=True)
class ComparableWeight:
    """A set's weight expressed at the RM target."""
    value: float
    estimated: bool


def comparable_weight(
    sample: StrengthSample,
    target: RMTarget,
) -> Optional[ComparableWeight]:
    """
    Convert one set to the RM target.

    Returns None when the set is not eligible: missing weight or reps,
    non-positive reps, negative weight, or fewer than 8 reps for over8RM.
    """
    weight, reps = sample.weight, sample.reps
    if weight is None or reps is None or reps < 1 or weight < 0:
        return None

    if target is RMTarget.OVER_8RM:
        if reps < OVER_8RM_MIN_REPS:
            return None
        return ComparableWeight(weight, estimated=False)

    if target is RMTarget.ONE_RM:
        if reps == 1:
            return ComparableWeight(weight, estimated=False)
        return ComparableWeight(epley_one_rm(weight, reps), estimated=True)

    # 5RM
    if reps == 5:
        return ComparableWeight(weight, estimated=False)
    return ComparableWeight(
        epley_weight_for_reps(epley_one_rm(weight, reps), 5),
        estimated=True,
    )


def _best(candidates: List[ComparableWeight]) -> ComparableWeight:
    """Maximum by value; the earliest candidate wins ties."""
    best = candidates[0]
    for candidate in candidates[1:]:
        if candidate.value > best.value:
            best = candidate
    return best


class StrengthStrategy(TrendStrategy):
    """
    Strategy for per-exercise strength trends.

    Days and buckets report their maximum comparable weight; empty
    days and buckets are left out of the series.
    """

    sample_kind = "strength"

    def __init__(self, rm_target: RMTarget):
        super().__init__()
        self.rm_target = rm_target

    def daily_maxima(
        self,
        samples: List[StrengthSample],
    ) -> List[Tuple[date, ComparableWeight]]:
        """
        Best comparable weight per calendar day.

        The day's estimated flag is the flag of the winning set, not an
        OR over all sets of the day.
        """
        maxima = []
        for day, day_samples in group_by_day(samples, lambda s: s.recorded_at):
            candidates = [
                weight
                for weight in (comparable_weight(s, self.rm_target) for s in day_samples)
                if weight is not None
            ]
            if candidates:
                maxima.append((day, _best(candidates)))
        return maxima

    def compute(
        self,
        samples: List[StrengthSample],
        window: TrendWindow,
    ) -> List[DataPoint]:
        daily = self.daily_maxima(samples)

        if window.interval is Interval.ALL:
            return [
                DataPoint(day.isoformat(), round_value(best.value), best.estimated)
                for day, best in daily
            ]

        points = []
        for bucket in window.bucketize(daily, key=lambda pair: pair[0]):
            if bucket.is_empty():
                continue
            best = _best([weight for _, weight in bucket.samples])
            # Folding several days into one point is itself an approximation
            estimated = best.estimated or len(bucket.samples) > 1
            points.append(DataPoint(bucket.label, round_value(best.value), estimated))

        return points
