"""
Volume Strategy - Training volume (weight x reps) by body part.

Cardio exercises never count towards volume. Bucketed series are
zero-filled so rest periods show up as a continuous baseline.
"""
from datetime import date
from enum import Enum
from typing import Any, Dict, List, Tuple

from fitlog.services.statistics.buckets import Interval, group_by_day
from fitlog.services.statistics.samples import VolumeSample
from fitlog.services.statistics.strategies.base import (
    DataPoint,
    TrendStrategy,
    TrendWindow,
)


class BodyPart(str, Enum):
    """Body-part filter of a volume trend."""
    CHEST = "chest"
    BACK = "back"
    LEGS = "legs"
    SHOULDERS = "shoulders"
    TRICEPS = "triceps"
    BICEPS = "biceps"
    ALL = "all"


def set_volume(sample: VolumeSample) -> float:
    """weight x reps; missing or negative values count as 0."""
    weight = sample.weight if sample.weight is not None and sample.weight > 0 else 0.0
    reps = sample.reps if sample.reps is not None and sample.reps > 0 else 0
    return weight * reps


class VolumeStrategy(TrendStrategy):
    """Strategy for body-part training volume."""

    sample_kind = "volume"

    def __init__(self, body_part: BodyPart):
        super().__init__()
        self.body_part = body_part

    def matches(self, sample: VolumeSample) -> bool:
        if sample.is_cardio:
            return False
        if self.body_part is BodyPart.ALL:
            return True
        return sample.body_part == self.body_part.value

    def daily_volume(self, samples: List[VolumeSample]) -> List[Tuple[date, float]]:
        matching = [s for s in samples if self.matches(s)]
        return [
            (day, sum(set_volume(s) for s in day_samples))
            for day, day_samples in group_by_day(matching, lambda s: s.recorded_at)
        ]

    def compute(
        self,
        samples: List[VolumeSample],
        window: TrendWindow,
    ) -> Dict[str, Any]:
        daily = self.daily_volume(samples)

        if window.interval is Interval.ALL:
            points = [
                DataPoint(day.isoformat(), round(volume, 2))
                for day, volume in daily
                if volume > 0
            ]
        else:
            points = [
                DataPoint(
                    bucket.label,
                    round(sum(volume for _, volume in bucket.samples), 2),
                )
                for bucket in window.bucketize(daily, key=lambda pair: pair[0])
            ]

        return {
            "bodyPart": self.body_part.value,
            "points": points,
        }
