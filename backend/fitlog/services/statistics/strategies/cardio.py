"""
Cardio Strategy - Distance, duration and average speed trends.

Same-day entries are summed. Distance is reported in kilometers,
duration in minutes and speed in km/h. Summed measurements are never
estimated.
"""
from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Tuple

from fitlog.services.statistics.buckets import Interval, group_by_day
from fitlog.services.statistics.samples import CardioSample
from fitlog.services.statistics.strategies.base import (
    DataPoint,
    TrendStrategy,
    TrendWindow,
    round_value,
)


def _add(total: Optional[float], value: Optional[float]) -> Optional[float]:
    if value is None:
        return total
    return (total or 0.0) + value


@dataclass
class CardioTotals:
    """Summed distance (km) and duration (min); None when never measured."""
    distance_km: Optional[float] = None
    duration_min: Optional[float] = None

    def add(self, other: "CardioTotals") -> None:
        self.distance_km = _add(self.distance_km, other.distance_km)
        self.duration_min = _add(self.duration_min, other.duration_min)

    def add_sample(self, sample: CardioSample) -> None:
        # Negative readings are treated as missing
        if sample.distance is not None and sample.distance >= 0:
            self.distance_km = _add(self.distance_km, sample.distance / 1000)
        if sample.duration is not None and sample.duration >= 0:
            self.duration_min = _add(self.duration_min, sample.duration / 60)

    @property
    def avg_speed(self) -> Optional[float]:
        """km/h rounded to one decimal, or None without a positive duration."""
        if self.distance_km is None or self.duration_min is None:
            return None
        if self.duration_min <= 0:
            return None
        return round(self.distance_km / (self.duration_min / 60), 1)


class CardioStrategy(TrendStrategy):
    """
    Strategy for cardio trends.

    Produces three parallel series: distance, duration and avgSpeed.
    """

    sample_kind = "cardio"

    def daily_totals(self, samples: List[CardioSample]) -> List[Tuple[date, CardioTotals]]:
        totals = []
        for day, day_samples in group_by_day(samples, lambda s: s.recorded_at):
            day_total = CardioTotals()
            for sample in day_samples:
                day_total.add_sample(sample)
            totals.append((day, day_total))
        return totals

    def compute(
        self,
        samples: List[CardioSample],
        window: TrendWindow,
    ) -> Dict[str, List[DataPoint]]:
        daily = self.daily_totals(samples)

        if window.interval is Interval.ALL:
            labelled = [(day.isoformat(), total) for day, total in daily]
        else:
            labelled = []
            for bucket in window.bucketize(daily, key=lambda pair: pair[0]):
                if bucket.is_empty():
                    continue
                bucket_total = CardioTotals()
                for _, day_total in bucket.samples:
                    bucket_total.add(day_total)
                labelled.append((bucket.label, bucket_total))

        result: Dict[str, List[DataPoint]] = {
            "distance": [],
            "duration": [],
            "avgSpeed": [],
        }
        for label, total in labelled:
            result["distance"].append(DataPoint(label, round_value(total.distance_km, 3)))
            result["duration"].append(DataPoint(label, round_value(total.duration_min, 2)))
            result["avgSpeed"].append(DataPoint(label, total.avg_speed))

        return result
