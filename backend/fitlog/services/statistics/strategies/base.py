"""
Base Strategy - Abstract interface for trend aggregators.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

from fitlog.services.statistics.buckets import Bucket, Interval, bucketize, to_day
from fitlog.services.statistics.samples import SampleAdapter, get_adapter


@dataclass(frozen=True)
class DataPoint:
    """
    One point of a trend series.

    ``value`` is None when the bucket has no usable sample;
    ``is_estimated`` is True when the value was not read directly
    from a single matching measurement.
    """
    label: str
    value: Optional[float]
    is_estimated: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API response."""
        return {
            "label": self.label,
            "value": self.value,
            "isEstimated": self.is_estimated,
        }


@dataclass(frozen=True)
class TrendWindow:
    """
    The calendar window of one statistics call.

    ``start`` is the effective (bucket-aligned) start day and
    ``today`` the day of the single "now" snapshot.
    """
    start: date
    today: date
    interval: Interval

    def covers(self, moment: Any) -> bool:
        return self.start <= to_day(moment) <= self.today

    def bucketize(
        self,
        items: Iterable[Any],
        key: Callable[[Any], Optional[datetime]] = lambda s: s.recorded_at,
    ) -> List[Bucket]:
        return bucketize(items, self.start, self.interval, self.today, key=key)


def round_value(value: Optional[float], digits: int = 1) -> Optional[float]:
    if value is None:
        return None
    return round(value, digits)


class TrendStrategy(ABC):
    """
    Abstract base class for trend aggregators.

    Subclasses turn normalized samples into data points for one
    statistic (strength, cardio, volume, body composition).
    """

    sample_kind: str = "unknown"

    def __init__(self) -> None:
        self.adapter: SampleAdapter = get_adapter(self.sample_kind)

    @abstractmethod
    def compute(self, samples: List[Any], window: TrendWindow) -> Any:
        """
        Aggregate samples over the window.

        Args:
            samples: Normalized samples inside the window, sorted by time
            window: Calendar window of the call

        Returns:
            Data points (shape depends on the statistic)
        """
        pass

    def prepare(self, records: Iterable[Any], window: TrendWindow) -> List[Any]:
        """Normalize records, keep those inside the window, sort by time."""
        samples = [
            sample
            for sample in self.adapter.normalize_many(records)
            if window.covers(sample.recorded_at)
        ]
        samples.sort(key=lambda s: s.recorded_at)
        return samples

    def run(self, records: Iterable[Any], window: TrendWindow) -> Any:
        """Normalize ``records`` and compute the statistic."""
        return self.compute(self.prepare(records, window), window)
