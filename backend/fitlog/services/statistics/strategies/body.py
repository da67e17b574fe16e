"""
Body Strategy - Body composition trends (weight, muscle mass, body fat).
"""
from datetime import timedelta
from typing import Dict, List

from fitlog.services.statistics.buckets import Bucket, Interval
from fitlog.services.statistics.samples import BodySample
from fitlog.services.statistics.strategies.base import (
    DataPoint,
    TrendStrategy,
    TrendWindow,
)

# (series name, sample attribute)
BODY_METRICS = (
    ("bodyWeight", "body_weight"),
    ("muscleMass", "muscle_mass"),
    ("bodyFat", "body_fat"),
)

# A bucket whose samples span more than this share of its width is
# reported as estimated
SPARSE_SPAN_RATIO = 0.8


def is_sparse(bucket: Bucket) -> bool:
    """True when the bucket's sample times span > 80% of its nominal width."""
    if len(bucket.samples) < 2:
        return False
    times = [s.recorded_at for s in bucket.samples]
    span = max(times) - min(times)
    return span > timedelta(days=bucket.nominal_days) * SPARSE_SPAN_RATIO


class BodyStrategy(TrendStrategy):
    """
    Strategy for body composition.

    Raw resolution reports every measurement as is. Bucketed series
    report the per-metric mean; buckets without a value for a metric
    are omitted from that metric's series.
    """

    sample_kind = "body"

    def compute(
        self,
        samples: List[BodySample],
        window: TrendWindow,
    ) -> Dict[str, List[DataPoint]]:
        result: Dict[str, List[DataPoint]] = {name: [] for name, _ in BODY_METRICS}

        if window.interval is Interval.ALL:
            for sample in samples:
                label = sample.recorded_at.date().isoformat()
                for name, attr in BODY_METRICS:
                    value = getattr(sample, attr)
                    if value is not None:
                        result[name].append(DataPoint(label, value, False))
            return result

        for bucket in window.bucketize(samples):
            if bucket.is_empty():
                continue
            sparse = is_sparse(bucket)

            for name, attr in BODY_METRICS:
                values = [
                    getattr(s, attr) for s in bucket.samples
                    if getattr(s, attr) is not None
                ]
                if not values:
                    continue
                mean = round(sum(values) / len(values), 1)
                # Averaging several measurements is reported as an estimate
                estimated = sparse or len(values) > 1
                result[name].append(DataPoint(bucket.label, mean, estimated))

        return result
