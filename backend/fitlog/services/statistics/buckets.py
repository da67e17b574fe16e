"""
Bucketizer - Calendar-aligned grouping of dated samples.

Buckets follow the real calendar:
- 1week / 2weeks: Monday-aligned spans of 7 / 14 days
- 1month: calendar months
- 3months: calendar quarters (Jan-Mar, Apr-Jun, Jul-Sep, Oct-Dec)
- all: one bucket per calendar day that has samples

All functions are pure; every date they need is passed in.
"""
import calendar
from bisect import bisect_right
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional, Tuple, TypeVar

T = TypeVar("T")


class Interval(str, Enum):
    """Bucket granularity."""
    ONE_WEEK = "1week"
    TWO_WEEKS = "2weeks"
    ONE_MONTH = "1month"
    THREE_MONTHS = "3months"
    ALL = "all"


_WEEK_SPANS = {
    Interval.ONE_WEEK: 7,
    Interval.TWO_WEEKS: 14,
}


@dataclass
class Bucket:
    """
    A contiguous calendar span and the samples falling inside it.

    ``end`` is clipped to today for the final, possibly partial, bucket;
    ``nominal_end`` is the calendar end of the span.
    """
    start: date
    end: date
    nominal_end: date
    label: str
    samples: List[Any] = field(default_factory=list)

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    @property
    def nominal_days(self) -> int:
        """Width of the full calendar span in days."""
        return (self.nominal_end - self.start).days + 1

    def is_empty(self) -> bool:
        return not self.samples


# ========================================
# Calendar helpers
# ========================================

def to_day(value: Any) -> date:
    """Calendar day of a date or datetime."""
    if isinstance(value, datetime):
        return value.date()
    return value


def monday_on_or_before(day: date) -> date:
    return day - timedelta(days=day.weekday())


def month_end(day: date) -> date:
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def add_months(day: date, months: int) -> date:
    """First-of-month arithmetic; ``day`` must be the 1st."""
    total = day.year * 12 + (day.month - 1) + months
    year, month_index = divmod(total, 12)
    return date(year, month_index + 1, 1)


def quarter_start(day: date) -> date:
    return date(day.year, 3 * ((day.month - 1) // 3) + 1, 1)


def format_month_day(day: date) -> str:
    return day.strftime("%m-%d")


def effective_start(start: Any, interval: Interval) -> date:
    """
    Start day actually covered by the buckets.

    Weekly intervals extend backwards to the Monday on/before ``start``
    so the earliest bucket is a full week (or fortnight). Other
    intervals keep ``start``; their first bucket begins on the 1st of
    the month/quarter but only holds what was loaded from ``start``.
    """
    day = to_day(start)
    if interval in _WEEK_SPANS:
        return monday_on_or_before(day)
    return day


# ========================================
# Bucket construction
# ========================================

def _week_buckets(start: date, today: date, span_days: int) -> List[Bucket]:
    buckets = []
    current = monday_on_or_before(start)

    while current <= today:
        nominal_end = current + timedelta(days=span_days - 1)
        end = min(nominal_end, today)
        buckets.append(Bucket(
            start=current,
            end=end,
            nominal_end=nominal_end,
            label=f"{format_month_day(current)} ~ {format_month_day(end)}",
        ))
        current = current + timedelta(days=span_days)

    return buckets


def _month_buckets(start: date, today: date) -> List[Bucket]:
    buckets = []
    current = start.replace(day=1)

    while current <= today:
        nominal_end = month_end(current)
        buckets.append(Bucket(
            start=current,
            end=min(nominal_end, today),
            nominal_end=nominal_end,
            label=current.strftime("%Y-%m"),
        ))
        current = add_months(current, 1)

    return buckets


def _quarter_buckets(start: date, today: date) -> List[Bucket]:
    buckets = []
    current = quarter_start(start)

    while current <= today:
        nominal_end = month_end(add_months(current, 2))
        quarter = (current.month - 1) // 3 + 1
        buckets.append(Bucket(
            start=current,
            end=min(nominal_end, today),
            nominal_end=nominal_end,
            label=f"{current.year}-Q{quarter}",
        ))
        current = add_months(current, 3)

    return buckets


def build_buckets(start: Any, today: Any, interval: Interval) -> List[Bucket]:
    """
    Build the empty, ordered bucket series covering ``[start, today]``.

    Args:
        start: Period start (date or datetime)
        today: Last day to cover (date or datetime)
        interval: Bucket granularity; ALL has no fixed spans and
            yields an empty list

    Returns:
        Contiguous buckets in ascending order
    """
    start_day = to_day(start)
    today_day = to_day(today)

    if start_day > today_day:
        return []

    if interval in _WEEK_SPANS:
        return _week_buckets(start_day, today_day, _WEEK_SPANS[interval])
    if interval is Interval.ONE_MONTH:
        return _month_buckets(start_day, today_day)
    if interval is Interval.THREE_MONTHS:
        return _quarter_buckets(start_day, today_day)
    return []


def group_by_day(
    items: Iterable[T],
    key: Callable[[T], Optional[datetime]],
) -> List[Tuple[date, List[T]]]:
    """
    Group items by calendar day.

    Returns (day, items) pairs sorted by day; items keep their input
    order within a day. Items whose key is None are skipped.
    """
    days: dict = {}
    for item in items:
        moment = key(item)
        if moment is None:
            continue
        days.setdefault(to_day(moment), []).append(item)
    return sorted(days.items(), key=lambda pair: pair[0])


def bucketize(
    samples: Iterable[T],
    start: Any,
    interval: Interval,
    today: Any,
    key: Callable[[T], Optional[datetime]] = lambda s: s.recorded_at,
) -> List[Bucket]:
    """
    Partition samples into calendar-aligned buckets.

    Args:
        samples: Dated samples (order does not matter)
        start: Period start
        interval: Bucket granularity
        today: Last covered day
        key: Returns the timestamp of a sample

    Returns:
        Ordered buckets. For ALL, one bucket per day with samples;
        otherwise the full series, including empty buckets. Samples
        without a date or outside the covered span are left out.
    """
    start_day = to_day(start)
    today_day = to_day(today)

    if interval is Interval.ALL:
        return [
            Bucket(start=day, end=day, nominal_end=day, label=day.isoformat(), samples=items)
            for day, items in group_by_day(samples, key)
            if start_day <= day <= today_day
        ]

    buckets = build_buckets(start_day, today_day, interval)
    if not buckets:
        return buckets

    starts = [bucket.start for bucket in buckets]
    for sample in samples:
        moment = key(sample)
        if moment is None:
            continue
        day = to_day(moment)
        index = bisect_right(starts, day) - 1
        if index < 0 or not buckets[index].contains(day):
            continue
        buckets[index].samples.append(sample)

    return buckets
