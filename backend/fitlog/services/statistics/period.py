"""
Period resolution - lookback windows for statistics.

Periods subtract calendar months/years from "now" rather than a fixed
number of days, clamping to the last valid day of the target month.
"""
import calendar
from datetime import datetime
from enum import Enum
from typing import Optional, Union

from fitlog.core.logging import get_logger

logger = get_logger(__name__)


class Period(str, Enum):
    """Lookback window for a statistics request."""
    ONE_MONTH = "1month"
    THREE_MONTHS = "3months"
    SIX_MONTHS = "6months"
    ONE_YEAR = "1year"
    TWO_YEARS = "2years"
    ALL = "all"


# Fixed start for the "all" period
ALL_TIME_START = datetime(2000, 1, 1)

DEFAULT_PERIOD = Period.THREE_MONTHS

_PERIOD_MONTHS = {
    Period.ONE_MONTH: 1,
    Period.THREE_MONTHS: 3,
    Period.SIX_MONTHS: 6,
    Period.ONE_YEAR: 12,
    Period.TWO_YEARS: 24,
}

# Older clients send "1months"
_ALIASES = {
    "1months": Period.ONE_MONTH,
}


def parse_period(value: Union[Period, str, None]) -> Period:
    """
    Map a raw period value to a Period.

    Unknown values fall back to the default (3 months); this never raises.
    """
    if isinstance(value, Period):
        return value
    if value is None:
        return DEFAULT_PERIOD

    raw = str(value).strip().lower()
    if raw in _ALIASES:
        return _ALIASES[raw]
    try:
        return Period(raw)
    except ValueError:
        logger.debug("Unknown period, using default", period=value)
        return DEFAULT_PERIOD


def subtract_months(moment: datetime, months: int) -> datetime:
    """
    Move ``moment`` back by ``months`` calendar months.

    The day is clamped to the length of the target month, so
    31 March minus one month lands on the last day of February.
    """
    total = moment.year * 12 + (moment.month - 1) - months
    year, month_index = divmod(total, 12)
    month = month_index + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def resolve_start(
    period: Union[Period, str, None],
    now: Optional[datetime] = None,
) -> datetime:
    """
    Compute the start of the lookback window for ``period``.

    Args:
        period: Period value (unknown values mean 3 months)
        now: Reference time; defaults to the current local time

    Returns:
        Start datetime (same time of day as ``now`` except for "all")
    """
    resolved = parse_period(period)
    if resolved is Period.ALL:
        return ALL_TIME_START

    if now is None:
        now = datetime.now()
    return subtract_months(now, _PERIOD_MONTHS[resolved])
