"""
Stats Calculator - Entry points of the statistics engine.

Orchestrates:
- Parameter coercion (fails fast on out-of-enum values)
- Period resolution and calendar window construction
- Strategy selection and aggregation

The calculator is pure: it receives already-loaded records and takes a
single "now" snapshot per call.
"""
from datetime import date, datetime, time
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar, Union

from fitlog.core.errors import InvalidParameterError
from fitlog.core.logging import get_logger
from fitlog.services.statistics.buckets import Interval, effective_start
from fitlog.services.statistics.period import Period, parse_period, resolve_start
from fitlog.services.statistics.streak import (
    MonthlyCalendar,
    StreakState,
    compute_streaks,
    monthly_calendar,
)
from fitlog.services.statistics.strategies import (
    BodyPart,
    BodyStrategy,
    CardioStrategy,
    DataPoint,
    RMTarget,
    StrengthStrategy,
    TrendWindow,
    VolumeStrategy,
)

logger = get_logger(__name__)

E = TypeVar("E", bound=Enum)


def coerce_enum(enum_class: Type[E], value: Union[E, str], name: str) -> E:
    """
    Convert a raw parameter to its enum.

    Raises:
        InvalidParameterError: If the value is not one of the enum values
    """
    if isinstance(value, enum_class):
        return value
    try:
        return enum_class(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_class)
        raise InvalidParameterError(
            f"Invalid {name}: {value!r}",
            details=[{"path": [name], "message": f"expected one of: {allowed}"}],
        )


class StatsCalculator:
    """
    Statistics engine.

    Usage:
        calculator = StatsCalculator()
        points = calculator.compute_strength_trend(
            records, period="3months", interval="1week", rm_target="1RM"
        )
    """

    def __init__(self, allow_pending_today: bool = True):
        self.allow_pending_today = allow_pending_today

    def window(
        self,
        period: Union[Period, str],
        interval: Interval,
        now: datetime,
    ) -> TrendWindow:
        """Calendar window for a period/interval pair at ``now``."""
        start = resolve_start(period, now)
        return TrendWindow(
            start=effective_start(start, interval),
            today=now.date(),
            interval=interval,
        )

    def fetch_start(
        self,
        period: Union[Period, str],
        interval: Union[Interval, str],
        now: datetime,
    ) -> datetime:
        """
        Start of the record-fetch window: midnight of the first covered day.

        Weekly intervals reach back to the Monday that opens the first
        bucket, so callers load complete first weeks. Records are
        filtered per day, so the whole start day is loaded.
        """
        interval = coerce_enum(Interval, interval, "interval")
        day = self.window(period, interval, now).start
        return datetime.combine(day, time.min)

    # ========================================
    # Trends
    # ========================================

    def compute_strength_trend(
        self,
        records: Iterable[Any],
        period: Union[Period, str],
        interval: Union[Interval, str],
        rm_target: Union[RMTarget, str],
        now: Optional[datetime] = None,
    ) -> List[DataPoint]:
        """
        Per-exercise weight trend at the RM target.

        Args:
            records: Sets of one exercise (weight, reps, recorded date)
            period: Lookback window
            interval: Bucket granularity
            rm_target: 1RM, 5RM or over8RM
            now: Reference time; defaults to the current local time

        Returns:
            Ordered data points; days/buckets without eligible sets are omitted
        """
        interval = coerce_enum(Interval, interval, "interval")
        rm_target = coerce_enum(RMTarget, rm_target, "rm")
        now = now or datetime.now()

        strategy = StrengthStrategy(rm_target)
        points = strategy.run(records, self.window(period, interval, now))

        logger.debug(
            "Computed strength trend",
            period=parse_period(period).value,
            interval=interval.value,
            rm=rm_target.value,
            points=len(points),
        )
        return points

    def compute_cardio_trend(
        self,
        records: Iterable[Any],
        period: Union[Period, str],
        interval: Union[Interval, str] = Interval.ALL,
        now: Optional[datetime] = None,
    ) -> Dict[str, List[DataPoint]]:
        """
        Cardio trend of one exercise.

        Returns:
            {"distance": [...], "duration": [...], "avgSpeed": [...]}
        """
        interval = coerce_enum(Interval, interval, "interval")
        now = now or datetime.now()

        result = CardioStrategy().run(records, self.window(period, interval, now))

        logger.debug(
            "Computed cardio trend",
            period=parse_period(period).value,
            interval=interval.value,
            points=len(result["distance"]),
        )
        return result

    def compute_volume_trend(
        self,
        records: Iterable[Any],
        period: Union[Period, str],
        interval: Union[Interval, str],
        body_part: Union[BodyPart, str],
        now: Optional[datetime] = None,
    ) -> Dict[str, Any]:
        """
        Training volume for a body part.

        Returns:
            {"bodyPart": str, "points": [...]}; bucketed series are zero-filled
        """
        interval = coerce_enum(Interval, interval, "interval")
        body_part = coerce_enum(BodyPart, body_part, "bodyPart")
        now = now or datetime.now()

        result = VolumeStrategy(body_part).run(records, self.window(period, interval, now))

        logger.debug(
            "Computed volume trend",
            period=parse_period(period).value,
            interval=interval.value,
            body_part=body_part.value,
            points=len(result["points"]),
        )
        return result

    def compute_body_metric_trend(
        self,
        records: Iterable[Any],
        period: Union[Period, str],
        interval: Union[Interval, str],
        now: Optional[datetime] = None,
    ) -> Dict[str, List[DataPoint]]:
        """
        Body composition trend.

        Returns:
            {"bodyWeight": [...], "muscleMass": [...], "bodyFat": [...]}
        """
        interval = coerce_enum(Interval, interval, "interval")
        now = now or datetime.now()

        result = BodyStrategy().run(records, self.window(period, interval, now))

        logger.debug(
            "Computed body metric trend",
            period=parse_period(period).value,
            interval=interval.value,
            points={name: len(points) for name, points in result.items()},
        )
        return result

    # ========================================
    # Streaks
    # ========================================

    def compute_streaks(
        self,
        activity_dates: Iterable[Any],
        today: Optional[date] = None,
    ) -> StreakState:
        """Current and longest day streaks over the whole history."""
        return compute_streaks(
            activity_dates,
            today=today,
            allow_pending_today=self.allow_pending_today,
        )

    def monthly_calendar(
        self,
        workouts: Iterable[Any],
        year: int,
        month: int,
        today: Optional[date] = None,
    ) -> MonthlyCalendar:
        """Workout calendar of one month with streak statistics."""
        return monthly_calendar(
            workouts,
            year,
            month,
            today=today,
            allow_pending_today=self.allow_pending_today,
        )
