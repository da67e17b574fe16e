"""
Streaks and the monthly workout calendar.

Activity is counted per calendar day: several workouts on one day
count once.
"""
import calendar
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from fitlog.core.errors import InvalidParameterError
from fitlog.services.statistics.samples import DATE_FIELDS, parse_recorded_at, read_field

_ID_FIELDS = ("id", "workout_id", "workoutId")


@dataclass(frozen=True)
class StreakState:
    """Current and longest runs of consecutive active days."""
    current_streak: int
    longest_streak: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "currentStreak": self.current_streak,
            "longestStreak": self.longest_streak,
        }


def _activity_day(item: Any) -> Optional[date]:
    if isinstance(item, (date, datetime, str, int, float)):
        moment = parse_recorded_at(item)
    else:
        moment = parse_recorded_at(read_field(item, DATE_FIELDS))
    return moment.date() if moment is not None else None


def unique_days(activity_dates: Iterable[Any]) -> List[date]:
    """Distinct calendar days, ascending. Unparseable values are skipped."""
    days: Set[date] = set()
    for item in activity_dates:
        day = _activity_day(item)
        if day is not None:
            days.add(day)
    return sorted(days)


def longest_streak(days: List[date]) -> int:
    """Longest run of consecutive days in sorted, distinct ``days``."""
    if not days:
        return 0

    longest = current = 1
    for previous, day in zip(days, days[1:]):
        if (day - previous).days == 1:
            current += 1
        else:
            current = 1
        longest = max(longest, current)
    return longest


def current_streak(
    days: Iterable[date],
    today: date,
    allow_pending_today: bool = True,
) -> int:
    """
    Consecutive active days ending today.

    With ``allow_pending_today`` an unlogged today does not break the
    streak yet: counting starts from yesterday instead. Without it an
    unlogged today means a streak of 0.
    """
    active = set(days)
    cursor = today
    if cursor not in active:
        if not allow_pending_today:
            return 0
        cursor = today - timedelta(days=1)

    streak = 0
    while cursor in active:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def compute_streaks(
    activity_dates: Iterable[Any],
    today: Optional[date] = None,
    allow_pending_today: bool = True,
) -> StreakState:
    """
    Compute streaks over a user's whole activity history.

    Args:
        activity_dates: Dates/datetimes/ISO strings, or records with a date field
        today: Reference day; defaults to the current local date
        allow_pending_today: Today-policy, see current_streak

    Returns:
        StreakState
    """
    if today is None:
        today = date.today()

    days = unique_days(activity_dates)
    return StreakState(
        current_streak=current_streak(days, today, allow_pending_today),
        longest_streak=longest_streak(days),
    )


# ========================================
# Monthly calendar
# ========================================

@dataclass
class CalendarDay:
    """A day of the month with at least one workout."""
    day: date
    workout_ids: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.day.isoformat(),
            "workoutIds": self.workout_ids,
        }


@dataclass
class MonthlyCalendar:
    """Workout days of one month plus summary statistics."""
    year: int
    month: int
    days_in_month: int
    workout_days: List[CalendarDay]
    total_workouts: int
    streaks: StreakState

    @property
    def active_days(self) -> int:
        return len(self.workout_days)

    @property
    def completion_rate(self) -> float:
        """Share of the month's days with a workout, in percent."""
        return round(self.active_days / self.days_in_month * 100, 1)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "year": self.year,
            "month": self.month,
            "workoutDays": [d.to_dict() for d in self.workout_days],
            "stats": {
                "totalWorkouts": self.total_workouts,
                "activeDays": self.active_days,
                "completionRate": self.completion_rate,
                "daysInMonth": self.days_in_month,
                **self.streaks.to_dict(),
            },
        }


def _workout_entry(item: Any) -> Tuple[Optional[date], Optional[str]]:
    if isinstance(item, (date, datetime, str, int, float)):
        return _activity_day(item), None
    workout_id = read_field(item, _ID_FIELDS)
    return _activity_day(item), str(workout_id) if workout_id is not None else None


def monthly_calendar(
    workouts: Iterable[Any],
    year: int,
    month: int,
    today: Optional[date] = None,
    allow_pending_today: bool = True,
) -> MonthlyCalendar:
    """
    Build the workout calendar of one month.

    Args:
        workouts: The user's whole workout history, as dates or records
            with a date and an optional id
        year: Calendar year
        month: Calendar month (1-12)
        today: Reference day for the current streak
        allow_pending_today: Today-policy for the current streak

    Raises:
        InvalidParameterError: If month is outside 1-12
    """
    if not 1 <= month <= 12:
        raise InvalidParameterError(f"Invalid month: {month}")

    entries = [_workout_entry(item) for item in workouts]
    entries = [(day, workout_id) for day, workout_id in entries if day is not None]

    by_day: Dict[date, CalendarDay] = {}
    total = 0
    for day, workout_id in entries:
        if day.year != year or day.month != month:
            continue
        total += 1
        entry = by_day.setdefault(day, CalendarDay(day))
        if workout_id is not None:
            entry.workout_ids.append(workout_id)

    return MonthlyCalendar(
        year=year,
        month=month,
        days_in_month=calendar.monthrange(year, month)[1],
        workout_days=[by_day[day] for day in sorted(by_day)],
        total_workouts=total,
        streaks=compute_streaks(
            [day for day, _ in entries],
            today=today,
            allow_pending_today=allow_pending_today,
        ),
    )
