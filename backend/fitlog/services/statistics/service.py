"""
Statistics Service - Loads records and runs the statistics engine.

The service is the boundary where error context is attached: every
public method runs inside ``track_stats_call``.
"""
from datetime import datetime, time
from typing import Any, Callable, Dict, List, Optional, Sequence

from fitlog.core.config import settings
from fitlog.core.errors import InvalidParameterError, NotFoundError
from fitlog.core.logging import get_logger, track_stats_call
from fitlog.services.statistics.calculator import StatsCalculator
from fitlog.services.statistics.samples import CARDIO_TYPE
from fitlog.services.statistics.store import StatsStore

logger = get_logger(__name__)


def _serialize(points) -> List[Dict[str, Any]]:
    return [point.to_dict() for point in points]


def _day_end(now: datetime) -> datetime:
    return datetime.combine(now.date(), time.max)


class StatisticsService:
    """
    Statistics use cases for one request.

    Usage:
        service = StatisticsService(StatsStore(db))
        stats = await service.get_body_log_stats(user_id, "1year", "1week")
    """

    def __init__(
        self,
        store: StatsStore,
        calculator: Optional[StatsCalculator] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.calculator = calculator or StatsCalculator(
            allow_pending_today=settings.STREAK_TODAY_GRACE
        )
        self.clock = clock

    # ========================================
    # Trends
    # ========================================

    async def get_body_log_stats(
        self,
        user_id: str,
        period: str,
        interval: str,
    ) -> Dict[str, List[Dict[str, Any]]]:
        """
        Body weight, muscle mass and body fat trends.

        Returns:
            {"bodyWeight": [...], "muscleMass": [...], "bodyFat": [...]}
        """
        with track_stats_call(
            logger, "StatisticsService.get_body_log_stats",
            user_id=user_id, period=period, interval=interval,
        ) as call:
            now = self.clock()
            start = self.calculator.fetch_start(period, interval, now)
            rows = await self.store.fetch_body_logs(user_id, start, _day_end(now))
            call.set_records(len(rows))

            trend = self.calculator.compute_body_metric_trend(
                rows, period, interval, now=now
            )
            call.set_points(sum(len(points) for points in trend.values()))
            return {name: _serialize(points) for name, points in trend.items()}

    async def get_exercise_weight_stats(
        self,
        user_id: str,
        exercise_ids: Sequence[str],
        period: str,
        interval: str,
        rm: str,
    ) -> Dict[str, List[Dict[str, Any]]]:
        """
        Weight trend per exercise at the requested RM target.

        Exercises without any set in the window are left out.

        Raises:
            InvalidParameterError: If no or too many exercise ids are given
            NotFoundError: If none of the exercises exist
        """
        with track_stats_call(
            logger, "StatisticsService.get_exercise_weight_stats",
            user_id=user_id, exercise_ids=list(exercise_ids),
            period=period, interval=interval, rm=rm,
        ) as call:
            limit = settings.MAX_WEIGHT_STATS_EXERCISES
            if not 1 <= len(exercise_ids) <= limit:
                raise InvalidParameterError(
                    f"Between 1 and {limit} exercises can be compared",
                    details=[{"path": ["exerciseIds"], "count": len(exercise_ids)}],
                )

            exercises = await self.store.get_exercises(exercise_ids)
            if not exercises:
                raise NotFoundError("Exercises not found")

            now = self.clock()
            start = self.calculator.fetch_start(period, interval, now)

            results = []
            for exercise in exercises:
                rows = await self.store.fetch_exercise_sets(
                    user_id, exercise.id, start, _day_end(now)
                )
                call.set_records(call.log.records_in + len(rows))
                if not rows:
                    continue

                points = self.calculator.compute_strength_trend(
                    rows, period, interval, rm, now=now
                )
                call.set_points(call.log.points_out + len(points))
                results.append({
                    "exerciseId": str(exercise.id),
                    "exerciseName": exercise.name,
                    "exerciseType": exercise.exercise_type,
                    "data": _serialize(points),
                })

            return {"exercises": results}

    async def get_cardio_stats(
        self,
        user_id: str,
        exercise_ids: Optional[Sequence[str]],
        period: str,
        interval: str,
    ) -> List[Dict[str, Any]]:
        """
        Distance, duration and speed trends per cardio exercise.

        Without ``exercise_ids`` every cardio exercise in the catalog is
        considered. Exercises without records are left out.
        """
        with track_stats_call(
            logger, "StatisticsService.get_cardio_stats",
            user_id=user_id, period=period, interval=interval,
        ) as call:
            if exercise_ids:
                exercises = await self.store.get_exercises(exercise_ids)
            else:
                exercises = await self.store.get_exercises_by_type(CARDIO_TYPE)

            now = self.clock()
            start = self.calculator.fetch_start(period, interval, now)

            results = []
            for exercise in exercises:
                rows = await self.store.fetch_exercise_sets(
                    user_id, exercise.id, start, _day_end(now)
                )
                call.set_records(call.log.records_in + len(rows))
                if not rows:
                    continue

                trend = self.calculator.compute_cardio_trend(
                    rows, period, interval, now=now
                )
                call.set_points(call.log.points_out + len(trend["distance"]))
                results.append({
                    "exerciseId": str(exercise.id),
                    "exerciseName": exercise.name,
                    "exerciseType": exercise.exercise_type,
                    "distance": _serialize(trend["distance"]),
                    "duration": _serialize(trend["duration"]),
                    "avgSpeed": _serialize(trend["avgSpeed"]),
                })

            return results

    async def get_body_part_volume_stats(
        self,
        user_id: str,
        period: str,
        interval: str,
        body_part: str,
    ) -> Dict[str, Any]:
        """
        Training volume for one body part (or all).

        Returns:
            {"bodyPart": str, "volumeData": [...]}
        """
        with track_stats_call(
            logger, "StatisticsService.get_body_part_volume_stats",
            user_id=user_id, period=period, interval=interval, body_part=body_part,
        ) as call:
            now = self.clock()
            start = self.calculator.fetch_start(period, interval, now)
            rows = await self.store.fetch_volume_sets(user_id, start, _day_end(now))
            call.set_records(len(rows))

            trend = self.calculator.compute_volume_trend(
                rows, period, interval, body_part, now=now
            )
            call.set_points(len(trend["points"]))
            return {
                "bodyPart": trend["bodyPart"],
                "volumeData": _serialize(trend["points"]),
            }

    # ========================================
    # Streaks
    # ========================================

    async def get_streaks(self, user_id: str) -> Dict[str, int]:
        """Current and longest workout streaks."""
        with track_stats_call(
            logger, "StatisticsService.get_streaks", user_id=user_id
        ) as call:
            rows = await self.store.fetch_workout_dates(user_id)
            call.set_records(len(rows))

            streaks = self.calculator.compute_streaks(rows, today=self.clock().date())
            return streaks.to_dict()

    async def get_monthly_calendar(
        self,
        user_id: str,
        year: int,
        month: int,
    ) -> Dict[str, Any]:
        """Workout days of one month with streak statistics."""
        with track_stats_call(
            logger, "StatisticsService.get_monthly_calendar",
            user_id=user_id, year=year, month=month,
        ) as call:
            rows = await self.store.fetch_workout_dates(user_id)
            call.set_records(len(rows))

            result = self.calculator.monthly_calendar(
                rows, year, month, today=self.clock().date()
            )
            call.set_points(result.active_days)
            return result.to_dict()
