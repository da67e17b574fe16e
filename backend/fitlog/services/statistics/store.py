"""
Stats Store - Loads the raw records the statistics engine works on.
"""
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fitlog.models.body_log import BodyLog
from fitlog.models.exercise import Exercise
from fitlog.models.workout import WorkoutSession, WorkoutSet
from fitlog.core.logging import get_logger

logger = get_logger(__name__)


def _uuid_list(values: Sequence[Any]) -> List[uuid.UUID]:
    """Parse ids, skipping malformed ones."""
    ids = []
    for value in values:
        if isinstance(value, uuid.UUID):
            ids.append(value)
            continue
        try:
            ids.append(uuid.UUID(str(value)))
        except ValueError:
            logger.warning("Invalid exercise id format", exercise_id=str(value))
    return ids


class StatsStore:
    """
    Read-only queries for statistics.

    Every fetch is scoped to one user and a [start, end] window and
    skips deleted workouts. Rows come back as plain mappings that the
    sample adapters understand.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_exercises(self, exercise_ids: Sequence[Any]) -> List[Exercise]:
        """
        Get catalog exercises by id.

        Args:
            exercise_ids: Exercise ids (strings or UUIDs)

        Returns:
            Matching exercises in the requested order
        """
        ids = _uuid_list(exercise_ids)
        if not ids:
            return []

        result = await self.db.execute(select(Exercise).where(Exercise.id.in_(ids)))
        found = {exercise.id: exercise for exercise in result.scalars().all()}
        return [found[i] for i in ids if i in found]

    async def get_exercises_by_type(self, exercise_type: str) -> List[Exercise]:
        """Get all catalog exercises of one type, ordered by name."""
        result = await self.db.execute(
            select(Exercise)
            .where(Exercise.exercise_type == exercise_type)
            .order_by(Exercise.name)
        )
        return list(result.scalars().all())

    async def fetch_exercise_sets(
        self,
        user_id: str,
        exercise_id: uuid.UUID,
        start: datetime,
        end: datetime,
    ) -> List[Dict[str, Any]]:
        """
        Sets of one exercise within the window.

        Returns:
            Mappings with recorded_at, weight, reps, distance, duration
        """
        result = await self.db.execute(
            select(
                WorkoutSession.record_date.label("recorded_at"),
                WorkoutSet.weight,
                WorkoutSet.reps,
                WorkoutSet.distance,
                WorkoutSet.record_time.label("duration"),
            )
            .join(WorkoutSession, WorkoutSet.workout_id == WorkoutSession.id)
            .where(
                WorkoutSet.exercise_id == exercise_id,
                WorkoutSession.user_id == user_id,
                WorkoutSession.is_deleted.is_(False),
                WorkoutSession.record_date.between(start, end),
            )
            .order_by(WorkoutSession.record_date)
        )
        return [dict(row._mapping) for row in result]

    async def fetch_volume_sets(
        self,
        user_id: str,
        start: datetime,
        end: datetime,
    ) -> List[Dict[str, Any]]:
        """
        All sets within the window with the exercise's body part.

        Returns:
            Mappings with recorded_at, weight, reps, body_part
        """
        result = await self.db.execute(
            select(
                WorkoutSession.record_date.label("recorded_at"),
                WorkoutSet.weight,
                WorkoutSet.reps,
                Exercise.exercise_type.label("body_part"),
            )
            .join(WorkoutSession, WorkoutSet.workout_id == WorkoutSession.id)
            .join(Exercise, WorkoutSet.exercise_id == Exercise.id)
            .where(
                WorkoutSession.user_id == user_id,
                WorkoutSession.is_deleted.is_(False),
                WorkoutSession.record_date.between(start, end),
            )
            .order_by(WorkoutSession.record_date)
        )
        return [dict(row._mapping) for row in result]

    async def fetch_body_logs(
        self,
        user_id: str,
        start: datetime,
        end: datetime,
    ) -> List[Dict[str, Any]]:
        """Body logs within the window, oldest first."""
        result = await self.db.execute(
            select(
                BodyLog.record_date.label("recorded_at"),
                BodyLog.height,
                BodyLog.body_weight,
                BodyLog.muscle_mass,
                BodyLog.body_fat,
            )
            .where(
                BodyLog.user_id == user_id,
                BodyLog.record_date.between(start, end),
            )
            .order_by(BodyLog.record_date)
        )
        return [dict(row._mapping) for row in result]

    async def fetch_workout_dates(
        self,
        user_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[Dict[str, Any]]:
        """
        Workout ids and dates of a user, oldest first.

        Without a window the whole history is returned (streaks need it).
        """
        query = select(
            WorkoutSession.id,
            WorkoutSession.record_date.label("recorded_at"),
        ).where(
            WorkoutSession.user_id == user_id,
            WorkoutSession.is_deleted.is_(False),
        )
        if start is not None and end is not None:
            query = query.where(WorkoutSession.record_date.between(start, end))

        result = await self.db.execute(query.order_by(WorkoutSession.record_date))
        return [dict(row._mapping) for row in result]
