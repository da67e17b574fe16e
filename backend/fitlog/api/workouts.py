"""
Workout logging API endpoints.
"""
from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fitlog.core.database import get_db
from fitlog.core.logging import get_logger
from fitlog.models import Exercise, WorkoutSession, WorkoutSet

logger = get_logger(__name__)
router = APIRouter()


# ========================================
# Request/Response Schemas
# ========================================

class WorkoutSetRequest(BaseModel):
    """One set of a workout."""
    exerciseId: UUID
    weight: float | None = Field(None, ge=0, description="Weight in kg")
    reps: int | None = Field(None, ge=0)
    distance: float | None = Field(None, ge=0, description="Distance in meters")
    recordTime: int | None = Field(None, ge=0, description="Duration in seconds")


class CreateWorkoutRequest(BaseModel):
    """Request to log a workout."""
    userId: str = Field(..., min_length=1, max_length=64)
    recordDate: datetime = Field(..., description="Local date and time of the workout")
    notes: str | None = Field(None, max_length=500)
    sets: list[WorkoutSetRequest] = Field(..., min_length=1)


class WorkoutSetResponse(BaseModel):
    """Workout set response."""
    id: str
    exerciseId: str
    weight: float | None
    reps: int | None
    distance: float | None
    recordTime: int | None


class WorkoutResponse(BaseModel):
    """Workout response."""
    id: str
    createdAt: int
    userId: str
    recordDate: str
    notes: str | None
    sets: list[WorkoutSetResponse]


class BatchDeleteRequest(BaseModel):
    """Request to delete multiple workouts."""
    ids: list[UUID] = Field(..., description="List of workout IDs to delete")


# ========================================
# API Endpoints
# ========================================

@router.post("", response_model=WorkoutResponse)
async def create_workout(
    request: CreateWorkoutRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Log a workout with its sets.
    """
    logger.info("Creating workout", user_id=request.userId, sets=len(request.sets))

    exercise_ids = {s.exerciseId for s in request.sets}
    result = await db.execute(select(Exercise.id).where(Exercise.id.in_(exercise_ids)))
    missing = exercise_ids - set(result.scalars().all())
    if missing:
        raise HTTPException(
            status_code=404,
            detail=f"Exercises not found: {', '.join(sorted(str(i) for i in missing))}",
        )

    # Stored as local naive time
    record_date = request.recordDate
    if record_date.tzinfo is not None:
        record_date = record_date.astimezone().replace(tzinfo=None)

    db_workout = WorkoutSession(
        user_id=request.userId,
        record_date=record_date,
        notes=request.notes,
        sets=[
            WorkoutSet(
                exercise_id=s.exerciseId,
                weight=s.weight,
                reps=s.reps,
                distance=s.distance,
                record_time=s.recordTime,
            )
            for s in request.sets
        ],
    )
    db.add(db_workout)
    await db.flush()

    logger.info("Workout created", workout_id=str(db_workout.id))

    return db_workout.to_dict()


@router.get("", response_model=list[WorkoutResponse])
async def list_workouts(
    user_id: str = Query(..., alias="userId"),
    db: AsyncSession = Depends(get_db),
):
    """
    Get a user's workouts, newest first.
    """
    result = await db.execute(
        select(WorkoutSession)
        .where(
            WorkoutSession.user_id == user_id,
            WorkoutSession.is_deleted.is_(False),
        )
        .order_by(WorkoutSession.record_date.desc())
    )
    return [workout.to_dict() for workout in result.scalars().all()]


@router.delete("/{workout_id}")
async def delete_workout(
    workout_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """
    Delete a workout.

    Workouts are soft deleted and disappear from lists and statistics.
    """
    result = await db.execute(
        select(WorkoutSession).where(
            WorkoutSession.id == workout_id,
            WorkoutSession.is_deleted.is_(False),
        )
    )
    workout = result.scalar_one_or_none()

    if not workout:
        raise HTTPException(status_code=404, detail="Workout not found")

    workout.is_deleted = True

    logger.info("Workout deleted", workout_id=str(workout_id))

    return {"message": "Workout deleted"}


@router.post("/batch-delete")
async def batch_delete_workouts(
    request: BatchDeleteRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Delete multiple workouts.
    """
    logger.info("Batch deleting workouts", count=len(request.ids))

    result = await db.execute(
        select(WorkoutSession).where(
            WorkoutSession.id.in_(request.ids),
            WorkoutSession.is_deleted.is_(False),
        )
    )
    workouts = result.scalars().all()
    for workout in workouts:
        workout.is_deleted = True

    logger.info("Workouts deleted", count=len(workouts))

    return {"message": f"Deleted {len(workouts)} workouts"}
