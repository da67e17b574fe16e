"""
Exercise catalog API endpoints.
"""
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fitlog.core.database import get_db
from fitlog.core.logging import get_logger
from fitlog.models import Exercise
from fitlog.services.statistics.samples import CARDIO_TYPE
from fitlog.services.statistics.strategies import BodyPart

logger = get_logger(__name__)
router = APIRouter()

EXERCISE_TYPES = [part.value for part in BodyPart if part is not BodyPart.ALL] + [CARDIO_TYPE]


# ========================================
# Request/Response Schemas
# ========================================

class CreateExerciseRequest(BaseModel):
    """Request to add an exercise to the catalog."""
    name: str = Field(..., min_length=1, max_length=100)
    exerciseType: str = Field(..., description=f"One of: {', '.join(EXERCISE_TYPES)}")


class ExerciseResponse(BaseModel):
    """Exercise response."""
    id: str
    name: str
    exerciseType: str


# ========================================
# API Endpoints
# ========================================

@router.post("", response_model=ExerciseResponse)
async def create_exercise(
    request: CreateExerciseRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Add an exercise to the catalog.
    """
    exercise_type = request.exerciseType.strip().lower()
    if exercise_type not in EXERCISE_TYPES:
        raise HTTPException(
            status_code=400,
            detail=f"Invalid exercise type: {request.exerciseType}",
        )

    result = await db.execute(select(Exercise).where(Exercise.name == request.name))
    if result.scalar_one_or_none():
        raise HTTPException(status_code=409, detail="Exercise already exists")

    db_exercise = Exercise(name=request.name, exercise_type=exercise_type)
    db.add(db_exercise)
    await db.flush()
    await db.refresh(db_exercise)

    logger.info("Exercise created", exercise_id=str(db_exercise.id), exercise_type=exercise_type)

    return db_exercise.to_dict()


@router.get("", response_model=list[ExerciseResponse])
async def list_exercises(
    db: AsyncSession = Depends(get_db),
):
    """
    Get the exercise catalog.
    """
    result = await db.execute(
        select(Exercise).order_by(Exercise.exercise_type, Exercise.name)
    )
    return [exercise.to_dict() for exercise in result.scalars().all()]
