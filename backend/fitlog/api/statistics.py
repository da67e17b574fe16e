"""
Statistics API endpoints.
"""
from typing import Awaitable, List, Optional, TypeVar

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from fitlog.core.database import get_db
from fitlog.core.errors import StatisticsError
from fitlog.core.logging import get_logger
from fitlog.services.statistics import (
    BodyPart,
    Interval,
    RMTarget,
    StatisticsService,
    StatsStore,
)

logger = get_logger(__name__)
router = APIRouter()

T = TypeVar("T")


def get_statistics_service(db: AsyncSession = Depends(get_db)) -> StatisticsService:
    """Statistics service bound to the request's database session."""
    return StatisticsService(StatsStore(db))


# ========================================
# Request/Response Schemas
# ========================================

class DataPointResponse(BaseModel):
    """One point of a trend series."""
    label: str
    value: Optional[float]
    isEstimated: bool


class BodyLogStatsResponse(BaseModel):
    """Body composition trends."""
    bodyWeight: list[DataPointResponse]
    muscleMass: list[DataPointResponse]
    bodyFat: list[DataPointResponse]


class ExerciseWeightSeries(BaseModel):
    """Weight trend of one exercise."""
    exerciseId: str
    exerciseName: str
    exerciseType: str
    data: list[DataPointResponse]


class ExerciseWeightStatsResponse(BaseModel):
    """Weight trends of the requested exercises."""
    exercises: list[ExerciseWeightSeries]


class CardioSeries(BaseModel):
    """Cardio trends of one exercise."""
    exerciseId: str
    exerciseName: str
    exerciseType: str
    distance: list[DataPointResponse]
    duration: list[DataPointResponse]
    avgSpeed: list[DataPointResponse]


class VolumeStatsResponse(BaseModel):
    """Training volume of one body part."""
    bodyPart: str
    volumeData: list[DataPointResponse]


class StreakResponse(BaseModel):
    """Workout streaks."""
    currentStreak: int
    longestStreak: int


class CalendarDayResponse(BaseModel):
    """A day with at least one workout."""
    date: str
    workoutIds: list[str]


class CalendarStatsResponse(BaseModel):
    """Summary statistics of a calendar month."""
    totalWorkouts: int
    activeDays: int
    completionRate: float
    daysInMonth: int
    currentStreak: int
    longestStreak: int


class CalendarResponse(BaseModel):
    """Workout calendar of one month."""
    year: int
    month: int
    workoutDays: list[CalendarDayResponse]
    stats: CalendarStatsResponse


def _split_ids(values: Optional[List[str]]) -> List[str]:
    """Accept both repeated and comma-separated id parameters."""
    ids = []
    for value in values or []:
        ids.extend(part.strip() for part in value.split(",") if part.strip())
    return ids


async def _answer(call: Awaitable[T]) -> T:
    try:
        return await call
    except StatisticsError as e:
        logger.warning(
            "Statistics request rejected",
            location=e.location,
            error=e.message,
            status_code=e.status_code,
        )
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())
    except Exception as e:
        logger.error("Statistics request error", error=str(e))
        raise HTTPException(status_code=500, detail="Failed to compute statistics")


# ========================================
# API Endpoints
# ========================================

@router.get("/body-logs", response_model=BodyLogStatsResponse)
async def get_body_log_stats(
    user_id: str = Query(..., alias="userId"),
    period: str = Query("1year"),
    interval: Interval = Query(Interval.ONE_WEEK),
    service: StatisticsService = Depends(get_statistics_service),
):
    """
    Get body weight, muscle mass and body fat trends.
    """
    return await _answer(
        service.get_body_log_stats(user_id, period, interval)
    )


@router.get("/exercise-weight", response_model=ExerciseWeightStatsResponse)
async def get_exercise_weight_stats(
    user_id: str = Query(..., alias="userId"),
    exercise_ids: List[str] = Query(..., alias="exerciseIds"),
    period: str = Query("3months"),
    interval: Interval = Query(Interval.ALL),
    rm: RMTarget = Query(RMTarget.OVER_8RM),
    service: StatisticsService = Depends(get_statistics_service),
):
    """
    Get weight trends of up to five exercises at an RM target.
    """
    return await _answer(
        service.get_exercise_weight_stats(
            user_id, _split_ids(exercise_ids), period, interval, rm
        )
    )


@router.get("/cardio", response_model=list[CardioSeries])
async def get_cardio_stats(
    user_id: str = Query(..., alias="userId"),
    exercise_ids: Optional[List[str]] = Query(None, alias="exerciseIds"),
    period: str = Query("3months"),
    interval: Interval = Query(Interval.ALL),
    service: StatisticsService = Depends(get_statistics_service),
):
    """
    Get distance, duration and average speed trends of cardio exercises.
    """
    return await _answer(
        service.get_cardio_stats(user_id, _split_ids(exercise_ids), period, interval)
    )


@router.get("/body-part-volume", response_model=VolumeStatsResponse)
async def get_body_part_volume_stats(
    user_id: str = Query(..., alias="userId"),
    period: str = Query("3months"),
    interval: Interval = Query(Interval.ONE_WEEK),
    body_part: BodyPart = Query(BodyPart.CHEST, alias="bodyPart"),
    service: StatisticsService = Depends(get_statistics_service),
):
    """
    Get training volume of a body part.
    """
    return await _answer(
        service.get_body_part_volume_stats(user_id, period, interval, body_part)
    )


@router.get("/streaks", response_model=StreakResponse)
async def get_streaks(
    user_id: str = Query(..., alias="userId"),
    service: StatisticsService = Depends(get_statistics_service),
):
    """
    Get the current and longest workout streaks.
    """
    return await _answer(service.get_streaks(user_id))


@router.get("/calendar", response_model=CalendarResponse)
async def get_calendar(
    user_id: str = Query(..., alias="userId"),
    year: int = Query(..., ge=1900, le=9999),
    month: int = Query(..., ge=1, le=12),
    service: StatisticsService = Depends(get_statistics_service),
):
    """
    Get the workout calendar of a month.
    """
    return await _answer(service.get_monthly_calendar(user_id, year, month))
