"""
Body log API endpoints.
"""
from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field, model_validator
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fitlog.core.database import get_db
from fitlog.core.logging import get_logger
from fitlog.models import BodyLog

logger = get_logger(__name__)
router = APIRouter()


# ========================================
# Request/Response Schemas
# ========================================

class CreateBodyLogRequest(BaseModel):
    """Request to log a body measurement."""
    userId: str = Field(..., min_length=1, max_length=64)
    recordDate: datetime
    height: float | None = Field(None, gt=0, description="Height in cm")
    bodyWeight: float | None = Field(None, gt=0, description="Body weight in kg")
    muscleMass: float | None = Field(None, gt=0, description="Muscle mass in kg")
    bodyFat: float | None = Field(None, ge=0, le=100, description="Body fat in percent")

    @model_validator(mode="after")
    def check_has_measurement(self):
        if all(
            value is None
            for value in (self.height, self.bodyWeight, self.muscleMass, self.bodyFat)
        ):
            raise ValueError("At least one measurement is required")
        return self


class BodyLogResponse(BaseModel):
    """Body log response."""
    id: str
    createdAt: int
    userId: str
    recordDate: str
    height: float | None
    bodyWeight: float | None
    muscleMass: float | None
    bodyFat: float | None


# ========================================
# API Endpoints
# ========================================

@router.post("", response_model=BodyLogResponse)
async def create_body_log(
    request: CreateBodyLogRequest,
    db: AsyncSession = Depends(get_db),
):
    """
    Log a body measurement.
    """
    logger.info("Creating body log", user_id=request.userId)

    record_date = request.recordDate
    if record_date.tzinfo is not None:
        record_date = record_date.astimezone().replace(tzinfo=None)

    db_log = BodyLog(
        user_id=request.userId,
        record_date=record_date,
        height=request.height,
        body_weight=request.bodyWeight,
        muscle_mass=request.muscleMass,
        body_fat=request.bodyFat,
    )
    db.add(db_log)
    await db.flush()
    await db.refresh(db_log)

    logger.info("Body log created", body_log_id=str(db_log.id))

    return db_log.to_dict()


@router.get("", response_model=list[BodyLogResponse])
async def list_body_logs(
    user_id: str = Query(..., alias="userId"),
    db: AsyncSession = Depends(get_db),
):
    """
    Get a user's body logs, newest first.
    """
    result = await db.execute(
        select(BodyLog)
        .where(BodyLog.user_id == user_id)
        .order_by(BodyLog.record_date.desc())
    )
    return [log.to_dict() for log in result.scalars().all()]


@router.delete("/{body_log_id}")
async def delete_body_log(
    body_log_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    """
    Delete a body log.
    """
    result = await db.execute(select(BodyLog).where(BodyLog.id == body_log_id))
    body_log = result.scalar_one_or_none()

    if not body_log:
        raise HTTPException(status_code=404, detail="Body log not found")

    await db.delete(body_log)

    logger.info("Body log deleted", body_log_id=str(body_log_id))

    return {"message": "Body log deleted"}
