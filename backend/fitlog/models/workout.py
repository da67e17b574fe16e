"""
Workout database models.

A WorkoutSession is one logged day of training; its WorkoutSets hold
the per-exercise numbers (weight/reps for strength, distance/time for
cardio).
"""
import uuid
from datetime import datetime
from typing import List, Optional
from sqlalchemy import Boolean, String, DateTime, Float, Integer, ForeignKey, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from fitlog.core.database import Base
from fitlog.models.exercise import Exercise


class WorkoutSession(Base):
    """Workout session stored in database."""

    __tablename__ = "workout_sessions"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    # Local calendar date and time of the workout
    record_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    is_deleted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    sets: Mapped[List["WorkoutSet"]] = relationship(
        back_populates="workout",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        Index("ix_workout_sessions_user_date", "user_id", "record_date"),
    )

    def to_dict(self) -> dict:
        """Convert to dictionary for API response."""
        return {
            "id": str(self.id),
            "createdAt": int(self.created_at.timestamp() * 1000),
            "userId": self.user_id,
            "recordDate": self.record_date.isoformat(),
            "notes": self.notes,
            "sets": [s.to_dict() for s in self.sets],
        }


class WorkoutSet(Base):
    """One set (or cardio entry) of a workout session."""

    __tablename__ = "workout_sets"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4
    )
    workout_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("workout_sessions.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    exercise_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("exercises.id", ondelete="RESTRICT"),
        nullable=False,
        index=True
    )
    weight: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    reps: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    # Meters
    distance: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    # Seconds
    record_time: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    workout: Mapped[WorkoutSession] = relationship(back_populates="sets")
    exercise: Mapped[Exercise] = relationship(lazy="joined")

    def to_dict(self) -> dict:
        """Convert to dictionary for API response."""
        return {
            "id": str(self.id),
            "exerciseId": str(self.exercise_id),
            "weight": self.weight,
            "reps": self.reps,
            "distance": self.distance,
            "recordTime": self.record_time,
        }
