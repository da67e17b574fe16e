"""
Body log database model.
"""
import uuid
from datetime import datetime
from typing import Optional
from sqlalchemy import String, DateTime, Float, Index
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from fitlog.core.database import Base


class BodyLog(Base):
    """Body measurement stored in database. Every metric is optional."""

    __tablename__ = "body_logs"

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
    record_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    height: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    body_weight: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    muscle_mass: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    body_fat: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    __table_args__ = (
        Index("ix_body_logs_user_date", "user_id", "record_date"),
    )

    def to_dict(self) -> dict:
        """Convert to dictionary for API response."""
        return {
            "id": str(self.id),
            "createdAt": int(self.created_at.timestamp() * 1000),
            "userId": self.user_id,
            "recordDate": self.record_date.isoformat(),
            "height": self.height,
            "bodyWeight": self.body_weight,
            "muscleMass": self.muscle_mass,
            "bodyFat": self.body_fat,
        }
