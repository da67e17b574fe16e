"""
Exercise catalog database model.
"""
import uuid
from datetime import datetime
from sqlalchemy import String, DateTime
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from fitlog.core.database import Base


class Exercise(Base):
    """
    Exercise in the catalog.

    ``exercise_type`` is the trained body part (chest, back, legs,
    shoulders, triceps, biceps) or "cardio".
    """

    __tablename__ = "exercises"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    exercise_type: Mapped[str] = mapped_column(
        String(30),
        nullable=False,
        index=True
    )

    @property
    def is_cardio(self) -> bool:
        return self.exercise_type == "cardio"

    def to_dict(self) -> dict:
        """Convert to dictionary for API response."""
        return {
            "id": str(self.id),
            "name": self.name,
            "exerciseType": self.exercise_type,
        }
