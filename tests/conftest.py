"""
Shared fixtures.

- A fixed clock and an in-memory statistics store. The fake store
  mirrors StatsStore's query contract (user scoping, [start, end]
  window, deleted workouts skipped) so statistics API tests run
  without a database.
- A throwaway SQLite database bound to ``get_db`` for the logging
  endpoints and the real StatsStore queries.
"""
import asyncio
from datetime import datetime
from types import SimpleNamespace
from typing import Any, Dict, List, Optional, Sequence

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from fitlog import models  # noqa: F401
from fitlog.api.statistics import get_statistics_service
from fitlog.core.database import Base, get_db
from fitlog.main import app
from fitlog.services.statistics import StatisticsService

# Wednesday
NOW = datetime(2024, 5, 29, 12, 0)

BENCH_ID = "00000000-0000-0000-0000-000000000001"
SQUAT_ID = "00000000-0000-0000-0000-000000000002"
RUN_ID = "00000000-0000-0000-0000-000000000003"
ROW_ID = "00000000-0000-0000-0000-000000000004"


class FakeStatsStore:
    """In-memory fake of StatsStore."""

    def __init__(self):
        self.exercises: List[SimpleNamespace] = []
        self.workouts: List[Dict[str, Any]] = []
        self.body_logs: List[Dict[str, Any]] = []

    # Test data helpers

    def add_exercise(self, exercise_id: str, name: str, exercise_type: str) -> None:
        self.exercises.append(
            SimpleNamespace(id=exercise_id, name=name, exercise_type=exercise_type)
        )

    def add_workout(
        self,
        user_id: str,
        record_date: datetime,
        sets: List[Dict[str, Any]],
        workout_id: Optional[str] = None,
        is_deleted: bool = False,
    ) -> None:
        self.workouts.append({
            "id": workout_id or f"w{len(self.workouts) + 1}",
            "user_id": user_id,
            "record_date": record_date,
            "is_deleted": is_deleted,
            "sets": sets,
        })

    def add_body_log(self, user_id: str, record_date: datetime, **metrics: float) -> None:
        self.body_logs.append({"user_id": user_id, "record_date": record_date, **metrics})

    # StatsStore interface

    def _exercise(self, exercise_id: Any) -> Optional[SimpleNamespace]:
        for exercise in self.exercises:
            if str(exercise.id) == str(exercise_id):
                return exercise
        return None

    def _live_workouts(self, user_id: str, start: datetime, end: datetime):
        for workout in self.workouts:
            if workout["user_id"] != user_id or workout["is_deleted"]:
                continue
            if start <= workout["record_date"] <= end:
                yield workout

    async def get_exercises(self, exercise_ids: Sequence[Any]):
        found = [self._exercise(i) for i in exercise_ids]
        return [exercise for exercise in found if exercise is not None]

    async def get_exercises_by_type(self, exercise_type: str):
        return sorted(
            (e for e in self.exercises if e.exercise_type == exercise_type),
            key=lambda e: e.name,
        )

    async def fetch_exercise_sets(self, user_id, exercise_id, start, end):
        rows = []
        for workout in self._live_workouts(user_id, start, end):
            for s in workout["sets"]:
                if str(s["exercise_id"]) != str(exercise_id):
                    continue
                rows.append({
                    "recorded_at": workout["record_date"],
                    "weight": s.get("weight"),
                    "reps": s.get("reps"),
                    "distance": s.get("distance"),
                    "duration": s.get("record_time"),
                })
        return rows

    async def fetch_volume_sets(self, user_id, start, end):
        rows = []
        for workout in self._live_workouts(user_id, start, end):
            for s in workout["sets"]:
                exercise = self._exercise(s["exercise_id"])
                rows.append({
                    "recorded_at": workout["record_date"],
                    "weight": s.get("weight"),
                    "reps": s.get("reps"),
                    "body_part": exercise.exercise_type if exercise else None,
                })
        return rows

    async def fetch_body_logs(self, user_id, start, end):
        return [
            {
                "recorded_at": log["record_date"],
                "height": log.get("height"),
                "body_weight": log.get("body_weight"),
                "muscle_mass": log.get("muscle_mass"),
                "body_fat": log.get("body_fat"),
            }
            for log in self.body_logs
            if log["user_id"] == user_id and start <= log["record_date"] <= end
        ]

    async def fetch_workout_dates(self, user_id, start=None, end=None):
        return [
            {"id": workout["id"], "recorded_at": workout["record_date"]}
            for workout in self.workouts
            if workout["user_id"] == user_id
            and not workout["is_deleted"]
            and (start is None or start <= workout["record_date"] <= end)
        ]


@pytest.fixture
def fake_store() -> FakeStatsStore:
    store = FakeStatsStore()
    store.add_exercise(BENCH_ID, "Bench Press", "chest")
    store.add_exercise(SQUAT_ID, "Back Squat", "legs")
    store.add_exercise(RUN_ID, "Running", "cardio")
    store.add_exercise(ROW_ID, "Rowing", "cardio")
    return store


@pytest.fixture
def client(fake_store):
    """TestClient with the statistics service bound to the fake store."""
    service = StatisticsService(fake_store, clock=lambda: NOW)
    app.dependency_overrides[get_statistics_service] = lambda: service
    yield TestClient(app)
    app.dependency_overrides.clear()


# =============================================================================
# Database-backed client
# =============================================================================


@pytest.fixture
def db_engine(tmp_path):
    """File-backed SQLite engine; NullPool keeps connections per event loop."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'fitlog.db'}",
        poolclass=NullPool,
    )

    async def create_tables():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(create_tables())
    yield engine
    asyncio.run(engine.dispose())


@pytest.fixture
def db_client(db_engine):
    """TestClient whose requests run against the SQLite database."""
    session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()
