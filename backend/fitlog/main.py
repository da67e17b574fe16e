"""
FitLog Backend - FastAPI Application
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fitlog.core.config import settings
from fitlog.core.logging import setup_logging, get_logger
from fitlog.core.database import init_db
from fitlog.api import body_logs, exercises, statistics, workouts

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    setup_logging()
    logger.info("Starting FitLog Backend", version="1.0.0")
    await init_db()
    logger.info("Database initialized")

    yield

    # Shutdown
    logger.info("Shutting down FitLog Backend")


app = FastAPI(
    title="FitLog API",
    description="Workout logging and training statistics backend",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(exercises.router, prefix="/api/exercises", tags=["exercises"])
app.include_router(workouts.router, prefix="/api/workouts", tags=["workouts"])
app.include_router(body_logs.router, prefix="/api/body-logs", tags=["body-logs"])
app.include_router(statistics.router, prefix="/api/statistics", tags=["statistics"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "fitlog-backend"}
