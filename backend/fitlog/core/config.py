"""
Application configuration.
All values can be overridden from environment variables or a .env file.
"""
from typing import List
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Database
    DATABASE_URL: str = "postgresql+asyncpg://postgres:postgres@db:5432/fitlog"
    DATABASE_ECHO: bool = False

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # json or console

    # Statistics debug logging - logs sample counts and dropped records per call
    STATS_DEBUG_LOG: bool = False

    # Streaks: an unlogged "today" does not break the current streak
    # until the day has fully elapsed
    STREAK_TODAY_GRACE: bool = True

    # Upper bound on exercises per weight-trend request
    MAX_WEIGHT_STATS_EXERCISES: int = 5

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
