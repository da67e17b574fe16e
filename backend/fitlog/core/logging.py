"""
Structured logging configuration.
Designed for easy debugging without exposing user data.
"""
import logging
import sys
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Generator, Optional

import structlog
from structlog.types import Processor

from fitlog.core.config import settings
from fitlog.core.errors import StatisticsError


def setup_logging() -> None:
    """Configure structured logging for the application."""

    # Common processors
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.LOG_FORMAT == "json":
        # JSON format for production
        renderer = structlog.processors.JSONRenderer()
    else:
        # Console format for development
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=shared_processors + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Configure root logger
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processor=renderer,
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper()))

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)


# ========================================
# Statistics call tracking
# ========================================

@dataclass
class StatsCallLog:
    """Complete log entry for one statistics computation."""
    call_id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    location: str = ""
    params: Dict[str, Any] = field(default_factory=dict)

    # Input / output sizes
    records_in: int = 0
    points_out: int = 0

    # Timing
    start_time: float = 0.0
    end_time: float = 0.0
    duration_ms: float = 0.0

    # Status
    success: bool = True
    error_type: Optional[str] = None
    error_message: Optional[str] = None


class StatsCallTracker:
    """Tracker for a single statistics computation."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger,
        enabled: bool,
        location: str,
        params: Dict[str, Any],
    ):
        self.logger = logger
        self.enabled = enabled
        self.log = StatsCallLog(location=location, params=params)

    def start(self) -> None:
        """Mark the start of the computation."""
        self.log.start_time = time.time()

        if self.enabled:
            self.logger.debug(
                "Statistics call started",
                call_id=self.log.call_id,
                location=self.log.location,
                **self.log.params,
            )

    def set_records(self, count: int) -> None:
        """Record how many raw records were loaded for the computation."""
        self.log.records_in = count

    def set_points(self, count: int) -> None:
        """Record how many data points were produced."""
        self.log.points_out = count

    def set_error(self, error_type: str, error_message: str) -> None:
        """Set error information."""
        self.log.success = False
        self.log.error_type = error_type
        self.log.error_message = error_message

    def finish(self) -> None:
        """Mark the end of the computation and log summary."""
        self.log.end_time = time.time()
        self.log.duration_ms = (self.log.end_time - self.log.start_time) * 1000

        if self.log.success:
            self.logger.info(
                "Statistics call completed",
                call_id=self.log.call_id,
                location=self.log.location,
                duration_ms=round(self.log.duration_ms, 2),
                records_in=self.log.records_in,
                points_out=self.log.points_out,
            )
        else:
            self.logger.error(
                "Statistics call failed",
                call_id=self.log.call_id,
                location=self.log.location,
                duration_ms=round(self.log.duration_ms, 2),
                error_type=self.log.error_type,
                error_message=self.log.error_message,
            )


@contextmanager
def track_stats_call(
    logger: structlog.stdlib.BoundLogger,
    location: str,
    **params: Any
) -> Generator[StatsCallTracker, None, None]:
    """
    Context manager wrapping one statistics computation.

    Logs timing and outcome, and stamps ``location`` on any
    StatisticsError that escapes so the API layer can report
    where it was raised.

    Usage:
        with track_stats_call(logger, "StatisticsService.get_cardio_stats",
                              user_id=user_id) as call:
            rows = await store.fetch_cardio_sets(...)
            call.set_records(len(rows))
    """
    tracker = StatsCallTracker(
        logger=logger,
        enabled=settings.STATS_DEBUG_LOG,
        location=location,
        params=params,
    )
    tracker.start()
    try:
        yield tracker
    except StatisticsError as e:
        if e.location is None:
            e.location = location
        tracker.set_error(type(e).__name__, e.message)
        raise
    except Exception as e:
        tracker.set_error(type(e).__name__, str(e))
        raise
    finally:
        tracker.finish()
