"""
Statistics module - Workout and body-measurement trends.

This module provides:
- Sample adapters normalizing raw records into typed samples
- Period resolution and calendar bucketing
- Aggregation strategies (strength, cardio, volume, body metrics)
- Streaks and the monthly calendar
- Database storage interface and the request-level service
"""
from fitlog.services.statistics.buckets import Bucket, Interval, build_buckets
from fitlog.services.statistics.calculator import StatsCalculator
from fitlog.services.statistics.period import Period, parse_period, resolve_start
from fitlog.services.statistics.samples import SampleAdapter, get_adapter
from fitlog.services.statistics.service import StatisticsService
from fitlog.services.statistics.store import StatsStore
from fitlog.services.statistics.strategies import BodyPart, DataPoint, RMTarget
from fitlog.services.statistics.streak import StreakState, compute_streaks

__all__ = [
    # Calendar
    "Bucket",
    "Interval",
    "Period",
    "build_buckets",
    "parse_period",
    "resolve_start",
    # Adapters
    "SampleAdapter",
    "get_adapter",
    # Engine
    "StatsCalculator",
    "BodyPart",
    "DataPoint",
    "RMTarget",
    "StreakState",
    "compute_streaks",
    # Service / store
    "StatisticsService",
    "StatsStore",
]
