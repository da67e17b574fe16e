"""
Services module - Application business logic layer.

Modules:
- statistics: Trend aggregation, streaks and the monthly calendar
"""
# Main exports for convenience
from fitlog.services.statistics import StatisticsService, StatsCalculator, StatsStore

__all__ = [
    "StatisticsService",
    "StatsCalculator",
    "StatsStore",
]
