"""
Trend aggregation strategies.

Each strategy turns normalized samples into the data points of one
statistic.
"""
from fitlog.services.statistics.strategies.base import DataPoint, TrendStrategy, TrendWindow
from fitlog.services.statistics.strategies.body import BodyStrategy
from fitlog.services.statistics.strategies.cardio import CardioStrategy
from fitlog.services.statistics.strategies.strength import RMTarget, StrengthStrategy
from fitlog.services.statistics.strategies.volume import BodyPart, VolumeStrategy

__all__ = [
    "DataPoint",
    "TrendStrategy",
    "TrendWindow",
    "BodyStrategy",
    "CardioStrategy",
    "RMTarget",
    "StrengthStrategy",
    "BodyPart",
    "VolumeStrategy",
]
