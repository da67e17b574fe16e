from fitlog.models.exercise import Exercise
from fitlog.models.workout import WorkoutSession, WorkoutSet
from fitlog.models.body_log import BodyLog

__all__ = [
    "Exercise",
    "WorkoutSession",
    "WorkoutSet",
    "BodyLog",
]
