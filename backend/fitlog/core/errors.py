"""
Application error types.

Errors carry an HTTP status code and, once they cross a service
boundary, the location of the call that raised them.
"""
from typing import Any, List, Optional


class StatisticsError(Exception):
    """Base error for statistics and record handling."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        location: Optional[str] = None,
        details: Optional[List[Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.location = location
        self.details = details or []

    def to_dict(self) -> dict:
        """Convert to dictionary for API response."""
        return {
            "message": self.message,
            "location": self.location,
            "details": self.details,
        }


class InvalidParameterError(StatisticsError):
    """A filter parameter is outside its enumerated values."""

    status_code = 400


class NotFoundError(StatisticsError):
    """The requested exercise or record does not exist."""

    status_code = 404
