"""
Domain-specific exception hierarchy for the clinic schedule application.
"""


class ScheduleError(Exception):
    """Base class for all application-level errors."""


class InvalidRangeError(ScheduleError, ValueError):
    """Raised when a time range or schedule entry does not start before it ends."""

    def __init__(self, start, end):
        super().__init__(f"Start ({start}) must be before end ({end})")
        self.start = start
        self.end = end


class SnapshotNotFoundError(ScheduleError, KeyError):
    """Raised when no schedule snapshot is stored for a clinic."""

    def __str__(self) -> str:
        return f"No schedule snapshot stored for clinic {self.args[0]}"


class ConfigError(ScheduleError):
    """Raised when configuration or seed data cannot be turned into a schedule."""
