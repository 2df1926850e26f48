"""
Domain layer - Pure scheduling logic without external dependencies.
"""

from .exceptions import ConfigError, InvalidRangeError, ScheduleError, SnapshotNotFoundError
from .interval_algebra import ImmersionResult, RejectionReason, squash_to_range, unsquash
from .models import Doctor, Patient, Room, ScheduleEntry, ScheduleSnapshot, Specialization
from .time_range import TimeRange

__all__ = [
    "ConfigError",
    "Doctor",
    "ImmersionResult",
    "InvalidRangeError",
    "Patient",
    "RejectionReason",
    "Room",
    "ScheduleEntry",
    "ScheduleError",
    "ScheduleSnapshot",
    "SnapshotNotFoundError",
    "Specialization",
    "TimeRange",
    "squash_to_range",
    "unsquash",
]
