"""
Half-open time range value object.
"""

from __future__ import annotations

from dataclasses import dataclass

from pendulum import DateTime

from .exceptions import InvalidRangeError


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable time range ``[start, end)``.

    Invariant: start must be before end. The end instant is exclusive, so a
    range ending at 12:00 and another starting at 12:00 touch but never
    overlap.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise InvalidRangeError(self.start, self.end)

    def contains(self, point: DateTime) -> bool:
        """Check if an instant lies in the range, start inclusive, end exclusive."""
        return self.start <= point < self.end

    def covers(self, other: TimeRange) -> bool:
        """Check if another range lies completely inside this one."""
        return self.start <= other.start and other.end <= self.end

    def strictly_encloses(self, other: TimeRange) -> bool:
        """Check if this range starts before and ends after another range."""
        return self.start < other.start and other.end < self.end

    def overlaps(self, other: TimeRange) -> bool:
        """Check if this range overlaps with another."""
        return self.contains(other.start) or other.contains(self.start)

    def can_be_merged_with(self, other: TimeRange) -> bool:
        """Check if another range starts exactly where this one ends."""
        return self.end == other.start

    def __str__(self) -> str:
        return f"{self.start.format('DD.MM.YYYY HH:mm')} - {self.end.format('HH:mm')}"
