"""
Domain models for clinic schedule entries.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, Optional
from uuid import UUID

from pendulum import DateTime

from .exceptions import InvalidRangeError
from .interval_algebra import ImmersionResult, RejectionReason, squash_to_range, unsquash
from .time_range import TimeRange


class Specialization(str, Enum):
    """Medical specialization of a doctor."""
    SURGEON = "SURGEON"


@dataclass(frozen=True)
class Doctor:
    specialization: Specialization


@dataclass(frozen=True)
class Patient:
    name: str


@dataclass(frozen=True)
class Room:
    name: str


@dataclass(frozen=True)
class ScheduleEntry:
    """
    One block of a clinic schedule: a doctor in a room for a time range.

    An entry without a patient is "on call" time; with a patient it is a
    visit. Entries are never modified; ``copy`` returns a new entry.

    Invariant: start must be before end.
    """
    doctor: Doctor
    start: DateTime
    end: DateTime
    room: Room
    patient: Optional[Patient] = None

    def __post_init__(self):
        if self.start >= self.end:
            raise InvalidRangeError(self.start, self.end)

    @classmethod
    def dummy(cls, start: DateTime, end: DateTime) -> ScheduleEntry:
        """Build an on-call surgeon entry in a placeholder room."""
        return cls(Doctor(Specialization.SURGEON), start, end, Room("dummy"))

    @property
    def is_visit(self) -> bool:
        return self.patient is not None

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(start=self.start, end=self.end)

    def copy(self, **changes) -> ScheduleEntry:
        """Return a new entry with the given fields replaced."""
        return dataclasses.replace(self, **changes)

    def interferes_with(self, other: ScheduleEntry) -> bool:
        """Check if both entries occupy the same room at overlapping times."""
        return self.room == other.room and self.dates_interfere_with(other)

    def dates_interfere_with(self, other: ScheduleEntry) -> bool:
        return self.time_range.overlaps(other.time_range)

    def immerse_into(self, entries: Iterable[ScheduleEntry]) -> ImmersionResult:
        """
        Mix this visit into existing "on call" entries.

        E.g. when this entry is a visit 11:00-12:30 and entries are
        [on call 10:00-12:00, on call 12:00-14:00], the result holds
        [on call 10:00-11:00, visit 11:00-12:30, on call 12:30-14:00].

        All the entries must interfere with this entry and have the same
        doctor. None of them may be a visit and there can be no empty slots
        between them. Otherwise the entries are returned unmodified in a
        rejected result.

        Args:
            entries: "on call" entries overlapping this visit

        Returns:
            ImmersionResult with the visit and the remaining on-call
            fragments if all the conditions are fulfilled; the unmodified
            entries and the rejection reason otherwise
        """
        candidates = frozenset(entries)

        rejection = self._immersion_rejection(candidates)
        if rejection is not None:
            return ImmersionResult.rejected(candidates, rejection)

        total_range = squash_to_range(candidates)
        if total_range is None:
            return ImmersionResult.rejected(candidates, RejectionReason.NOT_CONTIGUOUS)
        if not total_range.covers(self.time_range):
            return ImmersionResult.rejected(candidates, RejectionReason.NOT_FULLY_INCLUDED)

        return ImmersionResult.immersed(unsquash(total_range, self))

    def convert_to_on_call_with_dates(self, start: DateTime, end: DateTime) -> Optional[ScheduleEntry]:
        """Return an on-call copy spanning start-end, or None if that span is empty."""
        if start >= end:
            return None
        return self.copy(start=start, end=end, patient=None)

    def trim_to(self, other: ScheduleEntry) -> Optional[ScheduleEntry]:
        """
        Clip this entry so it no longer overlaps ``other``.

        Returns None when nothing is left: ``other`` starts before and ends
        after this entry, this entry starts before and ends after ``other``
        (the rest would be split in two), or clipping would leave an empty
        range. An entry that does not need clipping is returned as is.

        Example: 09:00-17:00 trimmed to 16:00-18:00 -> 09:00-16:00
        """
        own, blocking = self.time_range, other.time_range

        if blocking.strictly_encloses(own) or own.strictly_encloses(blocking):
            return None
        if blocking.contains(self.end):
            return self._clipped(self.start, other.start)
        if blocking.contains(self.start):
            return self._clipped(other.end, self.end)
        return self

    def _clipped(self, start: DateTime, end: DateTime) -> Optional[ScheduleEntry]:
        if start >= end:
            return None
        return self.copy(start=start, end=end)

    def _immersion_rejection(self, entries: FrozenSet[ScheduleEntry]) -> Optional[RejectionReason]:
        if not self.is_visit:
            return RejectionReason.NOT_A_VISIT
        if any(not entry.interferes_with(self) or entry.doctor != self.doctor for entry in entries):
            return RejectionReason.UNRELATED_ENTRY
        if any(entry.is_visit for entry in entries):
            return RejectionReason.CONTAINS_VISIT
        return None

    def __str__(self) -> str:
        who = f"visit of {self.patient.name}" if self.patient else "on call"
        return f"{self.doctor.specialization.value} in {self.room.name}: {self.time_range} ({who})"


@dataclass(frozen=True)
class ScheduleSnapshot:
    """
    The schedule of one clinic at a point in time.

    Entries are held in a frozenset, so duplicates collapse by value and
    order carries no meaning.
    """
    clinic_id: UUID
    entries: FrozenSet[ScheduleEntry] = field(default_factory=frozenset)

    def __post_init__(self):
        if not isinstance(self.entries, frozenset):
            object.__setattr__(self, "entries", frozenset(self.entries))

    def visits(self) -> FrozenSet[ScheduleEntry]:
        return frozenset(entry for entry in self.entries if entry.is_visit)

    def on_call(self) -> FrozenSet[ScheduleEntry]:
        return frozenset(entry for entry in self.entries if not entry.is_visit)

    def in_room(self, room: Room) -> FrozenSet[ScheduleEntry]:
        """Return the entries scheduled in a room."""
        return frozenset(entry for entry in self.entries if entry.room == room)

    def replace_entries(
        self,
        removed: Iterable[ScheduleEntry],
        added: Iterable[ScheduleEntry],
    ) -> ScheduleSnapshot:
        """Return a new snapshot without ``removed`` and with ``added``."""
        return ScheduleSnapshot(
            clinic_id=self.clinic_id,
            entries=(self.entries - frozenset(removed)) | frozenset(added),
        )
