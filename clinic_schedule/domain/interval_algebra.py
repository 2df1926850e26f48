"""
Set algebra over schedule entries.

``squash_to_range`` merges a gap-free run of entries into one range and
``unsquash`` splits such a range back around a visit. Both are pure
functions: they never modify the entries they are given.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import reduce
from typing import TYPE_CHECKING, FrozenSet, Iterable, Optional

from .time_range import TimeRange

if TYPE_CHECKING:
    from .models import ScheduleEntry


class RejectionReason(str, Enum):
    """Why a visit could not be immersed into a set of on-call entries."""
    NOT_A_VISIT = "not_a_visit"
    UNRELATED_ENTRY = "unrelated_entry"
    CONTAINS_VISIT = "contains_visit"
    NOT_CONTIGUOUS = "not_contiguous"
    NOT_FULLY_INCLUDED = "not_fully_included"

    def describe(self) -> str:
        """Human readable explanation used by the CLI and the logs."""
        return _REJECTION_MESSAGES[self]


_REJECTION_MESSAGES = {
    RejectionReason.NOT_A_VISIT: "entry has no patient, only visits can be immersed",
    RejectionReason.UNRELATED_ENTRY: "an entry is in another room, does not overlap or belongs to another doctor",
    RejectionReason.CONTAINS_VISIT: "an entry is already a visit",
    RejectionReason.NOT_CONTIGUOUS: "entries do not form one gap-free block",
    RejectionReason.NOT_FULLY_INCLUDED: "visit sticks out of the on-call block",
}


@dataclass(frozen=True)
class ImmersionResult:
    """
    Outcome of immersing a visit into on-call entries.

    ``applied`` tells an immersion apart from a rejection even when both
    carry an equal set of entries. A rejection always carries the input
    entries unchanged.
    """
    entries: FrozenSet["ScheduleEntry"]
    applied: bool
    rejection: Optional[RejectionReason] = None

    @classmethod
    def immersed(cls, entries: Iterable["ScheduleEntry"]) -> "ImmersionResult":
        return cls(entries=frozenset(entries), applied=True)

    @classmethod
    def rejected(cls, entries: Iterable["ScheduleEntry"], reason: RejectionReason) -> "ImmersionResult":
        return cls(entries=frozenset(entries), applied=False, rejection=reason)


def _merge(total: Optional[TimeRange], current: TimeRange) -> Optional[TimeRange]:
    if total is None or not total.can_be_merged_with(current):
        return None
    return TimeRange(start=total.start, end=current.end)


def squash_to_range(entries: Iterable["ScheduleEntry"]) -> Optional[TimeRange]:
    """
    Merge entries into one from-to block.

    Entries are sorted by start and folded pairwise; each must start exactly
    where the previous one ended. Any gap or overlap, as well as an empty
    input, yields ``None``.

    Example: [10:00-12:00, 12:00-14:00] -> 10:00-14:00
    """
    ranges = [entry.time_range for entry in sorted(entries, key=lambda e: e.start)]
    if not ranges:
        return None
    return reduce(_merge, ranges[1:], ranges[0])


def unsquash(total_range: TimeRange, visit: "ScheduleEntry") -> FrozenSet["ScheduleEntry"]:
    """
    Divide a range into the visit and the on-call time left around it.

    Usually that is an on-call fragment before the visit, the visit and an
    on-call fragment after it. A visit flush with either edge of the range
    leaves a single fragment, and one filling the range leaves none.
    """
    fragments = (
        visit.convert_to_on_call_with_dates(total_range.start, visit.start),
        visit.convert_to_on_call_with_dates(visit.end, total_range.end),
    )
    return frozenset([visit, *(fragment for fragment in fragments if fragment is not None)])
