"""
Application services for booking visits into a clinic schedule.

The service loads a snapshot through a repository adapter, picks the
on-call entries a request applies to and delegates the actual interval
work to the domain-level ``ScheduleEntry`` operations. This keeps the CLI
thin and improves testability by allowing storage to be swapped via a
simple protocol.
"""

from __future__ import annotations

import logging
from typing import FrozenSet, List, Protocol
from uuid import UUID

from ..domain.interval_algebra import ImmersionResult
from ..domain.models import ScheduleEntry, ScheduleSnapshot

logger = logging.getLogger(__name__)


class SnapshotRepositoryProtocol(Protocol):
    """Protocol describing the snapshot storage needed by the service."""

    def load(self, clinic_id: UUID) -> ScheduleSnapshot:
        """Return the current snapshot of a clinic."""

    def save(self, snapshot: ScheduleSnapshot) -> None:
        """Store a snapshot, replacing the previous one of the same clinic."""


class ScheduleService:
    """
    Orchestrates snapshot retrieval, candidate selection and immersion.

    Dependency inversion toward a protocol makes it easy to plug in any
    storage, or the in-memory repository in tests and the CLI.
    """

    def __init__(self, repository: SnapshotRepositoryProtocol) -> None:
        self._repository = repository

    def snapshot(self, clinic_id: UUID) -> ScheduleSnapshot:
        """Return the current snapshot of a clinic."""
        return self._repository.load(clinic_id)

    def book_visit(self, clinic_id: UUID, visit: ScheduleEntry) -> ImmersionResult:
        """
        Immerse a visit into the on-call time of its doctor and room.

        The snapshot is only saved when the immersion was applied.
        """
        snapshot = self._repository.load(clinic_id)
        candidates = self.select_candidates(snapshot, visit)

        result = visit.immerse_into(candidates)
        if not result.applied:
            logger.info(
                "Visit %s rejected for clinic %s: %s",
                visit,
                clinic_id,
                result.rejection.describe(),
            )
            return result

        self._repository.save(snapshot.replace_entries(removed=candidates, added=result.entries))
        logger.info("Booked %s for clinic %s", visit, clinic_id)
        return result

    def clear_block(self, clinic_id: UUID, blocker: ScheduleEntry) -> ScheduleSnapshot:
        """
        Remove the blocker's time from the on-call entries of its doctor and room.

        Each overlapping entry keeps the on-call time before and after the
        blocker, so a blocker in the middle of a block leaves two fragments.
        Entries consumed completely are dropped. Visits and other doctors'
        entries are left untouched.
        """
        snapshot = self._repository.load(clinic_id)
        affected = frozenset(
            entry for entry in snapshot.on_call()
            if entry.doctor == blocker.doctor and entry.interferes_with(blocker)
        )

        remainders = []
        for entry in affected:
            pieces = self._remainders(entry, blocker)
            logger.debug("Trimmed %s to %s", entry, [str(piece) for piece in pieces])
            remainders.extend(pieces)

        updated = snapshot.replace_entries(removed=affected, added=remainders)
        self._repository.save(updated)
        return updated

    @staticmethod
    def _remainders(entry: ScheduleEntry, blocker: ScheduleEntry) -> List[ScheduleEntry]:
        # trim_to consumes an enclosing entry and ignores a blocker sharing its end
        if entry.time_range.strictly_encloses(blocker.time_range) or entry.end == blocker.end:
            pieces = (
                entry.convert_to_on_call_with_dates(entry.start, blocker.start),
                entry.convert_to_on_call_with_dates(blocker.end, entry.end),
            )
        else:
            pieces = (entry.trim_to(blocker),)
        return [piece for piece in pieces if piece is not None]

    @staticmethod
    def select_candidates(snapshot: ScheduleSnapshot, visit: ScheduleEntry) -> FrozenSet[ScheduleEntry]:
        """
        Pick the on-call entries a visit may be immersed into.

        Those are the entries of the visit's doctor that share its room and
        overlap its time range.
        """
        return frozenset(
            entry for entry in snapshot.on_call()
            if entry.doctor == visit.doctor and entry.interferes_with(visit)
        )
