"""
In-memory snapshot repository.
"""

import logging
from typing import Dict, Iterable
from uuid import UUID

from ..domain.exceptions import SnapshotNotFoundError
from ..domain.models import ScheduleSnapshot

logger = logging.getLogger(__name__)


class InMemorySnapshotRepository:
    """
    Repository that keeps one snapshot per clinic in a dict.

    Snapshots are immutable, so handing out the stored instance is safe.
    """

    def __init__(self, snapshots: Iterable[ScheduleSnapshot] = ()):
        self._snapshots: Dict[UUID, ScheduleSnapshot] = {}
        for snapshot in snapshots:
            self.save(snapshot)

    def load(self, clinic_id: UUID) -> ScheduleSnapshot:
        try:
            return self._snapshots[clinic_id]
        except KeyError:
            raise SnapshotNotFoundError(clinic_id) from None

    def save(self, snapshot: ScheduleSnapshot) -> None:
        logger.debug(
            "Storing snapshot of clinic %s with %d entries",
            snapshot.clinic_id,
            len(snapshot.entries),
        )
        self._snapshots[snapshot.clinic_id] = snapshot
