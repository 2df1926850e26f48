"""
Tests for the ScheduleService orchestration layer.
"""

import logging
import uuid
from enum import Enum
from typing import Dict, List
from uuid import UUID

import pendulum
import pytest

from clinic_schedule.adapters.memory_repository import InMemorySnapshotRepository
from clinic_schedule.domain.exceptions import SnapshotNotFoundError
from clinic_schedule.domain.interval_algebra import RejectionReason
from clinic_schedule.domain.models import (
    Doctor,
    Patient,
    Room,
    ScheduleEntry,
    ScheduleSnapshot,
    Specialization,
)
from clinic_schedule.services.schedule_service import ScheduleService

CLINIC_ID = uuid.UUID("6f1c2a3e-8a7b-4c1d-9e2f-0a1b2c3d4e5f")


class OtherSpecialization(Enum):
    """Specialization outside the clinic's closed set, only used to tell doctors apart."""
    ANESTHESIOLOGIST = "ANESTHESIOLOGIST"


SURGEON = Doctor(Specialization.SURGEON)
OTHER_DOCTOR = Doctor(OtherSpecialization.ANESTHESIOLOGIST)


class StubSnapshotRepository:
    """Minimal stub matching SnapshotRepositoryProtocol."""

    def __init__(self, snapshot: ScheduleSnapshot):
        self._snapshots: Dict[UUID, ScheduleSnapshot] = {snapshot.clinic_id: snapshot}
        self.saved: List[ScheduleSnapshot] = []

    def load(self, clinic_id):
        return self._snapshots[clinic_id]

    def save(self, snapshot):
        self.saved.append(snapshot)
        self._snapshots[snapshot.clinic_id] = snapshot


def at(hour_minute: str) -> pendulum.DateTime:
    return pendulum.parse(f"2024-11-25 {hour_minute}", tz="Europe/Berlin")


def entry(start: str, end: str, room: str = "Room 1", patient: str | None = None, doctor: Doctor = SURGEON):
    return ScheduleEntry(doctor, at(start), at(end), Room(room), Patient(patient) if patient else None)


def _build_service(*entries: ScheduleEntry):
    repository = StubSnapshotRepository(ScheduleSnapshot(clinic_id=CLINIC_ID, entries=entries))
    return ScheduleService(repository), repository


class TestBookVisit:
    """Tests for ScheduleService.book_visit."""

    def test_booking_replaces_candidates_and_saves(self):
        """A successful immersion swaps the on-call block for its split."""
        other_room = entry("09:00", "17:00", room="Room 2")
        service, repository = _build_service(
            entry("10:00", "12:00"),
            entry("12:00", "14:00"),
            other_room,
        )
        booked = entry("11:00", "12:30", patient="Jan")

        result = service.book_visit(CLINIC_ID, booked)

        assert result.applied
        assert len(repository.saved) == 1
        assert repository.saved[0].entries == {
            entry("10:00", "11:00"),
            booked,
            entry("12:30", "14:00"),
            other_room,
        }

    def test_rejection_saves_nothing(self, caplog):
        """A rejected visit leaves the stored snapshot alone and is logged."""
        caplog.set_level(logging.INFO, logger="clinic_schedule.services.schedule_service")
        service, repository = _build_service(entry("10:00", "11:00"), entry("11:30", "14:00"))

        result = service.book_visit(CLINIC_ID, entry("10:30", "12:00", patient="Jan"))

        assert not result.applied
        assert result.rejection is RejectionReason.NOT_CONTIGUOUS
        assert repository.saved == []
        assert "rejected" in caplog.text

    def test_visit_outside_on_call_time(self):
        """Without any overlapping on-call time there is nothing to book into."""
        service, repository = _build_service(entry("10:00", "12:00"))

        result = service.book_visit(CLINIC_ID, entry("15:00", "16:00", patient="Jan"))

        assert not result.applied
        assert repository.saved == []


class TestSelectCandidates:
    """Tests for ScheduleService.select_candidates."""

    def test_only_overlapping_on_call_of_same_doctor_and_room(self):
        """Other rooms, doctors, visits and untouched blocks are skipped."""
        wanted = entry("10:00", "12:00")
        snapshot = ScheduleSnapshot(
            clinic_id=CLINIC_ID,
            entries={
                wanted,
                entry("12:00", "14:00"),
                entry("10:00", "12:00", room="Room 2"),
                entry("10:00", "12:00", doctor=OTHER_DOCTOR),
                entry("09:00", "10:30", patient="Anna"),
            },
        )

        candidates = ScheduleService.select_candidates(snapshot, entry("10:00", "11:00", patient="Jan"))

        assert candidates == {wanted}


class TestClearBlock:
    """Tests for ScheduleService.clear_block."""

    def test_trims_on_call_around_blocker(self):
        """On-call entries overlapping the blocker are clipped to it."""
        booked = entry("17:00", "18:00", patient="Anna")
        other_room = entry("09:00", "17:00", room="Room 2")
        service, repository = _build_service(
            entry("09:00", "12:00"),
            entry("12:00", "17:00"),
            booked,
            other_room,
        )

        updated = service.clear_block(CLINIC_ID, entry("11:00", "13:00"))

        assert updated.entries == {
            entry("09:00", "11:00"),
            entry("13:00", "17:00"),
            booked,
            other_room,
        }
        assert repository.saved == [updated]

    def test_consumed_entries_are_dropped(self):
        """On-call entries inside the blocker disappear."""
        service, _ = _build_service(entry("10:00", "12:00"), entry("12:00", "14:00"))

        updated = service.clear_block(CLINIC_ID, entry("09:00", "15:00"))

        assert updated.entries == frozenset()

    def test_blocker_inside_entry_leaves_both_sides(self):
        """A blocker in the middle of a block splits it in two."""
        blocker = entry("12:00", "13:00")
        service, _ = _build_service(entry("09:00", "17:00"))

        updated = service.clear_block(CLINIC_ID, blocker)

        assert updated.entries == {entry("09:00", "12:00"), entry("13:00", "17:00")}
        assert not any(remaining.interferes_with(blocker) for remaining in updated.entries)

    def test_blocker_sharing_end_clips_entry(self):
        """A blocker running to the end of a block keeps only the time before it."""
        blocker = entry("12:00", "17:00")
        service, _ = _build_service(entry("09:00", "17:00"))

        updated = service.clear_block(CLINIC_ID, blocker)

        assert updated.entries == {entry("09:00", "12:00")}
        assert not any(remaining.interferes_with(blocker) for remaining in updated.entries)

    def test_blocker_sharing_start_clips_entry(self):
        """A blocker starting with a block keeps only the time after it."""
        service, _ = _build_service(entry("09:00", "17:00"))

        updated = service.clear_block(CLINIC_ID, entry("09:00", "12:00"))

        assert updated.entries == {entry("12:00", "17:00")}

    def test_other_doctors_on_call_is_untouched(self):
        """Only the blocker's doctor loses on-call time."""
        colleague = entry("09:00", "17:00", doctor=OTHER_DOCTOR)
        service, _ = _build_service(entry("09:00", "17:00"), colleague)

        updated = service.clear_block(CLINIC_ID, entry("12:00", "13:00"))

        assert updated.entries == {entry("09:00", "12:00"), entry("13:00", "17:00"), colleague}


class TestInMemorySnapshotRepository:
    """Tests for the in-memory repository adapter."""

    def test_save_and_load(self):
        """Saved snapshots are returned by clinic id."""
        snapshot = ScheduleSnapshot(clinic_id=CLINIC_ID, entries={entry("10:00", "12:00")})
        repository = InMemorySnapshotRepository()

        repository.save(snapshot)

        assert repository.load(CLINIC_ID) is snapshot

    def test_missing_snapshot_raises(self):
        """Unknown clinics raise SnapshotNotFoundError."""
        repository = InMemorySnapshotRepository()

        with pytest.raises(SnapshotNotFoundError, match="No schedule snapshot"):
            repository.load(uuid.uuid4())

    def test_service_with_in_memory_repository(self):
        """The service works end to end against the in-memory adapter."""
        repository = InMemorySnapshotRepository(
            [ScheduleSnapshot(clinic_id=CLINIC_ID, entries={entry("10:00", "14:00")})]
        )
        service = ScheduleService(repository)

        service.book_visit(CLINIC_ID, entry("10:00", "12:00", patient="Jan"))

        assert service.snapshot(CLINIC_ID).entries == {
            entry("10:00", "12:00", patient="Jan"),
            entry("12:00", "14:00"),
        }
