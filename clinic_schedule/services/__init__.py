"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .schedule_service import ScheduleService, SnapshotRepositoryProtocol

__all__ = ["ScheduleService", "SnapshotRepositoryProtocol"]
