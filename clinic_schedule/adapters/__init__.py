"""
Adapters layer - Storage integrations.
"""

from .memory_repository import InMemorySnapshotRepository

__all__ = ["InMemorySnapshotRepository"]
