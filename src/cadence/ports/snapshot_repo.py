"""Snapshot repository interface."""

from typing import Protocol

from cadence.core.snapshot import Snapshot


class SnapshotRepository(Protocol):
    """Interface for loading tracker data from any backend."""

    def load(self) -> Snapshot:
        """Load activities, logs, vacation days and config snapshots."""
        ...
