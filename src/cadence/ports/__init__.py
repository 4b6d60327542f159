"""Ports - interfaces/protocols for external dependencies."""

from .snapshot_repo import SnapshotRepository

__all__ = [
    "SnapshotRepository",
]
