"""
Durable snapshot storage.
"""

from .snapshot_store import (
    BaseSnapshotStore,
    InMemorySnapshotStore,
    JsonFileSnapshotStore,
    SqlSnapshotStore,
    build_snapshot_store,
)

__all__ = [
    "BaseSnapshotStore",
    "InMemorySnapshotStore",
    "JsonFileSnapshotStore",
    "SqlSnapshotStore",
    "build_snapshot_store",
]
