"""Durable snapshot store resource exports."""

from resources.substrates.snapshot_store.component import RESOURCE_COMPONENT_ID
from resources.substrates.snapshot_store.config import (
    SnapshotStoreSettings,
    resolve_snapshot_store_settings,
)
from resources.substrates.snapshot_store.file_substrate import JsonFileSnapshotStore
from resources.substrates.snapshot_store.substrate import (
    SnapshotStore,
    SnapshotStoreError,
    SnapshotStoreHealthStatus,
)

__all__ = [
    "JsonFileSnapshotStore",
    "RESOURCE_COMPONENT_ID",
    "SnapshotStore",
    "SnapshotStoreError",
    "SnapshotStoreHealthStatus",
    "SnapshotStoreSettings",
    "resolve_snapshot_store_settings",
]
