"""Transport-agnostic protocol for durable snapshot persistence."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict


class SnapshotStoreError(Exception):
    """Durable snapshot read or write failure."""


class SnapshotStoreHealthStatus(BaseModel):
    """Snapshot store readiness payload."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    ready: bool
    detail: str


class SnapshotStore(Protocol):
    """Protocol for whole-document snapshot persistence operations."""

    def health(self) -> SnapshotStoreHealthStatus:
        """Probe snapshot storage readiness."""

    def read_snapshot(self) -> dict[str, Any]:
        """Read the full stored document; empty when nothing was stored yet."""

    def write_snapshot(self, document: Mapping[str, Any]) -> datetime:
        """Replace the stored document atomically and return its write time."""

    def modified_at(self) -> datetime | None:
        """Return the last write time of the stored document, if any."""
