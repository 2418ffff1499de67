"""Pydantic settings for the durable snapshot store substrate."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator

from packages.presence_shared.config import PresenceSettings, resolve_component_settings
from resources.substrates.snapshot_store.component import RESOURCE_COMPONENT_ID


class SnapshotStoreSettings(BaseModel):
    """Snapshot store runtime settings for the person-record blob."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    path: str = "./var/presence/snapshot.json"
    temp_prefix: str = "snapshottmp"
    fsync_writes: bool = True
    indent: int | None = 2

    @field_validator("path")
    @classmethod
    def _validate_path(cls, value: str) -> str:
        """Require a non-empty snapshot file path."""
        normalized = value.strip()
        if normalized == "":
            raise ValueError("path is required")
        return normalized

    @field_validator("temp_prefix")
    @classmethod
    def _validate_temp_prefix(cls, value: str) -> str:
        """Require a non-empty temporary filename prefix."""
        normalized = value.strip()
        if normalized == "":
            raise ValueError("temp_prefix is required")
        return normalized

    def snapshot_path(self) -> Path:
        """Return the expanded absolute snapshot file path."""
        return Path(self.path).expanduser().resolve()


def resolve_snapshot_store_settings(
    settings: PresenceSettings,
) -> SnapshotStoreSettings:
    """Resolve snapshot store settings from ``substrate.snapshot_store``."""
    return resolve_component_settings(
        settings=settings,
        component_id=RESOURCE_COMPONENT_ID,
        model=SnapshotStoreSettings,
    )
