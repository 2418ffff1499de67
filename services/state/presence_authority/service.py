"""Authoritative in-process Python API for Presence Authority Service."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from packages.presence_shared.config import PresenceSettings
from resources.adapters.access_control import AccessControlAdapter
from resources.substrates.snapshot_store import SnapshotStore
from services.state.presence_authority.domain import (
    GroupRecords,
    HealthStatus,
    RefreshReport,
)


class PresenceAuthorityService(ABC):
    """Public API for roster presence reconciliation and reads."""

    @abstractmethod
    async def start(self) -> None:
        """Load the durable snapshot, run the first refresh and start the ticker."""

    @abstractmethod
    async def stop(self) -> None:
        """Stop the ticker and wait for any in-flight refresh to end."""

    @abstractmethod
    async def refresh(self) -> RefreshReport | None:
        """Run one refresh cycle now; ``None`` when skipped or failed."""

    @abstractmethod
    def trigger_refresh(self) -> bool:
        """Start a background refresh unless one is already running."""

    @abstractmethod
    async def get_records(self, *, group_key: str) -> GroupRecords:
        """Return one group's records ordered by location."""

    @abstractmethod
    def get_last_update_time(self) -> datetime | None:
        """Return the time of the last persisted snapshot, if any."""

    @abstractmethod
    def health(self) -> HealthStatus:
        """Return service and snapshot store readiness."""


def build_presence_authority_service(
    *,
    settings: PresenceSettings,
    adapter: AccessControlAdapter,
    store: SnapshotStore,
) -> PresenceAuthorityService:
    """Build default Presence Authority implementation from typed settings."""
    from services.state.presence_authority.config import (
        resolve_presence_authority_settings,
    )
    from services.state.presence_authority.implementation import (
        DefaultPresenceAuthorityService,
    )

    return DefaultPresenceAuthorityService(
        settings=resolve_presence_authority_settings(settings),
        adapter=adapter,
        store=store,
    )
