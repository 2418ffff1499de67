"""Component declaration for the durable snapshot store substrate."""

from __future__ import annotations

from collections.abc import Mapping

from packages.presence_shared.config import PresenceSettings

RESOURCE_COMPONENT_ID = "substrate_snapshot_store"


def build_component(
    *, settings: PresenceSettings, components: Mapping[str, object]
) -> object:
    """Build concrete runtime instance for this resource component."""
    del components
    from resources.substrates.snapshot_store.config import (
        resolve_snapshot_store_settings,
    )
    from resources.substrates.snapshot_store.file_substrate import (
        JsonFileSnapshotStore,
    )

    return JsonFileSnapshotStore(settings=resolve_snapshot_store_settings(settings))
