"""Component declaration for Presence Authority Service."""

from __future__ import annotations

from collections.abc import Mapping

from packages.presence_shared.config import PresenceSettings

SERVICE_COMPONENT_ID = "service_presence_authority"


def build_component(
    *, settings: PresenceSettings, components: Mapping[str, object]
) -> object:
    """Build concrete runtime instance for this service component."""
    from services.state.presence_authority.service import (
        build_presence_authority_service,
    )

    return build_presence_authority_service(
        settings=settings,
        adapter=components["adapter_access_control"],
        store=components["substrate_snapshot_store"],
    )
