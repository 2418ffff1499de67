"""Component declaration for the access-control API adapter resource."""

from __future__ import annotations

from collections.abc import Mapping

from packages.presence_shared.config import PresenceSettings

RESOURCE_COMPONENT_ID = "adapter_access_control"


def build_component(
    *, settings: PresenceSettings, components: Mapping[str, object]
) -> object:
    """Build concrete runtime instance for this resource component."""
    del components
    from resources.adapters.access_control.access_control_adapter import (
        HttpAccessControlAdapter,
    )
    from resources.adapters.access_control.config import (
        resolve_access_control_settings,
    )
    from resources.adapters.access_control.credentials import DotenvCredentialStore

    adapter_settings = resolve_access_control_settings(settings)
    credential_store = None
    if adapter_settings.env_file is not None:
        credential_store = DotenvCredentialStore(
            env_file=adapter_settings.env_file,
            key=adapter_settings.token_env_key,
        )
    return HttpAccessControlAdapter(
        settings=adapter_settings,
        credential_store=credential_store,
    )
