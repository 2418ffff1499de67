"""Access-control adapter resource exports."""

from resources.adapters.access_control.access_control_adapter import (
    HttpAccessControlAdapter,
)
from resources.adapters.access_control.adapter import (
    AccessControlAdapter,
    AccessControlError,
    AccessControlHealthResult,
    AccessEvent,
    AuthExpiredError,
    PersonAttribute,
    PersonDetail,
    RequestFailedError,
    ResponseFormatError,
    RosterMember,
    TransportError,
)
from resources.adapters.access_control.component import RESOURCE_COMPONENT_ID
from resources.adapters.access_control.config import (
    AccessControlAdapterSettings,
    resolve_access_control_settings,
)
from resources.adapters.access_control.credentials import (
    CredentialStore,
    CredentialStoreError,
    DotenvCredentialStore,
)

__all__ = [
    "AccessControlAdapter",
    "AccessControlAdapterSettings",
    "AccessControlError",
    "AccessControlHealthResult",
    "AccessEvent",
    "AuthExpiredError",
    "CredentialStore",
    "CredentialStoreError",
    "DotenvCredentialStore",
    "HttpAccessControlAdapter",
    "PersonAttribute",
    "PersonDetail",
    "RESOURCE_COMPONENT_ID",
    "RequestFailedError",
    "ResponseFormatError",
    "RosterMember",
    "TransportError",
    "resolve_access_control_settings",
]
