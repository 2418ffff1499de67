"""Presence Authority Service native package exports."""

from services.state.presence_authority.component import SERVICE_COMPONENT_ID
from services.state.presence_authority.config import (
    PresenceAuthoritySettings,
    resolve_presence_authority_settings,
)
from services.state.presence_authority.domain import (
    GroupRecords,
    HealthStatus,
    LastEvent,
    PersonRecord,
    PresenceStatus,
    RefreshReport,
    UnknownGroupError,
    ZoneClassification,
)
from services.state.presence_authority.implementation import (
    DefaultPresenceAuthorityService,
)
from services.state.presence_authority.service import (
    PresenceAuthorityService,
    build_presence_authority_service,
)
from services.state.presence_authority.status import (
    MissingAttributeError,
    derive_status,
    fold_last_events,
)

__all__ = [
    "SERVICE_COMPONENT_ID",
    "DefaultPresenceAuthorityService",
    "GroupRecords",
    "HealthStatus",
    "LastEvent",
    "MissingAttributeError",
    "PersonRecord",
    "PresenceAuthorityService",
    "PresenceAuthoritySettings",
    "PresenceStatus",
    "RefreshReport",
    "UnknownGroupError",
    "ZoneClassification",
    "build_presence_authority_service",
    "derive_status",
    "fold_last_events",
    "resolve_presence_authority_settings",
]
