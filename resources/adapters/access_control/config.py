"""Pydantic settings for the access-control API adapter resource."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from packages.presence_shared.config import PresenceSettings, resolve_component_settings
from resources.adapters.access_control.component import RESOURCE_COMPONENT_ID

TOKEN_ENV_KEY = "PRESENCE_COMPONENTS__ADAPTER__ACCESS_CONTROL__TOKEN"


class AccessControlAdapterSettings(BaseModel):
    """Runtime settings for the access-control backend HTTP API."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    base_url: str
    login: str
    password: str
    token: str = ""
    timeout_seconds: float | None = Field(default=60.0, gt=0)
    server_state_path: str = "/api/sysserver/getServerState"
    auth_path: str = "/api/system/auth"
    roster_path: str = "/api/users/staff/fullList"
    person_detail_path: str = "/api/users/staff/{person_id}"
    events_path: str = "/api/accessReports/events"
    env_file: str | None = None
    token_env_key: str = TOKEN_ENV_KEY

    @field_validator("base_url", "login", "password", mode="before")
    @classmethod
    def _require_credential(cls, value: object) -> object:
        """Reject blank connection credentials; they are required at startup."""
        if value is None:
            raise ValueError("access-control credentials are required")
        if isinstance(value, str):
            normalized = value.strip()
            if normalized == "":
                raise ValueError("access-control credentials must be non-empty")
            return normalized
        return value

    @field_validator("token", mode="before")
    @classmethod
    def _normalize_token(cls, value: object) -> object:
        """Treat a missing token as empty; it is obtained on first 401."""
        if value is None:
            return ""
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("person_detail_path")
    @classmethod
    def _validate_person_detail_path(cls, value: str) -> str:
        """Require the ``{person_id}`` placeholder in the detail path."""
        if "{person_id}" not in value:
            raise ValueError("person_detail_path must contain '{person_id}'")
        return value


def resolve_access_control_settings(
    settings: PresenceSettings,
) -> AccessControlAdapterSettings:
    """Resolve adapter settings from ``adapter.access_control``.

    Without an explicit ``env_file`` the rotated token is persisted to the
    same ``.env`` file the settings were loaded from.
    """
    resolved = resolve_component_settings(
        settings=settings,
        component_id=RESOURCE_COMPONENT_ID,
        model=AccessControlAdapterSettings,
    )
    if resolved.env_file is None and settings.env_file_path is not None:
        return resolved.model_copy(update={"env_file": str(settings.env_file_path)})
    return resolved
