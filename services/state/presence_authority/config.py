"""Pydantic settings for Presence Authority Service behavior."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from packages.presence_shared.config import PresenceSettings, resolve_component_settings
from services.state.presence_authority.component import SERVICE_COMPONENT_ID

StatusResetPolicy = Literal["reset", "retain"]


class PresenceAuthoritySettings(BaseModel):
    """Presence Authority Service runtime behavior settings."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    division_id: int = Field(default=5, gt=0)
    group_field: str = "Общежитие"
    location_field: str = "№ комнаты"
    groups: dict[str, str] = Field(
        default_factory=lambda: {
            "obch1": "Общежитие №1",
            "obch2": "Общежитие №2",
        }
    )
    zone_ids: tuple[int, ...] = (1, 2)
    enter_zones: frozenset[str] = frozenset({"Общежитие №1", "Общежитие №2"})
    exit_zones: frozenset[str] = frozenset({"Неконтролируемая территория"})
    lookback_days: int = Field(default=14, ge=0)
    max_event_rows: int = Field(default=32000, gt=0)
    detail_batch_size: int = Field(default=256, gt=0)
    refresh_interval_seconds: float = Field(default=300.0, gt=0)
    status_reset_policy: StatusResetPolicy = "reset"

    @field_validator("group_field", "location_field", mode="before")
    @classmethod
    def _validate_field_name(cls, value: object) -> object:
        """Reject blank attribute names used for location extraction."""
        if isinstance(value, str):
            normalized = value.strip()
            if normalized == "":
                raise ValueError("attribute field names must be non-empty")
            return normalized
        return value

    @field_validator("groups")
    @classmethod
    def _validate_groups(cls, value: dict[str, str]) -> dict[str, str]:
        """Require at least one group with non-blank key and label."""
        if not value:
            raise ValueError("groups must contain at least one entry")
        for key, label in value.items():
            if key.strip() == "" or label.strip() == "":
                raise ValueError("group keys and labels must be non-empty")
        return value

    @field_validator("zone_ids")
    @classmethod
    def _validate_zone_ids(cls, value: tuple[int, ...]) -> tuple[int, ...]:
        """Require at least one monitored zone id."""
        if not value:
            raise ValueError("zone_ids must contain at least one zone id")
        return value

    def zone_ids_query(self) -> str:
        """Render zone ids in the comma-separated form the events endpoint takes."""
        return ", ".join(str(zone_id) for zone_id in self.zone_ids)


def resolve_presence_authority_settings(
    settings: PresenceSettings,
) -> PresenceAuthoritySettings:
    """Resolve service settings from ``service.presence_authority``."""
    return resolve_component_settings(
        settings=settings,
        component_id=SERVICE_COMPONENT_ID,
        model=PresenceAuthoritySettings,
    )
