"""Configuration tests for Presence Authority settings."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from packages.presence_shared.config import load_settings
from services.state.presence_authority.config import (
    PresenceAuthoritySettings,
    resolve_presence_authority_settings,
)


def test_defaults_match_reference_behavior() -> None:
    """Defaults cover the 14-day window, 256 batch and 5-minute ticker."""
    settings = PresenceAuthoritySettings()

    assert settings.lookback_days == 14
    assert settings.max_event_rows == 32000
    assert settings.detail_batch_size == 256
    assert settings.refresh_interval_seconds == 300.0
    assert settings.status_reset_policy == "reset"
    assert settings.zone_ids_query() == "1, 2"
    assert set(settings.groups.values()) == set(settings.enter_zones)


def test_unknown_reset_policy_is_rejected() -> None:
    """Only ``reset`` and ``retain`` are valid policies."""
    with pytest.raises(ValidationError):
        PresenceAuthoritySettings(status_reset_policy="forget")


def test_empty_groups_are_rejected() -> None:
    """At least one readable group must be configured."""
    with pytest.raises(ValidationError, match="groups"):
        PresenceAuthoritySettings(groups={})


def test_blank_field_names_are_rejected() -> None:
    """Attribute field names must be non-blank."""
    with pytest.raises(ValidationError):
        PresenceAuthoritySettings(location_field="  ")


def test_resolve_reads_service_namespace(tmp_path: Path) -> None:
    """Settings resolve from ``components.service.presence_authority``."""
    config_path = tmp_path / "presence.yaml"
    config_path.write_text(
        "components:\n"
        "  service:\n"
        "    presence_authority:\n"
        "      division_id: 80\n"
        "      zone_ids: [3, 4]\n"
        "      status_reset_policy: retain\n",
        encoding="utf-8",
    )

    settings = load_settings(config_path=config_path, env_file=None)
    resolved = resolve_presence_authority_settings(settings)

    assert resolved.division_id == 80
    assert resolved.zone_ids_query() == "3, 4"
    assert resolved.status_reset_policy == "retain"
