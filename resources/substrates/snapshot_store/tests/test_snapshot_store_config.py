"""Configuration tests for snapshot store settings."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from packages.presence_shared.config import load_settings
from resources.substrates.snapshot_store.config import (
    SnapshotStoreSettings,
    resolve_snapshot_store_settings,
)


def test_path_is_required() -> None:
    """Blank snapshot path should fail validation."""
    with pytest.raises(ValidationError, match="path is required"):
        SnapshotStoreSettings(path="  ")


def test_unknown_keys_are_rejected() -> None:
    """Component settings forbid unknown keys to catch typos early."""
    with pytest.raises(ValidationError):
        SnapshotStoreSettings.model_validate({"pth": "./x.json"})


def test_resolve_reads_substrate_namespace(tmp_path: Path) -> None:
    """Settings should resolve from ``components.substrate.snapshot_store``."""
    settings = load_settings(
        cli_params={
            "components": {
                "substrate": {"snapshot_store": {"path": str(tmp_path / "s.json")}}
            }
        },
        config_path=tmp_path / "missing.yaml",
        env_file=None,
    )

    resolved = resolve_snapshot_store_settings(settings)

    assert resolved.snapshot_path() == (tmp_path / "s.json").resolve()
    assert resolved.fsync_writes is True
