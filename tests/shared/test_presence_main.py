"""Tests for presence process composition and HTTP lifespan wiring."""

from __future__ import annotations

from pathlib import Path

from fastapi.testclient import TestClient

from packages.presence_core.main import build_app, instantiate_components
from packages.presence_shared.config import load_settings
from resources.adapters.access_control import HttpAccessControlAdapter
from resources.substrates.snapshot_store import JsonFileSnapshotStore
from services.state.presence_authority import DefaultPresenceAuthorityService
from services.state.presence_authority.domain import HealthStatus


class _LifecycleService:
    """Service double recording lifespan calls."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    async def start(self) -> None:
        self.calls.append("start")

    async def stop(self) -> None:
        self.calls.append("stop")

    def health(self) -> HealthStatus:
        return HealthStatus(
            service_ready=True,
            substrate_ready=True,
            refreshing=False,
            record_count=0,
            last_update=None,
            detail="ok",
        )


class _ClosableAdapter:
    def __init__(self) -> None:
        self.closed = False

    async def aclose(self) -> None:
        self.closed = True


def test_instantiate_components_builds_store_adapter_and_service(
    tmp_path: Path,
) -> None:
    """Components are built in dependency order from one settings object."""
    settings = load_settings(
        cli_params={
            "components": {
                "adapter": {
                    "access_control": {
                        "base_url": "http://access.local",
                        "login": "operator",
                        "password": "secret",
                        "env_file": str(tmp_path / ".env"),
                    }
                },
                "substrate": {
                    "snapshot_store": {"path": str(tmp_path / "snapshot.json")}
                },
            }
        },
        config_path=tmp_path / "presence.yaml",
        env_file=None,
    )

    components = instantiate_components(settings)

    assert list(components) == [
        "substrate_snapshot_store",
        "adapter_access_control",
        "service_presence_authority",
    ]
    assert isinstance(components["substrate_snapshot_store"], JsonFileSnapshotStore)
    assert isinstance(components["adapter_access_control"], HttpAccessControlAdapter)
    assert isinstance(
        components["service_presence_authority"], DefaultPresenceAuthorityService
    )


def test_build_app_starts_and_stops_service_with_lifespan() -> None:
    """The HTTP lifespan owns service start/stop and adapter shutdown."""
    service = _LifecycleService()
    adapter = _ClosableAdapter()
    app = build_app(
        components={
            "service_presence_authority": service,
            "adapter_access_control": adapter,
        }
    )

    with TestClient(app) as client:
        assert service.calls == ["start"]
        response = client.get("/api/health")
        assert response.status_code == 200

    assert service.calls == ["start", "stop"]
    assert adapter.closed is True
