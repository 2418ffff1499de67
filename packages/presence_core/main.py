"""Process entrypoint for presence service startup orchestration."""

from __future__ import annotations

import os
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import APIRouter, FastAPI

from packages.presence_shared.config import PresenceSettings, load_settings
from packages.presence_shared.http import create_app, run_app
from packages.presence_shared.logging import configure_logging, get_logger
from resources.adapters.access_control import component as access_control_component
from resources.substrates.snapshot_store import component as snapshot_store_component
from services.state.presence_authority import component as presence_component
from services.state.presence_authority.api import register_routes

_LOGGER = get_logger(__name__)

_COMPONENT_MODULES = (
    snapshot_store_component,
    access_control_component,
    presence_component,
)


def _component_id(module: object) -> str:
    """Return the declared component id of one component module."""
    for name in ("RESOURCE_COMPONENT_ID", "SERVICE_COMPONENT_ID"):
        value = getattr(module, name, None)
        if isinstance(value, str):
            return value
    raise RuntimeError(f"component module '{module!r}' declares no component id")


def instantiate_components(settings: PresenceSettings) -> dict[str, object]:
    """Instantiate resources first, then the service that depends on them."""
    built: dict[str, object] = {}
    for module in _COMPONENT_MODULES:
        component_id = _component_id(module)
        built[component_id] = module.build_component(
            settings=settings, components=built
        )
        _LOGGER.info("component instantiated: %s", component_id)
    return built


def build_app(*, components: Mapping[str, object]) -> FastAPI:
    """Create the HTTP app whose lifespan starts and stops the service."""
    service = components[presence_component.SERVICE_COMPONENT_ID]
    adapter = components[access_control_component.RESOURCE_COMPONENT_ID]

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        await service.start()
        _LOGGER.info("presence service started")
        try:
            yield
        finally:
            await service.stop()
            await adapter.aclose()
            _LOGGER.info("presence service stopped")

    app = create_app(title="Presence API", lifespan=lifespan)
    router = APIRouter()
    register_routes(router=router, service=service)
    app.include_router(router)
    return app


def main() -> None:
    """Load settings, build components and serve HTTP until shutdown."""
    config_path = os.getenv("PRESENCE_CONFIG_FILE", "").strip()
    settings = load_settings(config_path=Path(config_path) if config_path else None)
    configure_logging(
        level=settings.logging.level,
        json_output=settings.logging.json_output,
        service=settings.logging.service,
        environment=settings.logging.environment,
    )

    components = instantiate_components(settings)
    app = build_app(components=components)
    _LOGGER.info(
        "presence HTTP runtime starting on %s:%d",
        settings.http.host,
        settings.http.port,
    )
    run_app(
        app,
        host=settings.http.host,
        port=settings.http.port,
        log_level=settings.http.log_level,
    )


if __name__ == "__main__":
    main()
