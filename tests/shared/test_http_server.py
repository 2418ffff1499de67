"""Unit tests for shared FastAPI/uvicorn HTTP server helpers."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from packages.presence_shared.http import NO_CACHE_HEADERS, create_app, run_app


def test_create_app_returns_fastapi_app() -> None:
    """create_app should return a FastAPI instance with configured metadata."""
    app = create_app(title="presence-test", version="1.2.3")
    assert app.title == "presence-test"
    assert app.version == "1.2.3"


def test_create_app_runs_lifespan() -> None:
    """The lifespan passed to create_app wraps the client session."""
    events: list[str] = []

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        events.append("start")
        yield
        events.append("stop")

    app = create_app(lifespan=lifespan)
    with TestClient(app):
        assert events == ["start"]

    assert events == ["start", "stop"]


def test_no_cache_headers_disable_caching() -> None:
    """No-cache headers cover HTTP/1.1 and legacy proxies."""
    assert NO_CACHE_HEADERS["Cache-Control"] == "no-cache, no-store, must-revalidate"
    assert NO_CACHE_HEADERS["Pragma"] == "no-cache"
    assert NO_CACHE_HEADERS["Expires"] == "0"


def test_run_app_forwards_arguments_to_uvicorn(monkeypatch: pytest.MonkeyPatch) -> None:
    """run_app should delegate execution to uvicorn.run with provided options."""
    app = create_app()
    called: dict[str, Any] = {}

    def _fake_run(target: Any, **kwargs: Any) -> None:
        called["target"] = target
        called["kwargs"] = kwargs

    monkeypatch.setattr("packages.presence_shared.http.server.uvicorn.run", _fake_run)

    run_app(app, host="0.0.0.0", port=9999, log_level="debug")

    assert called["target"] is app
    assert called["kwargs"] == {
        "host": "0.0.0.0",
        "port": 9999,
        "log_level": "debug",
    }
