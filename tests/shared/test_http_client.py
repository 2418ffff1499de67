"""Unit tests for the shared asynchronous HTTP client wrapper."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from packages.presence_shared.http import (
    AsyncHttpClient,
    HttpJsonDecodeError,
    HttpRequestError,
    HttpStatusError,
)


def _client(handler) -> AsyncHttpClient:
    return AsyncHttpClient(
        base_url="https://acs.test",
        transport=httpx.MockTransport(handler),
    )


def _call(handler, method: str, path: str, **kwargs) -> object:
    async def _run() -> object:
        async with _client(handler) as client:
            return await client.request_json(method, path, **kwargs)

    return asyncio.run(_run())


def test_request_json_decodes_payload_and_forwards_params() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"id": 1}], request=request)

    result = _call(handler, "get", "/api/users", params={"division": "5"})

    assert result == [{"id": 1}]
    assert seen[0].method == "GET"
    assert seen[0].url.params["division"] == "5"


def test_server_errors_are_retryable_status_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="maintenance", request=request)

    with pytest.raises(HttpStatusError) as exc_info:
        _call(handler, "GET", "/api/server_state")

    error = exc_info.value
    assert error.method == "GET"
    assert error.status_code == 503
    assert error.retryable is True
    assert error.is_unauthorized is False
    assert error.response_body == "maintenance"


def test_unauthorized_is_flagged_and_not_retryable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"error": "expired"}, request=request)

    with pytest.raises(HttpStatusError) as exc_info:
        _call(handler, "GET", "/api/users")

    assert exc_info.value.is_unauthorized is True
    assert exc_info.value.retryable is False


def test_transport_failure_maps_to_typed_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection failed", request=request)

    with pytest.raises(HttpRequestError) as exc_info:
        _call(handler, "GET", "/api/server_state")

    error = exc_info.value
    assert error.url == "https://acs.test/api/server_state"
    assert error.retryable is True
    assert isinstance(error.cause, httpx.ConnectError)


def test_non_json_success_maps_to_decode_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>login</html>", request=request)

    with pytest.raises(HttpJsonDecodeError) as exc_info:
        _call(handler, "POST", "/api/auth", content="{}")

    error = exc_info.value
    assert error.status_code == 200
    assert error.method == "POST"
    assert error.response_body == "<html>login</html>"


def test_injected_client_is_not_closed() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={}, request=request)

    inner = httpx.AsyncClient(transport=httpx.MockTransport(handler))

    async def _run() -> bool:
        async with AsyncHttpClient(client=inner):
            pass
        closed = inner.is_closed
        await inner.aclose()
        return closed

    assert asyncio.run(_run()) is False
