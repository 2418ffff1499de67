"""Asynchronous JSON client over httpx with typed failure mapping."""

from __future__ import annotations

from typing import Any

import httpx

from .errors import HttpJsonDecodeError, HttpRequestError, HttpStatusError

_RETRYABLE_STATUSES = frozenset({408, 425, 429})


class AsyncHttpClient:
    """Own one ``httpx.AsyncClient`` and raise typed errors for failures."""

    def __init__(
        self,
        *,
        base_url: str = "",
        timeout_seconds: float | None = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            transport=transport,
        )

    async def aclose(self) -> None:
        """Close the transport unless it was injected by the caller."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> AsyncHttpClient:
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.aclose()

    async def request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """Send one request; non-2xx answers raise ``HttpStatusError``."""
        verb = method.upper()
        try:
            response = await self._client.request(verb, url, **kwargs)
        except httpx.RequestError as exc:
            target = _failed_url(exc, url)
            raise HttpRequestError(
                message=f"{verb} {target} got no response: {exc}",
                method=verb,
                url=target,
                retryable=True,
                cause=exc,
            ) from exc

        if response.is_error:
            status = response.status_code
            raise HttpStatusError(
                message=f"{verb} {response.request.url} answered {status} {response.reason_phrase}",
                method=verb,
                url=str(response.request.url),
                retryable=status >= 500 or status in _RETRYABLE_STATUSES,
                status_code=status,
                reason_phrase=response.reason_phrase,
                response_body=_body_text(response),
            )
        return response

    async def request_json(self, method: str, url: str, **kwargs: Any) -> Any:
        """Send one request and return its decoded JSON body."""
        response = await self.request(method, url, **kwargs)
        try:
            return response.json()
        except ValueError as exc:
            raise HttpJsonDecodeError(
                message=f"{response.request.method} {response.request.url} returned non-JSON body",
                method=response.request.method,
                url=str(response.request.url),
                status_code=response.status_code,
                response_body=_body_text(response),
                cause=exc,
            ) from exc


def _body_text(response: httpx.Response) -> str:
    try:
        return response.text
    except UnicodeDecodeError:
        return ""


def _failed_url(exc: httpx.RequestError, fallback: str) -> str:
    try:
        return str(exc.request.url)
    except RuntimeError:
        return fallback
