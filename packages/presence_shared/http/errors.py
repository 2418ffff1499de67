"""Typed failures raised by the shared outbound HTTP client."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class HttpClientError(Exception):
    """One outbound call that did not produce a usable response."""

    message: str
    method: str
    url: str
    retryable: bool = False

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class HttpRequestError(HttpClientError):
    """The request never got a response (DNS, connect, timeout, reset)."""

    cause: Exception | None = None


@dataclass(frozen=True)
class HttpStatusError(HttpClientError):
    """The server answered with a 4xx or 5xx status."""

    status_code: int = 0
    reason_phrase: str = ""
    response_body: str = ""

    @property
    def is_unauthorized(self) -> bool:
        """Return whether the server rejected the bearer credentials."""
        return self.status_code == 401


@dataclass(frozen=True)
class HttpJsonDecodeError(HttpClientError):
    """A 2xx response whose body is not JSON."""

    status_code: int = 0
    response_body: str = ""
    cause: Exception | None = None
