"""Public shared HTTP API for presence components."""

from .client import AsyncHttpClient
from .errors import (
    HttpClientError,
    HttpJsonDecodeError,
    HttpRequestError,
    HttpStatusError,
)
from .server import NO_CACHE_HEADERS, create_app, run_app

__all__ = [
    "AsyncHttpClient",
    "HttpClientError",
    "HttpJsonDecodeError",
    "HttpRequestError",
    "HttpStatusError",
    "NO_CACHE_HEADERS",
    "create_app",
    "run_app",
]
