"""Task-local structured logging context.

Fields live in a ``ContextVar`` so each asyncio task (one refresh cycle, one
HTTP request) carries its own values. All values are stored as strings.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Mapping

_FIELDS: ContextVar[dict[str, str]] = ContextVar("presence_log_fields", default={})


def get_context() -> dict[str, str]:
    return dict(_FIELDS.get())


def bind_context(**values: object) -> None:
    """Add fields to the current context; ``None`` values are skipped."""
    bound = {key: str(value) for key, value in values.items() if value is not None}
    if bound:
        _FIELDS.set({**_FIELDS.get(), **bound})


def clear_context(*keys: str) -> None:
    """Drop the named fields, or every field when none are named."""
    if keys:
        _FIELDS.set({k: v for k, v in _FIELDS.get().items() if k not in keys})
    else:
        _FIELDS.set({})


@contextmanager
def log_context(values: Mapping[str, object]) -> Iterator[None]:
    """Bind fields for one block and restore the previous set afterwards."""
    token = _FIELDS.set(dict(_FIELDS.get()))
    try:
        bind_context(**{str(key): value for key, value in values.items()})
        yield
    finally:
        _FIELDS.reset(token)
