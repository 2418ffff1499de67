"""Fallback mapping for exceptions no component classified."""

from __future__ import annotations

from . import codes
from .factories import internal_error
from .types import ErrorDetail


def exception_to_error(exc: Exception) -> ErrorDetail:
    """Report ``exc`` as an internal error tagged with its type name."""
    return internal_error(
        str(exc) or "unexpected exception",
        code=codes.UNEXPECTED_EXCEPTION,
        metadata={"exception_type": type(exc).__name__},
    )
