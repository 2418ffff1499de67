"""Constructors for the three error categories."""

from __future__ import annotations

from typing import Mapping

from . import codes
from .types import ErrorCategory, ErrorDetail


def validation_error(
    message: str,
    *,
    code: str = codes.INVALID_ARGUMENT,
    metadata: Mapping[str, str] | None = None,
) -> ErrorDetail:
    """Caller sent something the service cannot serve; never retryable."""
    return ErrorDetail(code, message, ErrorCategory.VALIDATION, False, dict(metadata or {}))


def dependency_error(
    message: str,
    *,
    code: str = codes.UPSTREAM_UNAVAILABLE,
    retryable: bool = True,
    metadata: Mapping[str, str] | None = None,
) -> ErrorDetail:
    """The backend or the snapshot file failed underneath the service."""
    return ErrorDetail(code, message, ErrorCategory.DEPENDENCY, retryable, dict(metadata or {}))


def internal_error(
    message: str,
    *,
    code: str = codes.INTERNAL_ERROR,
    metadata: Mapping[str, str] | None = None,
) -> ErrorDetail:
    return ErrorDetail(code, message, ErrorCategory.INTERNAL, False, dict(metadata or {}))
