"""Uniform start/finish logging for component entry points.

``public_api_logged`` wraps a sync or async callable. Entry is logged at DEBUG;
the finish line is INFO on success and WARNING on failure, and carries the
outcome, elapsed milliseconds and any raised error as context fields.
"""

from __future__ import annotations

import inspect
import logging
from functools import wraps
from time import perf_counter
from typing import Any, Callable, Mapping

from . import fields
from .context import log_context


class _ApiCall:
    """Timing and context fields for one wrapped call."""

    def __init__(
        self,
        logger: logging.Logger,
        base: Mapping[str, object],
        kwargs: Mapping[str, Any],
        id_fields: tuple[str, ...],
    ) -> None:
        self._logger = logger
        self._fields = dict(base)
        for name in id_fields:
            value = kwargs.get(name)
            if value is not None and value != "":
                self._fields[name] = value
        with log_context(
            {**self._fields, fields.EVENT: fields.PUBLIC_API_INVOCATION_EVENT}
        ):
            logger.debug("Public API invocation")
        self._started = perf_counter()

    def finish(self, exc: BaseException | None = None) -> None:
        elapsed_ms = round((perf_counter() - self._started) * 1000.0, 3)
        outcome = {
            **self._fields,
            fields.EVENT: fields.PUBLIC_API_COMPLETION_EVENT,
            fields.SUCCESS: exc is None,
            fields.DURATION_MS: elapsed_ms,
            fields.ERRORS: [] if exc is None else [f"{type(exc).__name__}: {exc}"],
        }
        level = logging.INFO if exc is None else logging.WARNING
        with log_context(outcome):
            self._logger.log(level, "Public API completion")


def public_api_logged(
    *,
    logger: logging.Logger,
    component_id: str,
    api_name: str | None = None,
    id_fields: tuple[str, ...] = (),
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Log entry and completion of the decorated callable.

    ``id_fields`` names keyword arguments copied into the log context, such
    as ``group_key`` or ``division_id``.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        base = {
            fields.COMPONENT_ID: component_id,
            fields.API_NAME: api_name or func.__name__,
        }

        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                call = _ApiCall(logger, base, kwargs, id_fields)
                try:
                    result = await func(*args, **kwargs)
                except Exception as exc:
                    call.finish(exc)
                    raise
                call.finish()
                return result

            return async_wrapper

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            call = _ApiCall(logger, base, kwargs, id_fields)
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                call.finish(exc)
                raise
            call.finish()
            return result

        return wrapper

    return decorator
