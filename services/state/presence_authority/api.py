"""HTTP routes exposing Presence Authority Service reads and refresh triggers."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from packages.presence_shared.errors import (
    ErrorDetail,
    codes,
    dependency_error,
    exception_to_error,
    validation_error,
)
from packages.presence_shared.http import NO_CACHE_HEADERS
from packages.presence_shared.logging import get_logger
from resources.adapters.access_control import (
    AccessControlError,
    AuthExpiredError,
    RequestFailedError,
    ResponseFormatError,
)
from resources.substrates.snapshot_store import SnapshotStoreError
from services.state.presence_authority.domain import PersonRecord, UnknownGroupError
from services.state.presence_authority.service import PresenceAuthorityService

_LOGGER = get_logger(__name__)


def error_for(exc: Exception) -> ErrorDetail:
    """Classify backend and snapshot failures; anything else is internal."""
    metadata = {"exception_type": type(exc).__name__}
    message = str(exc)
    if isinstance(exc, SnapshotStoreError):
        return dependency_error(
            message or "snapshot unavailable",
            code=codes.SNAPSHOT_UNAVAILABLE,
            metadata=metadata,
        )
    if isinstance(exc, AccessControlError) and exc.path:
        metadata["path"] = exc.path
    if isinstance(exc, RequestFailedError):
        metadata["status_code"] = str(exc.status_code)
        return dependency_error(
            message,
            code=codes.UPSTREAM_REJECTED,
            retryable=exc.status_code >= 500,
            metadata=metadata,
        )
    if isinstance(exc, AuthExpiredError):
        return dependency_error(
            message, code=codes.UPSTREAM_REJECTED, metadata=metadata
        )
    if isinstance(exc, ResponseFormatError):
        return dependency_error(
            message, code=codes.UPSTREAM_MALFORMED, retryable=False, metadata=metadata
        )
    if isinstance(exc, AccessControlError):
        return dependency_error(
            message or "access control unavailable",
            code=codes.UPSTREAM_UNAVAILABLE,
            metadata=metadata,
        )
    return exception_to_error(exc)


def group_by_location(
    records: Iterable[PersonRecord],
) -> dict[str, dict[str, list[dict[str, object]]]]:
    """Group records by first location character, then by full location.

    Records without a location are left out.
    """
    grouped: dict[str, dict[str, list[dict[str, object]]]] = {}
    for record in records:
        location = record.location_label
        if not location:
            continue
        partition = grouped.setdefault(location[0], {})
        partition.setdefault(location, []).append(record.model_dump(mode="json"))
    return grouped


def register_routes(*, router: APIRouter, service: PresenceAuthorityService) -> None:
    """Register presence routes on one router."""

    @router.get("/api/records")
    async def get_records(group: str = Query(...)) -> JSONResponse:
        try:
            result = await service.get_records(group_key=group)
        except UnknownGroupError as exc:
            error = validation_error(str(exc), code=codes.UNKNOWN_GROUP)
            return JSONResponse(
                status_code=400,
                content={"message": "Unknown group.", "error": error.to_payload()},
            )
        except Exception as exc:
            _LOGGER.exception("records read failed")
            error = error_for(exc)
            return JSONResponse(
                status_code=500,
                content={
                    "message": str(exc) or "Unknown error occurred.",
                    "error": error.to_payload(),
                },
            )

        last_update = result.last_update.isoformat() if result.last_update else None
        return JSONResponse(
            content={
                "meta": {"lastUpdate": last_update, "group": result.group_label},
                "data": group_by_location(result.records),
            },
            headers=NO_CACHE_HEADERS,
        )

    @router.post("/api/records/refresh", status_code=202)
    async def trigger_refresh() -> dict[str, object]:
        accepted = service.trigger_refresh()
        message = "Update started in background." if accepted else "Update already in progress."
        return {"message": message, "accepted": accepted}

    @router.get("/api/health")
    async def health() -> JSONResponse:
        try:
            status = await asyncio.to_thread(service.health)
        except Exception as exc:
            _LOGGER.exception("health check failed")
            error = error_for(exc)
            return JSONResponse(
                status_code=500,
                content={
                    "message": str(exc) or "health check failed",
                    "error": error.to_payload(),
                },
            )
        return JSONResponse(
            content=status.model_dump(mode="json"),
            headers=NO_CACHE_HEADERS,
        )
