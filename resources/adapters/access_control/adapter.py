"""Transport-agnostic access-control adapter protocol, errors and DTOs."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict


class AccessControlError(Exception):
    """Base exception for access-control API failures."""

    def __init__(self, message: str, *, path: str = "") -> None:
        super().__init__(message)
        self.path = path


class TransportError(AccessControlError):
    """Network-level failure; the backend could not be reached."""


class AuthExpiredError(AccessControlError):
    """The backend rejected the bearer token (HTTP 401)."""


class RequestFailedError(AccessControlError):
    """Non-success, non-401 HTTP status from the backend."""

    def __init__(
        self,
        message: str,
        *,
        path: str = "",
        status_code: int,
        response_body: Any = None,
    ) -> None:
        super().__init__(message, path=path)
        self.status_code = status_code
        self.response_body = response_body


class ResponseFormatError(AccessControlError):
    """Successful response whose payload does not have the expected shape."""


class AccessControlHealthResult(BaseModel):
    """Readiness payload for the access-control backend and token."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    adapter_ready: bool
    detail: str


class RosterMember(BaseModel):
    """One active member of a roster division."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    person_id: int
    name: str
    division_id: int | None = None
    division_name: str | None = None


class PersonAttribute(BaseModel):
    """One free-form labeled attribute from a person's detail record."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    text: str | None = None


class PersonDetail(BaseModel):
    """Extended attributes of one person."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    person_id: int
    attributes: tuple[PersonAttribute, ...] = ()


class AccessEvent(BaseModel):
    """One access-log row: a pass from one zone into another."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    user_id: int
    time_label: datetime
    zone_exit: str | None = None
    zone_enter: str | None = None


@runtime_checkable
class AccessControlAdapter(Protocol):
    """Protocol for the roster, person-detail and event-log endpoints."""

    async def fetch(
        self,
        method: str,
        path: str,
        *,
        query: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        authenticated: bool = True,
    ) -> Any:
        """Issue one JSON request and classify any failure."""

    async def check_server_health(self) -> AccessControlHealthResult:
        """Probe backend state and token validity without raising."""

    async def reauthenticate(self) -> str:
        """Exchange login/password for a new bearer token."""

    async def list_roster(self, *, division_id: int) -> list[RosterMember]:
        """Return all active members of one division."""

    async def get_person_detail(self, *, person_id: int) -> PersonDetail:
        """Return extended attributes for one person."""

    async def list_events(
        self,
        *,
        division_id: int,
        zone_ids: str,
        date_begin: date,
        date_end: date,
        max_rows: int,
    ) -> list[AccessEvent]:
        """Return access events for one division and zone set in a date range."""

    async def aclose(self) -> None:
        """Release transport resources."""
