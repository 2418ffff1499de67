"""In-process access-control adapter implementation over HTTP."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Mapping
from datetime import date
from typing import Any

from pydantic import ValidationError

from packages.presence_shared.http import (
    AsyncHttpClient,
    HttpJsonDecodeError,
    HttpRequestError,
    HttpStatusError,
)
from packages.presence_shared.logging import get_logger, public_api_logged
from resources.adapters.access_control.adapter import (
    AccessControlAdapter,
    AccessControlError,
    AccessControlHealthResult,
    AccessEvent,
    AuthExpiredError,
    PersonAttribute,
    PersonDetail,
    RequestFailedError,
    ResponseFormatError,
    RosterMember,
    TransportError,
)
from resources.adapters.access_control.component import RESOURCE_COMPONENT_ID
from resources.adapters.access_control.config import AccessControlAdapterSettings
from resources.adapters.access_control.credentials import CredentialStore

_LOGGER = get_logger(__name__)
_BODYLESS_METHODS = frozenset({"GET", "HEAD"})
_DATE_FORMAT = "%Y-%m-%d"


class HttpAccessControlAdapter(AccessControlAdapter):
    """Access-control adapter backed by the backend's JSON HTTP API.

    The adapter owns the bearer token. Any authenticated call answered with
    401 triggers one credential exchange per stale token, even when many
    concurrent calls observe the same expiry; the 401 is still raised to the
    caller that saw it.
    """

    def __init__(
        self,
        *,
        settings: AccessControlAdapterSettings,
        credential_store: CredentialStore | None = None,
        client: AsyncHttpClient | None = None,
    ) -> None:
        self._settings = settings
        self._credential_store = credential_store
        self._client = client or AsyncHttpClient(
            base_url=settings.base_url.rstrip("/"),
            timeout_seconds=settings.timeout_seconds,
        )
        self._token = settings.token
        self._reauth_lock = asyncio.Lock()

    @property
    def token(self) -> str:
        """Return the bearer token currently injected into requests."""
        return self._token

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

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
        """Issue one JSON request and map failures onto the adapter taxonomy."""
        verb = method.upper()
        token = self._token
        request_headers = {"Content-Type": "application/json"}
        if authenticated:
            request_headers["Authorization"] = f"Bearer {token}"
        request_headers.update(headers or {})

        kwargs: dict[str, Any] = {
            "params": {key: str(value) for key, value in (query or {}).items()},
            "headers": request_headers,
        }
        if verb not in _BODYLESS_METHODS and body is not None:
            kwargs["content"] = json.dumps(body)

        try:
            return await self._client.request_json(verb, path, **kwargs)
        except HttpStatusError as exc:
            if exc.is_unauthorized:
                _LOGGER.warning("access control rejected credentials for %s", path)
                if authenticated:
                    await self._recover_expired_token(stale_token=token)
                raise AuthExpiredError(
                    f"Fetching '{path}' failed: 401 {exc.reason_phrase}".rstrip(),
                    path=path,
                ) from None
            raise RequestFailedError(
                f"Fetching '{path}' failed: {exc.status_code} {exc.reason_phrase}".rstrip(),
                path=path,
                status_code=exc.status_code,
                response_body=_parse_body(exc.response_body),
            ) from None
        except HttpRequestError as exc:
            raise TransportError(f"Fetching '{path}' failed: {exc}", path=path) from exc
        except HttpJsonDecodeError as exc:
            raise ResponseFormatError(
                f"Fetching '{path}' returned invalid JSON", path=path
            ) from exc

    @public_api_logged(logger=_LOGGER, component_id=RESOURCE_COMPONENT_ID)
    async def check_server_health(self) -> AccessControlHealthResult:
        """Probe server state; token expiry is repaired, never raised."""
        try:
            await self.fetch("GET", self._settings.server_state_path)
        except AuthExpiredError:
            _LOGGER.warning("access control token expired; new token requested")
            return AccessControlHealthResult(
                adapter_ready=False,
                detail="token expired; reauthentication attempted",
            )
        except AccessControlError as exc:
            _LOGGER.error("access control server state check failed: %s", exc)
            return AccessControlHealthResult(
                adapter_ready=False,
                detail=str(exc) or "access control unavailable",
            )
        return AccessControlHealthResult(adapter_ready=True, detail="ok")

    @public_api_logged(logger=_LOGGER, component_id=RESOURCE_COMPONENT_ID)
    async def reauthenticate(self) -> str:
        """Exchange login/password for a new token and persist it."""
        payload = await self.fetch(
            "POST",
            self._settings.auth_path,
            body={"login": self._settings.login, "password": self._settings.password},
            authenticated=False,
        )
        token = payload.get("token") if isinstance(payload, dict) else None
        if not isinstance(token, str) or token.strip() == "":
            raise ResponseFormatError(
                "credential exchange response has no token",
                path=self._settings.auth_path,
            )

        self._token = token.strip()
        _LOGGER.warning("new access control token issued")

        if self._credential_store is not None:
            try:
                await asyncio.to_thread(
                    self._credential_store.persist_token, self._token
                )
            except Exception as exc:  # noqa: BLE001
                _LOGGER.error("access control token was not persisted: %s", exc)
        return self._token

    @public_api_logged(
        logger=_LOGGER, component_id=RESOURCE_COMPONENT_ID, id_fields=("division_id",)
    )
    async def list_roster(self, *, division_id: int) -> list[RosterMember]:
        """Return active roster members with display names."""
        payload = await self.fetch(
            "GET",
            self._settings.roster_path,
            query={"division": division_id, "status": "active"},
        )
        if not isinstance(payload, list):
            raise ResponseFormatError(
                "roster response must be a JSON array",
                path=self._settings.roster_path,
            )

        members: list[RosterMember] = []
        skipped = 0
        for row in payload:
            member = _roster_member(row)
            if member is None:
                skipped += 1
                continue
            members.append(member)
        if skipped:
            _LOGGER.warning("skipped %d malformed roster rows", skipped)
        return members

    async def get_person_detail(self, *, person_id: int) -> PersonDetail:
        """Return one person's free-form attribute list."""
        path = self._settings.person_detail_path.format(person_id=person_id)
        payload = await self.fetch("GET", path)
        if not isinstance(payload, dict):
            raise ResponseFormatError(
                "person detail response must be a JSON object", path=path
            )

        additional = payload.get("additional_fields")
        raw_attributes = additional.get("text") if isinstance(additional, dict) else None
        attributes: list[PersonAttribute] = []
        for item in raw_attributes or ():
            if not isinstance(item, dict) or not isinstance(item.get("name"), str):
                continue
            text = item.get("text")
            attributes.append(
                PersonAttribute(
                    name=item["name"],
                    text=text if isinstance(text, str) else None,
                )
            )
        return PersonDetail(person_id=person_id, attributes=tuple(attributes))

    @public_api_logged(
        logger=_LOGGER, component_id=RESOURCE_COMPONENT_ID, id_fields=("division_id",)
    )
    async def list_events(
        self,
        *,
        division_id: int,
        zone_ids: str,
        date_begin: date,
        date_end: date,
        max_rows: int,
    ) -> list[AccessEvent]:
        """Return events for the window, newest first as the backend sorts them."""
        payload = await self.fetch(
            "GET",
            self._settings.events_path,
            query={
                "dateBegin": date_begin.strftime(_DATE_FORMAT),
                "dateEnd": date_end.strftime(_DATE_FORMAT),
                "sidx": "time_label",
                "sord": "desc",
                "division": division_id,
                "rooms": zone_ids,
                "rows": max_rows,
            },
        )
        if payload is None:
            return []
        if not isinstance(payload, dict):
            raise ResponseFormatError(
                "events response must be a JSON object",
                path=self._settings.events_path,
            )

        events: list[AccessEvent] = []
        skipped = 0
        for row in payload.get("rows") or ():
            try:
                events.append(AccessEvent.model_validate(row))
            except ValidationError:
                skipped += 1
        if skipped:
            _LOGGER.warning("skipped %d malformed event rows", skipped)
        return events

    async def _recover_expired_token(self, *, stale_token: str) -> None:
        """Reauthenticate once for one stale token; later observers reuse it."""
        async with self._reauth_lock:
            if self._token != stale_token:
                return
            try:
                await self.reauthenticate()
            except AccessControlError as exc:
                _LOGGER.error("access control reauthentication failed: %s", exc)


def _roster_member(row: object) -> RosterMember | None:
    """Map one roster row onto a member, or ``None`` when it has no id."""
    if not isinstance(row, dict):
        return None
    person_id = row.get("id")
    if isinstance(person_id, bool) or not isinstance(person_id, int):
        return None

    parts = (row.get("last_name"), row.get("first_name"), row.get("middle_name"))
    name = " ".join(part.strip() for part in parts if isinstance(part, str) and part.strip())
    if name == "" and isinstance(row.get("name"), str):
        name = row["name"].strip()

    division_id = row.get("division_id")
    division_name = row.get("division_name")
    return RosterMember(
        person_id=person_id,
        name=name,
        division_id=division_id if isinstance(division_id, int) else None,
        division_name=division_name if isinstance(division_name, str) else None,
    )


def _parse_body(raw: str) -> Any:
    """Decode an error body as JSON, falling back to the raw text."""
    try:
        return json.loads(raw)
    except ValueError:
        return {"raw": raw}
