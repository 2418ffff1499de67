"""Concrete Presence Authority Service implementation."""

from __future__ import annotations

import asyncio
import contextlib
import threading
from collections.abc import Callable, Sequence
from datetime import date, datetime, timedelta

from packages.presence_shared.logging import (
    fields,
    get_logger,
    log_context,
    public_api_logged,
)
from resources.adapters.access_control import AccessControlAdapter, RosterMember
from resources.substrates.snapshot_store import SnapshotStore, SnapshotStoreError
from services.state.presence_authority.component import SERVICE_COMPONENT_ID
from services.state.presence_authority.config import PresenceAuthoritySettings
from services.state.presence_authority.domain import (
    GroupRecords,
    HealthStatus,
    PersonRecord,
    PresenceStatus,
    RefreshReport,
    UnknownGroupError,
    ZoneClassification,
)
from services.state.presence_authority.reconcile import (
    reconcile_snapshot,
    snapshot_from_document,
    snapshot_to_document,
)
from services.state.presence_authority.service import PresenceAuthorityService
from services.state.presence_authority.status import (
    MissingAttributeError,
    attribute_map,
    fold_last_events,
    lookup_attribute,
)

_LOGGER = get_logger(__name__)


class DefaultPresenceAuthorityService(PresenceAuthorityService):
    """Default implementation over the access-control adapter and snapshot store.

    The in-memory snapshot is replaced wholesale at the end of each cycle and
    never mutated in place, so readers always observe a complete mapping. At
    most one cycle runs at a time: the refresh guard is only ever try-acquired,
    so a trigger arriving during a cycle is dropped rather than queued.
    """

    def __init__(
        self,
        *,
        settings: PresenceAuthoritySettings,
        adapter: AccessControlAdapter,
        store: SnapshotStore,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._settings = settings
        self._adapter = adapter
        self._store = store
        self._today = today
        self._zones = ZoneClassification(
            enter=settings.enter_zones,
            exit=settings.exit_zones,
        )
        self._snapshot: dict[int, PersonRecord] = {}
        self._last_successful_update: datetime | None = None
        self._refresh_guard = threading.Lock()
        self._cycle_count = 0
        self._ticker: asyncio.Task[None] | None = None
        self._background: set[asyncio.Task[RefreshReport | None]] = set()

    @property
    def is_refreshing(self) -> bool:
        """Return whether a refresh cycle currently holds the guard."""
        return self._refresh_guard.locked()

    @public_api_logged(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    async def start(self) -> None:
        """Load the durable snapshot, run the first refresh and start the ticker."""
        await self._load_durable_snapshot()
        self.trigger_refresh()
        if self._ticker is None:
            self._ticker = asyncio.get_running_loop().create_task(self._tick())

    @public_api_logged(logger=_LOGGER, component_id=SERVICE_COMPONENT_ID)
    async def stop(self) -> None:
        """Stop the ticker and cancel any in-flight refresh."""
        tasks = list(self._background)
        if self._ticker is not None:
            tasks.append(self._ticker)
            self._ticker = None
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def refresh(self) -> RefreshReport | None:
        """Run one refresh cycle now; ``None`` when skipped or failed."""
        if not self._refresh_guard.acquire(blocking=False):
            _LOGGER.info("refresh already in progress; skipping")
            return None
        try:
            return await self._run_cycle()
        finally:
            self._refresh_guard.release()

    def trigger_refresh(self) -> bool:
        """Start a background refresh unless one is already running."""
        loop = asyncio.get_running_loop()
        if not self._refresh_guard.acquire(blocking=False):
            _LOGGER.info("refresh already in progress; trigger dropped")
            return False
        task = loop.create_task(self._run_cycle())
        self._background.add(task)
        task.add_done_callback(self._finish_background_cycle)
        return True

    @public_api_logged(
        logger=_LOGGER, component_id=SERVICE_COMPONENT_ID, id_fields=("group_key",)
    )
    async def get_records(self, *, group_key: str) -> GroupRecords:
        """Return one group's records ordered by location.

        While a refresh runs, the durable snapshot is preferred over memory;
        memory is used when the durable read fails or comes back empty.
        """
        group_label = self._settings.groups.get(group_key)
        if group_label is None:
            raise UnknownGroupError(group_key)

        snapshot = self._snapshot
        if self.is_refreshing:
            snapshot = await self._read_during_refresh(fallback=snapshot)

        records = sorted(
            (record for record in snapshot.values() if record.group_label == group_label),
            key=lambda record: (record.location_label, record.id),
        )
        return GroupRecords(
            group_key=group_key,
            group_label=group_label,
            records=tuple(records),
            last_update=self._last_successful_update,
        )

    def get_last_update_time(self) -> datetime | None:
        """Return the time of the last persisted snapshot, if any."""
        return self._last_successful_update

    def health(self) -> HealthStatus:
        """Return service and snapshot store readiness."""
        store_health = self._store.health()
        return HealthStatus(
            service_ready=True,
            substrate_ready=store_health.ready,
            refreshing=self.is_refreshing,
            record_count=len(self._snapshot),
            last_update=self._last_successful_update,
            detail=store_health.detail,
        )

    async def _tick(self) -> None:
        """Trigger a refresh every interval; overrunning cycles skip ticks."""
        while True:
            await asyncio.sleep(self._settings.refresh_interval_seconds)
            self.trigger_refresh()

    def _finish_background_cycle(
        self, task: asyncio.Task[RefreshReport | None]
    ) -> None:
        """Release the guard once a triggered cycle ends, even if never started."""
        self._background.discard(task)
        self._refresh_guard.release()

    async def _run_cycle(self) -> RefreshReport | None:
        """Run one cycle; the caller holds the refresh guard."""
        self._cycle_count += 1
        with log_context({fields.REFRESH_CYCLE: self._cycle_count}):
            _LOGGER.info("refresh cycle started")
            try:
                return await self._refresh_snapshot()
            except Exception:
                _LOGGER.exception("refresh cycle failed")
                return None

    async def _refresh_snapshot(self) -> RefreshReport:
        """Fetch, reconcile, derive and persist one full snapshot."""
        await self._check_backend()

        roster = await self._adapter.list_roster(division_id=self._settings.division_id)
        located = await self._locate_members(roster)
        _LOGGER.info(
            "roster located: %d of %d members have group and location",
            len(located),
            len(roster),
        )

        today = self._today()
        events = await self._adapter.list_events(
            division_id=self._settings.division_id,
            zone_ids=self._settings.zone_ids_query(),
            date_begin=today - timedelta(days=self._settings.lookback_days),
            date_end=today,
            max_rows=self._settings.max_event_rows,
        )
        last_events = fold_last_events(events)
        _LOGGER.info(
            "processed %d event rows; last events for %d people",
            len(events),
            len(last_events),
        )

        snapshot = reconcile_snapshot(
            previous=self._snapshot,
            located=located,
            last_events=last_events,
            zones=self._zones,
            policy=self._settings.status_reset_policy,
        )
        self._snapshot = snapshot

        persisted = await self._persist(snapshot)
        unknown = sum(
            1
            for record in snapshot.values()
            if record.current_status is PresenceStatus.UNKNOWN
        )
        share = round(unknown / len(snapshot) * 100) if snapshot else 0
        _LOGGER.info(
            "refresh cycle finished: %d records, unknown status %d/%d (~%d%%)",
            len(snapshot),
            unknown,
            len(snapshot),
            share,
        )
        return RefreshReport(
            roster_size=len(roster),
            record_count=len(snapshot),
            event_count=len(events),
            unknown_count=unknown,
            persisted=persisted,
            last_update=self._last_successful_update,
        )

    async def _check_backend(self) -> None:
        """Probe backend health; problems are logged and never stop the cycle."""
        try:
            result = await self._adapter.check_server_health()
        except Exception as exc:  # noqa: BLE001
            _LOGGER.warning("access control health check failed: %s", exc)
            return
        if not result.adapter_ready:
            _LOGGER.warning("access control not ready: %s", result.detail)

    async def _locate_members(
        self, roster: Sequence[RosterMember]
    ) -> list[PersonRecord]:
        """Fetch details in sequential batches of concurrent per-person calls."""
        located: list[PersonRecord] = []
        batch_size = self._settings.detail_batch_size
        for start in range(0, len(roster), batch_size):
            batch = roster[start : start + batch_size]
            results = await asyncio.gather(
                *(self._locate_member(member) for member in batch)
            )
            located.extend(record for record in results if record is not None)
        return located

    async def _locate_member(self, member: RosterMember) -> PersonRecord | None:
        """Build one record, or ``None`` when detail fails or fields are absent."""
        try:
            detail = await self._adapter.get_person_detail(person_id=member.person_id)
        except Exception as exc:  # noqa: BLE001
            with log_context({fields.PERSON_ID: member.person_id}):
                _LOGGER.error("person detail fetch failed; person skipped: %s", exc)
            return None

        attributes = attribute_map(detail.attributes)
        try:
            group_label = lookup_attribute(attributes, self._settings.group_field)
            location_label = lookup_attribute(attributes, self._settings.location_field)
        except MissingAttributeError:
            return None
        return PersonRecord(
            id=member.person_id,
            name=member.name,
            group_label=group_label,
            location_label=location_label,
        )

    async def _persist(self, snapshot: dict[int, PersonRecord]) -> bool:
        """Write the snapshot durably and advance the freshness timestamp."""
        try:
            written_at = await asyncio.to_thread(
                self._store.write_snapshot, snapshot_to_document(snapshot)
            )
        except SnapshotStoreError as exc:
            _LOGGER.error("snapshot was not persisted: %s", exc)
            return False
        self._last_successful_update = written_at
        return True

    async def _load_durable_snapshot(self) -> None:
        """Restore the last persisted snapshot and its freshness timestamp."""
        try:
            document = await asyncio.to_thread(self._store.read_snapshot)
            modified_at = await asyncio.to_thread(self._store.modified_at)
        except SnapshotStoreError as exc:
            _LOGGER.error("durable snapshot not loaded; starting empty: %s", exc)
            return

        snapshot, skipped = snapshot_from_document(document)
        if skipped:
            _LOGGER.warning("skipped %d malformed durable records", skipped)
        self._snapshot = snapshot
        self._last_successful_update = modified_at
        _LOGGER.info("durable snapshot loaded: %d records", len(snapshot))

    async def _read_during_refresh(
        self, *, fallback: dict[int, PersonRecord]
    ) -> dict[int, PersonRecord]:
        """Read the durable snapshot, falling back to memory."""
        try:
            document = await asyncio.to_thread(self._store.read_snapshot)
        except SnapshotStoreError as exc:
            _LOGGER.warning("durable read failed during refresh; using memory: %s", exc)
            return fallback

        snapshot, _ = snapshot_from_document(document)
        if not snapshot and fallback:
            _LOGGER.info("durable snapshot empty during refresh; using memory")
            return fallback
        return snapshot
