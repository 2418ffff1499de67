"""Snapshot reconciliation: merge a fresh roster and apply folded events."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from pydantic import ValidationError

from services.state.presence_authority.config import StatusResetPolicy
from services.state.presence_authority.domain import (
    LastEvent,
    PersonRecord,
    PresenceStatus,
    ZoneClassification,
)
from services.state.presence_authority.status import derive_status


def reconcile_snapshot(
    *,
    previous: Mapping[int, PersonRecord],
    located: Iterable[PersonRecord],
    last_events: Mapping[int, LastEvent],
    zones: ZoneClassification,
    policy: StatusResetPolicy,
) -> dict[int, PersonRecord]:
    """Build the next snapshot from this cycle's located roster.

    Ids missing from ``located`` are dropped. Identity and location fields
    always come from ``located``. Under ``reset`` every record starts the
    cycle with no event and ``unknown`` status; under ``retain`` ids with no
    event in the window keep their previous event and status.
    """
    merged: dict[int, PersonRecord] = {}
    for record in located:
        prior = previous.get(record.id)
        if policy == "retain" and prior is not None:
            merged[record.id] = record.model_copy(
                update={
                    "last_event": prior.last_event,
                    "current_status": prior.current_status,
                }
            )
        else:
            merged[record.id] = record.model_copy(
                update={
                    "last_event": None,
                    "current_status": PresenceStatus.UNKNOWN,
                }
            )

    for person_id, event in last_events.items():
        record = merged.get(person_id)
        if record is None:
            continue
        merged[person_id] = record.model_copy(
            update={
                "last_event": event,
                "current_status": derive_status(zones, event),
            }
        )
    return dict(sorted(merged.items()))


def snapshot_to_document(snapshot: Mapping[int, PersonRecord]) -> dict[str, object]:
    """Serialize a snapshot into the durable JSON document shape."""
    return {
        str(person_id): record.model_dump(mode="json")
        for person_id, record in snapshot.items()
    }


def snapshot_from_document(
    document: Mapping[str, object],
) -> tuple[dict[int, PersonRecord], int]:
    """Parse a durable document, returning the snapshot and skipped entry count."""
    snapshot: dict[int, PersonRecord] = {}
    skipped = 0
    for value in document.values():
        try:
            record = PersonRecord.model_validate(value)
        except ValidationError:
            skipped += 1
            continue
        snapshot[record.id] = record
    return snapshot, skipped
