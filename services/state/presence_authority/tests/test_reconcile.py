"""Unit tests for snapshot merge, reset policy and document mapping."""

from __future__ import annotations

from services.state.presence_authority.domain import (
    PersonRecord,
    PresenceStatus,
    ZoneClassification,
)
from services.state.presence_authority.reconcile import (
    reconcile_snapshot,
    snapshot_from_document,
    snapshot_to_document,
)
from services.state.presence_authority.status import fold_last_events
from services.state.presence_authority.tests.fakes import event

_ZONES = ZoneClassification(
    enter=frozenset({"Dorm 1"}),
    exit=frozenset({"Outside"}),
)


def _record(person_id: int, location: str = "101") -> PersonRecord:
    return PersonRecord(
        id=person_id,
        name=f"Person {person_id}",
        group_label="Dorm 1",
        location_label=location,
    )


def _previous_present(person_id: int) -> PersonRecord:
    last = fold_last_events([event(person_id, minute=0, destination="Dorm 1")])
    return _record(person_id).model_copy(
        update={
            "last_event": last[person_id],
            "current_status": PresenceStatus.PRESENT,
        }
    )


def test_ids_missing_from_roster_are_deleted_and_new_ids_inserted() -> None:
    """The next snapshot holds exactly the ids located in this cycle."""
    previous = {1: _record(1), 2: _record(2)}

    merged = reconcile_snapshot(
        previous=previous,
        located=[_record(2), _record(3)],
        last_events={},
        zones=_ZONES,
        policy="reset",
    )

    assert list(merged) == [2, 3]


def test_location_fields_are_overwritten_from_roster() -> None:
    """Existing ids take identity and location from the fresh roster."""
    previous = {1: _record(1, location="101")}

    merged = reconcile_snapshot(
        previous=previous,
        located=[_record(1, location="305")],
        last_events={},
        zones=_ZONES,
        policy="reset",
    )

    assert merged[1].location_label == "305"


def test_reset_policy_clears_status_without_new_event() -> None:
    """Under ``reset`` a person with no event in the window becomes unknown."""
    merged = reconcile_snapshot(
        previous={1: _previous_present(1)},
        located=[_record(1)],
        last_events={},
        zones=_ZONES,
        policy="reset",
    )

    assert merged[1].current_status is PresenceStatus.UNKNOWN
    assert merged[1].last_event is None


def test_retain_policy_keeps_previous_status_without_new_event() -> None:
    """Under ``retain`` the previous event and status survive the merge."""
    previous = {1: _previous_present(1)}

    merged = reconcile_snapshot(
        previous=previous,
        located=[_record(1)],
        last_events={},
        zones=_ZONES,
        policy="retain",
    )

    assert merged[1].current_status is PresenceStatus.PRESENT
    assert merged[1].last_event == previous[1].last_event


def test_new_events_override_retained_status() -> None:
    """A fresh event always recomputes status, whatever the policy."""
    last_events = fold_last_events([event(1, minute=5, destination="Outside")])

    merged = reconcile_snapshot(
        previous={1: _previous_present(1)},
        located=[_record(1)],
        last_events=last_events,
        zones=_ZONES,
        policy="retain",
    )

    assert merged[1].current_status is PresenceStatus.ABSENT
    assert merged[1].last_event == last_events[1]


def test_events_for_unlocated_people_are_ignored() -> None:
    """Events never create records on their own."""
    merged = reconcile_snapshot(
        previous={},
        located=[_record(1)],
        last_events=fold_last_events([event(9, minute=0, destination="Dorm 1")]),
        zones=_ZONES,
        policy="reset",
    )

    assert list(merged) == [1]


def test_document_mapping_keeps_records_and_skips_malformed_entries() -> None:
    """Durable documents map back to records; broken entries are counted."""
    snapshot = {1: _previous_present(1), 2: _record(2)}
    document = snapshot_to_document(snapshot)
    document["3"] = {"id": "three"}

    restored, skipped = snapshot_from_document(document)

    assert restored == snapshot
    assert skipped == 1
    assert document["1"]["current_status"] == "present"
