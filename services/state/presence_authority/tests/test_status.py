"""Unit tests for pure status derivation and event folding."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest

from resources.adapters.access_control import AccessEvent, PersonAttribute
from services.state.presence_authority.domain import (
    LastEvent,
    PresenceStatus,
    ZoneClassification,
)
from services.state.presence_authority.status import (
    MissingAttributeError,
    attribute_map,
    derive_status,
    fold_last_events,
    lookup_attribute,
)
from services.state.presence_authority.tests.fakes import event

_ZONES = ZoneClassification(
    enter=frozenset({"Dorm 1", "Shared"}),
    exit=frozenset({"Outside", "Shared"}),
)


def _last(destination: str | None, origin: str | None = "Outside") -> LastEvent:
    return LastEvent(
        time=datetime(2024, 5, 2, 8, 0, tzinfo=UTC),
        origin_zone=origin,
        destination_zone=destination,
    )


@pytest.mark.parametrize(
    ("destination", "expected"),
    [
        ("Dorm 1", PresenceStatus.PRESENT),
        ("Outside", PresenceStatus.ABSENT),
        ("Shared", PresenceStatus.PRESENT),
        ("Library", PresenceStatus.UNKNOWN),
        (None, PresenceStatus.UNKNOWN),
    ],
)
def test_derive_status_classifies_destination_zone(
    destination: str | None, expected: PresenceStatus
) -> None:
    """Destination zone decides status; enter membership wins over exit."""
    assert derive_status(_ZONES, _last(destination)) is expected


def test_derive_status_without_event_is_unknown() -> None:
    """No event in the window means unknown."""
    assert derive_status(_ZONES, None) is PresenceStatus.UNKNOWN


def test_derive_status_ignores_origin_zone() -> None:
    """Origin zone is stored but never consulted."""
    assert derive_status(_ZONES, _last("Library", origin="Dorm 1")) is (
        PresenceStatus.UNKNOWN
    )


def test_fold_keeps_latest_event_per_person_from_descending_input() -> None:
    """Each person maps to the maximum-timestamp event regardless of input order."""
    events = [
        event(1, minute=30, destination="Outside"),
        event(2, minute=20, destination="Dorm 1"),
        event(1, minute=10, destination="Dorm 1"),
        event(1, minute=50, destination="Dorm 1"),
        event(2, minute=5, destination="Outside"),
    ]

    folded = fold_last_events(events)

    assert set(folded) == {1, 2}
    assert folded[1].time == events[3].time_label
    assert folded[1].destination_zone == "Dorm 1"
    assert folded[2].destination_zone == "Dorm 1"


def test_fold_tie_break_keeps_last_in_input_order() -> None:
    """Equal timestamps resolve to the later row of the stable ascending sort."""
    events = [
        event(1, minute=0, destination="Outside"),
        event(1, minute=0, destination="Dorm 1"),
    ]

    assert fold_last_events(events)[1].destination_zone == "Dorm 1"


def test_fold_copies_origin_and_destination() -> None:
    """Folded events keep both zones of the access row."""
    folded = fold_last_events([event(3, minute=1, destination="Dorm 1", origin="Gate")])

    assert folded[3].origin_zone == "Gate"
    assert folded[3].destination_zone == "Dorm 1"


def test_fold_sorts_naive_and_aware_timestamps_together() -> None:
    """Naive timestamps are compared as UTC instead of failing the sort."""
    events = [
        AccessEvent(
            user_id=1,
            time_label=datetime(2024, 5, 2, 9, 0),
            zone_enter="Dorm 1",
        ),
        AccessEvent(
            user_id=1,
            time_label=datetime(2024, 5, 2, 8, 0, tzinfo=UTC),
            zone_enter="Outside",
        ),
    ]

    assert fold_last_events(events)[1].destination_zone == "Dorm 1"


def test_attribute_map_drops_empty_values_and_keeps_last_duplicate() -> None:
    """Blank values are absent; repeated names take the last value."""
    attributes = attribute_map(
        [
            PersonAttribute(name="Dorm", text="Dorm 1"),
            PersonAttribute(name="Room", text="  "),
            PersonAttribute(name="Dorm", text="Dorm 2"),
            PersonAttribute(name="Note", text=None),
        ]
    )

    assert attributes == {"Dorm": "Dorm 2"}


def test_lookup_attribute_reports_absent_field() -> None:
    """A missing field is an explicit outcome, not a ``None`` value."""
    with pytest.raises(MissingAttributeError) as exc_info:
        lookup_attribute({"Dorm": "Dorm 1"}, "Room")

    assert exc_info.value.field_name == "Room"
    assert lookup_attribute({"Dorm": "Dorm 1"}, "Dorm") == "Dorm 1"
