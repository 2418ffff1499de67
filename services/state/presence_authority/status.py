"""Pure derivation helpers: event folding, attribute lookup and status.

Nothing in this module performs I/O; the refresh cycle composes these
functions over data already fetched from the access-control backend.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime, timezone

from resources.adapters.access_control import AccessEvent, PersonAttribute
from services.state.presence_authority.domain import (
    LastEvent,
    PresenceStatus,
    ZoneClassification,
)


class MissingAttributeError(LookupError):
    """A person's detail record lacks a required attribute value."""

    def __init__(self, field_name: str) -> None:
        super().__init__(f"attribute is absent: {field_name}")
        self.field_name = field_name


def derive_status(
    zones: ZoneClassification, last_event: LastEvent | None
) -> PresenceStatus:
    """Classify a last event by destination zone; enter wins over exit."""
    if last_event is None:
        return PresenceStatus.UNKNOWN
    destination = last_event.destination_zone
    if destination in zones.enter:
        return PresenceStatus.PRESENT
    if destination in zones.exit:
        return PresenceStatus.ABSENT
    return PresenceStatus.UNKNOWN


def fold_last_events(events: Iterable[AccessEvent]) -> dict[int, LastEvent]:
    """Map each user id to its chronologically last event.

    Events are sorted ascending (stable) and folded so later entries overwrite
    earlier ones; equal timestamps keep the input order.
    """
    last_events: dict[int, LastEvent] = {}
    for event in sorted(events, key=lambda item: _comparable(item.time_label)):
        last_events[event.user_id] = LastEvent(
            time=event.time_label,
            origin_zone=event.zone_exit,
            destination_zone=event.zone_enter,
        )
    return last_events


def attribute_map(attributes: Iterable[PersonAttribute]) -> dict[str, str]:
    """Index non-empty attribute values by name; later duplicates win."""
    indexed: dict[str, str] = {}
    for attribute in attributes:
        if attribute.text is None or attribute.text.strip() == "":
            indexed.pop(attribute.name, None)
            continue
        indexed[attribute.name] = attribute.text.strip()
    return indexed


def lookup_attribute(attributes: Mapping[str, str], field_name: str) -> str:
    """Return one attribute value or raise ``MissingAttributeError``."""
    try:
        return attributes[field_name]
    except KeyError:
        raise MissingAttributeError(field_name) from None


def _comparable(value: datetime) -> datetime:
    """Treat naive timestamps as UTC so mixed inputs still sort."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
