"""Domain contracts for Presence Authority Service payloads."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict


class PresenceStatus(str, Enum):
    """Presence state derived from a person's most recent access event."""

    PRESENT = "present"
    ABSENT = "absent"
    UNKNOWN = "unknown"


class LastEvent(BaseModel):
    """Most recent access event of one person within the lookback window."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    time: datetime
    origin_zone: str | None = None
    destination_zone: str | None = None


class PersonRecord(BaseModel):
    """One tracked individual with location and derived presence status."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: int
    name: str
    group_label: str
    location_label: str
    last_event: LastEvent | None = None
    current_status: PresenceStatus = PresenceStatus.UNKNOWN


class ZoneClassification(BaseModel):
    """Zone names classified as entering or leaving the monitored area."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    enter: frozenset[str]
    exit: frozenset[str]


class GroupRecords(BaseModel):
    """Records of one group with the snapshot freshness signal."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    group_key: str
    group_label: str
    records: tuple[PersonRecord, ...]
    last_update: datetime | None


class RefreshReport(BaseModel):
    """Outcome counters of one completed refresh cycle."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    roster_size: int
    record_count: int
    event_count: int
    unknown_count: int
    persisted: bool
    last_update: datetime | None


class HealthStatus(BaseModel):
    """Presence authority and snapshot store readiness payload."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    service_ready: bool
    substrate_ready: bool
    refreshing: bool
    record_count: int
    last_update: datetime | None
    detail: str


class UnknownGroupError(LookupError):
    """Requested group key is not configured."""

    def __init__(self, group_key: str) -> None:
        super().__init__(f"unknown group: {group_key}")
        self.group_key = group_key
