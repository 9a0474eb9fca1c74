# SPDX-FileCopyrightText: 2025 Calendar Context Contributors
# SPDX-License-Identifier: MPL-2.0

"""Data model for local calendar context."""

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any

# Loosely-typed record as emitted by an external calendar script.
RawEvent = dict[str, Any]


class EventStatus(Enum):
    """Free/busy status of a calendar event."""

    BUSY = "busy"
    FREE = "free"
    TENTATIVE = "tentative"
    OUT_OF_OFFICE = "outOfOffice"


class IntegrationState(Enum):
    """Availability of the local calendar store, sampled once per process."""

    UNINITIALIZED = "uninitialized"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


def _check_non_negative(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"{name} must be a non-negative integer, got {value!r}")


@dataclass(frozen=True)
class IntegrationConfig:
    """User configuration for calendar acquisition and filtering.

    Replaced as a whole; use ``updated()`` to derive a modified copy.
    """

    enabled: bool = False
    included_calendars: frozenset[str] = frozenset()
    excluded_calendars: frozenset[str] = frozenset()
    look_ahead_days: int = 7
    look_behind_days: int = 1
    include_all_day_events: bool = True
    min_event_duration: int = 0  # minutes

    def __post_init__(self) -> None:
        # Accept any iterable of names, store as frozenset
        object.__setattr__(self, "included_calendars", frozenset(self.included_calendars))
        object.__setattr__(self, "excluded_calendars", frozenset(self.excluded_calendars))
        _check_non_negative("look_ahead_days", self.look_ahead_days)
        _check_non_negative("look_behind_days", self.look_behind_days)
        _check_non_negative("min_event_duration", self.min_event_duration)

    def updated(self, **changes) -> "IntegrationConfig":
        """Return a new config with the given fields replaced."""
        return replace(self, **changes)


@dataclass(frozen=True)
class TimeRange:
    """Query window. A range with start after end simply yields no events."""

    start: datetime
    end: datetime


@dataclass(frozen=True)
class CanonicalCalendarEvent:
    """Normalized calendar event, independent of the strategy that fetched it."""

    id: str
    title: str
    start_time: datetime
    end_time: datetime
    calendar: str
    description: str | None = None
    location: str | None = None
    is_all_day: bool = False
    attendees_count: int = 0
    status: EventStatus = EventStatus.BUSY

    @property
    def duration_minutes(self) -> float:
        return (self.end_time - self.start_time).total_seconds() / 60

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "location": self.location,
            "is_all_day": self.is_all_day,
            "attendees_count": self.attendees_count,
            "status": self.status.value,
            "calendar": self.calendar,
        }


@dataclass(frozen=True)
class IntegrationStatus:
    """Read-only snapshot of the integration."""

    available: bool
    enabled: bool
    last_sync: datetime | None = None
    cached_event_count: int = 0

    def to_dict(self) -> dict:
        return {
            "available": self.available,
            "enabled": self.enabled,
            "last_sync": self.last_sync.isoformat() if self.last_sync else None,
            "cached_event_count": self.cached_event_count,
        }


@dataclass
class AcquisitionResult:
    """Outcome of running the strategy list once.

    ``strategy`` names the strategy that succeeded, or is None when every
    strategy failed (records is then empty).
    """

    records: list[RawEvent] = field(default_factory=list)
    strategy: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.strategy is not None
