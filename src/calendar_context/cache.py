# SPDX-FileCopyrightText: 2025 Calendar Context Contributors
# SPDX-License-Identifier: MPL-2.0

"""Replace-all snapshot of the latest filtered events."""

from datetime import datetime, timedelta

from calendar_context.models import CanonicalCalendarEvent

# Window around a work session in which meetings are considered related
SESSION_BUFFER = timedelta(hours=2)


class EventCache:
    """Events from the most recent successful acquisition, keyed by id.

    Every ``replace()`` discards the previous contents. There is no expiry;
    the snapshot is valid until the next acquisition.
    """

    def __init__(self) -> None:
        self._events: dict[str, CanonicalCalendarEvent] = {}

    def replace(self, events: list[CanonicalCalendarEvent]) -> None:
        self._events.clear()
        for event in events:
            self._events[event.id] = event

    def get(self, event_id: str) -> CanonicalCalendarEvent | None:
        return self._events.get(event_id)

    def events(self) -> list[CanonicalCalendarEvent]:
        return list(self._events.values())

    def events_near(
        self,
        start: datetime,
        end: datetime,
        buffer: timedelta = SESSION_BUFFER,
    ) -> list[CanonicalCalendarEvent]:
        """Cached events starting within ``buffer`` of the [start, end] window.

        Naive datetimes are taken as local time, matching event timestamps.
        """
        lower = start.astimezone() - buffer
        upper = end.astimezone() + buffer
        return [e for e in self._events.values() if lower <= e.start_time <= upper]

    def __len__(self) -> int:
        return len(self._events)

    def __contains__(self, event_id: str) -> bool:
        return event_id in self._events
