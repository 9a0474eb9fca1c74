# SPDX-FileCopyrightText: 2025 Calendar Context Contributors
# SPDX-License-Identifier: MPL-2.0

"""Convert raw calendar records into canonical events."""

import logging
import re
from datetime import UTC, datetime

from calendar_context.models import CanonicalCalendarEvent, EventStatus, RawEvent

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled Event"
DEFAULT_CALENDAR = "Default"

# Outlook OlBusyStatus enumeration
OUTLOOK_BUSY_STATUS = {
    0: "free",
    1: "tentative",
    2: "busy",
    3: "outofoffice",
    4: "workingelsewhere",
}

# Legacy PowerShell serialization of DateTime values
_MS_DATE = re.compile(r"^/Date\((-?\d+)(?:[+-]\d{4})?\)/$")


class RecordParseError(ValueError):
    """A raw record could not be turned into an event."""


def parse_timestamp(value) -> datetime:
    """Parse a script timestamp into an aware datetime.

    Timestamps without an offset are taken as local time, which is how the
    calendar scripts format them.

    Raises:
        RecordParseError: If the value is missing or not a timestamp
    """
    if not isinstance(value, str) or not value.strip():
        raise RecordParseError(f"Missing or non-string timestamp: {value!r}")

    text = value.strip()
    try:
        match = _MS_DATE.match(text)
        if match:
            return datetime.fromtimestamp(int(match.group(1)) / 1000, tz=UTC).astimezone()
        dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
        # astimezone() on a naive datetime assumes local time
        return dt.astimezone()
    except (ValueError, OverflowError, OSError) as e:
        raise RecordParseError(f"Unparsable timestamp: {value!r}") from e


def epoch_ms(dt: datetime) -> int:
    return int(dt.timestamp() * 1000)


def derive_event_id(title: str, start: datetime, end: datetime) -> str:
    """Deterministic id from title and times.

    Stable across repeated pulls, but two distinct events sharing title and
    times collide.
    """
    return f"{title}-{epoch_ms(start)}-{epoch_ms(end)}"


def _count_entries(field) -> int:
    if not isinstance(field, str):
        return 0
    return len([entry for entry in field.split(";") if entry.strip()])


def count_attendees(raw: RawEvent) -> int:
    """Count required plus optional attendees (';'-separated lists)."""
    return _count_entries(raw.get("RequiredAttendees")) + _count_entries(raw.get("OptionalAttendees"))


def map_busy_status(status) -> EventStatus:
    """Map a raw busy status to EventStatus.

    Case-insensitive substring test in priority order: free, tentative,
    out of office; anything else is busy. Outlook's numeric codes are
    translated to names first.
    """
    if isinstance(status, int) and not isinstance(status, bool):
        status = OUTLOOK_BUSY_STATUS.get(status, "")
    text = status.lower() if isinstance(status, str) else ""

    if "free" in text:
        return EventStatus.FREE
    if "tentative" in text:
        return EventStatus.TENTATIVE
    if "outofoffice" in text or "out of office" in text:
        return EventStatus.OUT_OF_OFFICE
    return EventStatus.BUSY


def _as_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


def _optional_text(value) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def normalize_event(raw: RawEvent) -> CanonicalCalendarEvent:
    """Build a canonical event from one raw record.

    Raises:
        RecordParseError: If start or end cannot be parsed
    """
    start_time = parse_timestamp(raw.get("Start"))
    end_time = parse_timestamp(raw.get("End"))
    title = _optional_text(raw.get("Subject")) or DEFAULT_TITLE

    return CanonicalCalendarEvent(
        id=derive_event_id(title, start_time, end_time),
        title=title,
        description=_optional_text(raw.get("Body")),
        start_time=start_time,
        end_time=end_time,
        location=_optional_text(raw.get("Location")),
        is_all_day=_as_bool(raw.get("IsAllDay")),
        attendees_count=count_attendees(raw),
        status=map_busy_status(raw.get("BusyStatus")),
        calendar=_optional_text(raw.get("CalendarName")) or DEFAULT_CALENDAR,
    )


def normalize_events(records: list[RawEvent]) -> list[CanonicalCalendarEvent]:
    """Normalize a batch, dropping records that fail to parse."""
    events = []
    for raw in records:
        try:
            events.append(normalize_event(raw))
        except RecordParseError as e:
            logger.warning(f"Dropping calendar event {raw.get('Subject')!r}: {e}")
    if len(events) < len(records):
        logger.info(f"Normalized {len(events)} of {len(records)} calendar records")
    return events
