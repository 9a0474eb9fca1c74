# SPDX-FileCopyrightText: 2025 Calendar Context Contributors
# SPDX-License-Identifier: MPL-2.0

"""Apply user configuration to a set of canonical events."""

from calendar_context.models import CanonicalCalendarEvent, IntegrationConfig


def event_passes(event: CanonicalCalendarEvent, config: IntegrationConfig) -> bool:
    """Check one event against the configuration."""
    if event.duration_minutes < config.min_event_duration:
        return False

    if event.is_all_day and not config.include_all_day_events:
        return False

    # Allow-list only applies when non-empty
    if config.included_calendars and event.calendar not in config.included_calendars:
        return False

    # Deny-list always wins over the allow-list
    if event.calendar in config.excluded_calendars:
        return False

    return True


def filter_events(
    events: list[CanonicalCalendarEvent],
    config: IntegrationConfig,
) -> list[CanonicalCalendarEvent]:
    """Return the events that pass the configuration, in their original order."""
    return [event for event in events if event_passes(event, config)]
