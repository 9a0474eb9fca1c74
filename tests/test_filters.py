# SPDX-FileCopyrightText: 2025 Calendar Context Contributors
# SPDX-License-Identifier: MPL-2.0

"""Tests for configuration-based event filtering."""

from datetime import UTC, datetime, timedelta

import pytest

from calendar_context.filters import filter_events
from calendar_context.models import CanonicalCalendarEvent, IntegrationConfig

BASE = datetime(2026, 1, 5, 9, 0, tzinfo=UTC)


def make_event(title: str, minutes: int = 60, calendar: str = "Work", all_day: bool = False):
    return CanonicalCalendarEvent(
        id=f"{title}-{minutes}",
        title=title,
        start_time=BASE,
        end_time=BASE + timedelta(minutes=minutes),
        calendar=calendar,
        is_all_day=all_day,
    )


EVENTS = [
    make_event("Standup", minutes=15),
    make_event("Planning", minutes=30),
    make_event("Offsite", minutes=24 * 60, all_day=True),
    make_event("Dentist", minutes=45, calendar="Personal"),
    make_event("Retro", minutes=60, calendar="Team"),
]

CONFIGS = [
    IntegrationConfig(),
    IntegrationConfig(min_event_duration=30),
    IntegrationConfig(include_all_day_events=False),
    IntegrationConfig(included_calendars={"Work"}),
    IntegrationConfig(excluded_calendars={"Personal"}),
    IntegrationConfig(included_calendars={"Team", "Work"}, excluded_calendars={"Team"}, min_event_duration=20),
]


def titles(events):
    return [e.title for e in events]


def test_default_config_keeps_everything():
    """Defaults filter nothing out."""
    assert titles(filter_events(EVENTS, IntegrationConfig())) == titles(EVENTS)


class TestMinDuration:
    """Test minimum duration rule."""

    def test_boundary_inclusive(self):
        """With 30 minutes minimum, 15 is dropped and 30 is kept."""
        result = filter_events(EVENTS[:2], IntegrationConfig(min_event_duration=30))
        assert titles(result) == ["Planning"]

    def test_zero_length_event_kept_by_default(self):
        """A zero-minute event passes a zero minimum."""
        result = filter_events([make_event("Reminder", minutes=0)], IntegrationConfig())
        assert titles(result) == ["Reminder"]


class TestAllDay:
    """Test all-day rule."""

    def test_excluded_when_disabled(self):
        """All-day events are dropped when not included."""
        result = filter_events(EVENTS, IntegrationConfig(include_all_day_events=False))
        assert "Offsite" not in titles(result)
        assert len(result) == len(EVENTS) - 1

    def test_kept_when_enabled(self):
        """All-day events pass by default."""
        assert "Offsite" in titles(filter_events(EVENTS, IntegrationConfig()))


class TestCalendarLists:
    """Test allow-list and deny-list rules."""

    def test_allow_list(self):
        """Non-empty allow-list keeps only listed calendars."""
        result = filter_events(EVENTS, IntegrationConfig(included_calendars={"Personal"}))
        assert titles(result) == ["Dentist"]

    def test_deny_list(self):
        """Deny-listed calendars are dropped."""
        result = filter_events(EVENTS, IntegrationConfig(excluded_calendars={"Work"}))
        assert titles(result) == ["Dentist", "Retro"]

    def test_exclusion_wins(self):
        """A calendar in both lists is excluded."""
        config = IntegrationConfig(included_calendars={"Team"}, excluded_calendars={"Team"})
        assert filter_events(EVENTS, config) == []


@pytest.mark.parametrize("config", CONFIGS)
def test_filter_is_idempotent(config):
    """Filtering twice equals filtering once."""
    once = filter_events(EVENTS, config)
    assert filter_events(once, config) == once


def test_order_preserved():
    """Surviving events keep their input order."""
    reversed_events = list(reversed(EVENTS))
    result = filter_events(reversed_events, IntegrationConfig(excluded_calendars={"Personal"}))
    assert titles(result) == [t for t in titles(reversed_events) if t != "Dentist"]


def test_input_not_modified():
    """The input list is left as is."""
    events = list(EVENTS)
    filter_events(events, IntegrationConfig(included_calendars={"Nope"}))
    assert events == EVENTS
