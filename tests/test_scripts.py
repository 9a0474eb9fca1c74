# SPDX-FileCopyrightText: 2025 Calendar Context Contributors
# SPDX-License-Identifier: MPL-2.0

"""Tests for calendar script building."""

from datetime import UTC, datetime, timedelta

import pytest

from calendar_context.scripts import (
    LOOK_AHEAD_TOKEN,
    LOOK_BEHIND_TOKEN,
    OUTLOOK_QUERY_SCRIPT,
    WINDOWS_RUNTIME_QUERY_SCRIPT,
    ScriptParameterError,
    build_script,
    day_counts,
)

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)


class TestBuildScript:
    """Test day-count substitution."""

    @pytest.mark.parametrize("template", [OUTLOOK_QUERY_SCRIPT, WINDOWS_RUNTIME_QUERY_SCRIPT])
    def test_tokens_replaced(self, template):
        """Both tokens are filled and none remain."""
        script = build_script(template, 2, 9)
        assert LOOK_BEHIND_TOKEN not in script
        assert LOOK_AHEAD_TOKEN not in script
        assert "AddDays(-2)" in script
        assert "AddDays(9)" in script

    def test_zero_allowed(self):
        """Zero days is a valid window edge."""
        script = build_script(OUTLOOK_QUERY_SCRIPT, 0, 0)
        assert "AddDays(-0)" in script
        assert "AddDays(0)" in script

    @pytest.mark.parametrize("bad", ["3", "1; Remove-Item C:\\", 2.0, None, True, -1])
    def test_rejects_non_integers(self, bad):
        """Anything other than a non-negative int is refused."""
        with pytest.raises(ScriptParameterError):
            build_script(OUTLOOK_QUERY_SCRIPT, bad, 1)
        with pytest.raises(ScriptParameterError):
            build_script(OUTLOOK_QUERY_SCRIPT, 1, bad)

    def test_parameter_error_is_value_error(self):
        """ScriptParameterError can be caught as ValueError."""
        assert issubclass(ScriptParameterError, ValueError)


class TestScriptContents:
    """Test the query scripts themselves."""

    def test_outlook_restricts_recurring_items(self):
        """Expanded recurrences are bounded by Restrict, not piped whole."""
        script = OUTLOOK_QUERY_SCRIPT
        assert "IncludeRecurrences = $true" in script
        assert "$items.Restrict(" in script
        assert "Where-Object" not in script
        assert script.index('Sort("[Start]")') < script.index("IncludeRecurrences") < script.index("Restrict(")

    @pytest.mark.parametrize(
        "field",
        ["Subject", "Start", "End", "Location", "IsAllDay", "BusyStatus", "Categories", "Body",
         "Sensitivity", "Organizer", "CalendarName"],
    )
    def test_windows_runtime_record_fields(self, field):
        """The WinRT record carries the shared event fields."""
        assert f"{field} = $appointment" in WINDOWS_RUNTIME_QUERY_SCRIPT or f"{field} = \"" in WINDOWS_RUNTIME_QUERY_SCRIPT


class TestDayCounts:
    """Test look-behind/look-ahead computation."""

    def test_whole_days(self):
        """Exact day offsets are not rounded up."""
        assert day_counts(NOW - timedelta(days=1), NOW + timedelta(days=7), NOW) == (1, 7)

    def test_partial_days_round_up(self):
        """Partial days are rounded up."""
        start = NOW - timedelta(days=2, hours=6)
        end = NOW + timedelta(days=3, seconds=1)
        assert day_counts(start, end, NOW) == (3, 4)

    def test_future_window_clamps_behind(self):
        """A window starting in the future has zero look-behind."""
        start = NOW + timedelta(days=2)
        end = NOW + timedelta(days=5)
        assert day_counts(start, end, NOW) == (0, 5)

    def test_past_window_clamps_ahead(self):
        """A window ending in the past has zero look-ahead."""
        start = NOW - timedelta(days=5)
        end = NOW - timedelta(days=1)
        assert day_counts(start, end, NOW) == (5, 0)

    def test_default_now(self):
        """Without an explicit now, the current time is used."""
        start = datetime.now(UTC) - timedelta(days=1, hours=1)
        end = datetime.now(UTC) + timedelta(days=1, hours=1)
        assert day_counts(start, end) == (2, 2)
