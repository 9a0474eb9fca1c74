# SPDX-FileCopyrightText: 2025 Calendar Context Contributors
# SPDX-License-Identifier: MPL-2.0

"""Local calendar integration: read-only access to OS calendar stores.

Availability is checked once at initialization. Each acquisition runs the
strategy list, normalizes and filters the records, and replaces the event
cache. Public methods never raise; failures show up in the logs and as an
empty result with an unchanged ``last_sync``.

Callers are expected to serialize ``get_calendar_events()`` calls.
"""

import logging
from datetime import UTC, datetime, timedelta

from calendar_context.cache import EventCache
from calendar_context.filters import filter_events
from calendar_context.models import (
    CanonicalCalendarEvent,
    IntegrationConfig,
    IntegrationState,
    IntegrationStatus,
    TimeRange,
)
from calendar_context.normalize import normalize_events
from calendar_context.strategies import StrategyExecutor, default_strategies

logger = logging.getLogger(__name__)


class CalendarIntegration:
    """Read-only access to the local calendar store."""

    def __init__(
        self,
        config: IntegrationConfig | None = None,
        executor: StrategyExecutor | None = None,
    ):
        self.config = config or IntegrationConfig()
        self.executor = executor or StrategyExecutor(default_strategies())
        self.cache = EventCache()
        self.state = IntegrationState.UNINITIALIZED
        self.last_sync: datetime | None = None

    @property
    def is_available(self) -> bool:
        return self.state is IntegrationState.AVAILABLE

    async def initialize(self) -> IntegrationState:
        """Probe the calendar stores once and record the result.

        Later calls are no-ops; use ``reinitialize()`` to probe again.
        """
        if self.state is not IntegrationState.UNINITIALIZED:
            return self.state
        return await self.reinitialize()

    async def reinitialize(self) -> IntegrationState:
        """Probe again, explicitly. Never called implicitly."""
        logger.info("Initializing local calendar integration...")
        try:
            available = await self.executor.probe()
        except Exception as e:
            logger.exception(f"Calendar availability check failed: {e}")
            available = False

        self.state = IntegrationState.AVAILABLE if available else IntegrationState.UNAVAILABLE
        if available:
            logger.info("Local calendar integration initialized")
        else:
            logger.info("Calendar access not available - integration disabled")
        return self.state

    async def test_calendar_access(self) -> bool:
        """Run the availability check without changing state."""
        try:
            return await self.executor.probe()
        except Exception as e:
            logger.exception(f"Calendar access test failed: {e}")
            return False

    def default_time_range(self, now: datetime | None = None) -> TimeRange:
        """Window from look_behind_days ago to look_ahead_days ahead."""
        now = now or datetime.now(UTC)
        return TimeRange(
            start=now - timedelta(days=self.config.look_behind_days),
            end=now + timedelta(days=self.config.look_ahead_days),
        )

    async def get_calendar_events(
        self,
        time_range: TimeRange | None = None,
    ) -> list[CanonicalCalendarEvent]:
        """Fetch, normalize and filter events. Never raises.

        Args:
            time_range: Window to query (default: configured look-behind/ahead)

        Returns:
            Filtered events, possibly empty
        """
        try:
            if not self.is_available or not self.config.enabled:
                logger.info("Calendar integration not available or disabled")
                return []

            now = None
            if time_range is None:
                # Same instant for the window and its day counts
                now = datetime.now(UTC)
                time_range = self.default_time_range(now)
            logger.info(
                f"Fetching calendar events from {time_range.start.isoformat()} "
                f"to {time_range.end.isoformat()}"
            )

            result = await self.executor.acquire(time_range, now=now)
            if not result.succeeded:
                return []

            events = normalize_events(result.records)
            # Config is read here, so updates apply from the next acquisition on
            filtered = filter_events(events, self.config)

            self.cache.replace(filtered)
            self.last_sync = datetime.now(UTC)
            logger.info(f"Retrieved {len(filtered)} calendar events via {result.strategy}")
            return filtered
        except Exception as e:
            logger.exception(f"Failed to get calendar events: {e}")
            return []

    def get_status(self) -> IntegrationStatus:
        return IntegrationStatus(
            available=self.is_available,
            enabled=self.config.enabled,
            last_sync=self.last_sync,
            cached_event_count=len(self.cache),
        )

    def update_config(self, config: IntegrationConfig | None = None, **changes) -> IntegrationConfig:
        """Replace the configuration.

        Pass a full IntegrationConfig, or keyword changes to apply on top of
        the current one. Either way the config object is swapped as a whole.
        """
        new_config = config or self.config
        if changes:
            new_config = new_config.updated(**changes)
        self.config = new_config
        logger.info("Calendar integration configuration updated")
        return new_config
