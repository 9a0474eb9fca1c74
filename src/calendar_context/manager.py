# SPDX-FileCopyrightText: 2025 Calendar Context Contributors
# SPDX-License-Identifier: MPL-2.0

"""Process-level owner of the calendar integration and its refresh loop."""

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from calendar_context.config import Settings
from calendar_context.integration import CalendarIntegration
from calendar_context.shell import powershell_runner
from calendar_context.strategies import StrategyExecutor, default_strategies

logger = logging.getLogger(__name__)

REFRESH_JOB_ID = "calendar_refresh"


class IntegrationManager:
    """Owns the single CalendarIntegration of this process.

    Construct once at startup and pass it (or ``manager.calendar``) to
    consumers by reference.
    """

    def __init__(self, settings: Settings, calendar: CalendarIntegration | None = None):
        self.settings = settings
        if calendar is None:
            runner = powershell_runner(
                executable=settings.powershell_executable,
                timeout=settings.command_timeout_seconds,
            )
            calendar = CalendarIntegration(
                config=settings.integration,
                executor=StrategyExecutor(default_strategies(runner)),
            )
        self.calendar = calendar
        self.scheduler: AsyncIOScheduler | None = None

    async def start(self) -> None:
        """Initialize the integration (the one availability check)."""
        await self.calendar.initialize()
        status = self.calendar.get_status()
        logger.info(f"Calendar integration available={status.available} enabled={status.enabled}")

    async def refresh(self) -> int:
        """Run one acquisition and return the number of events kept."""
        events = await self.calendar.get_calendar_events()
        return len(events)

    def schedule_refresh(self, scheduler: AsyncIOScheduler) -> None:
        """Add the periodic refresh job.

        One instance at a time, missed runs coalesced, so acquisitions
        from the loop never overlap.
        """
        minutes = self.settings.refresh_interval_minutes
        scheduler.add_job(
            self.refresh,
            trigger=IntervalTrigger(minutes=minutes),
            id=REFRESH_JOB_ID,
            name="Calendar refresh",
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        logger.info(f"Scheduled calendar refresh every {minutes} minutes")

    async def run_scheduler(self) -> AsyncIOScheduler:
        """Start the refresh scheduler on the running event loop."""
        scheduler = AsyncIOScheduler()
        self.schedule_refresh(scheduler)
        scheduler.start()
        self.scheduler = scheduler
        logger.info("Calendar refresh scheduler started")
        return scheduler

    def shutdown(self) -> None:
        if self.scheduler is not None:
            self.scheduler.shutdown(wait=False)
            self.scheduler = None
