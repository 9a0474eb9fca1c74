# SPDX-FileCopyrightText: 2025 Calendar Context Contributors
# SPDX-License-Identifier: MPL-2.0

"""Calendar acquisition strategies and the executor that runs them in order.

Each strategy queries one local calendar store through a single
PowerShell process. The executor tries them in order and returns the
first success; nothing raised by a strategy escapes it.
"""

import logging
from collections.abc import Sequence
from datetime import datetime

from calendar_context import scripts
from calendar_context.models import AcquisitionResult, RawEvent, TimeRange
from calendar_context.parser import RawOutputError, parse_raw_output
from calendar_context.shell import ScriptRunner, powershell_runner

logger = logging.getLogger(__name__)


class StrategyFailure(Exception):
    """One acquisition attempt failed."""

    def __init__(self, strategy: str, reason: str):
        super().__init__(f"{strategy}: {reason}")
        self.strategy = strategy
        self.reason = reason


class PowerShellStrategy:
    """Query a calendar store by running a PowerShell script."""

    name = "powershell"
    query_template = ""
    probe_script = ""

    def __init__(self, runner: ScriptRunner | None = None):
        self.runner = runner or powershell_runner()

    async def fetch(self, time_range: TimeRange, now: datetime | None = None) -> list[RawEvent]:
        """Fetch raw events for a time range.

        Raises:
            StrategyFailure: On spawn error, timeout, non-zero exit, stderr
                output or unparsable stdout
        """
        try:
            behind, ahead = scripts.day_counts(time_range.start, time_range.end, now)
            script = scripts.build_script(self.query_template, behind, ahead)
        except (scripts.ScriptParameterError, TypeError) as e:
            raise StrategyFailure(self.name, f"invalid time range: {e}") from e

        result = await self.runner(script)

        if result.error:
            raise StrategyFailure(self.name, result.error)
        if result.exit_code != 0:
            raise StrategyFailure(
                self.name,
                f"exited with code {result.exit_code}: {result.stderr.strip()}",
            )
        if result.stderr.strip():
            raise StrategyFailure(self.name, f"stderr: {result.stderr.strip()}")

        try:
            return parse_raw_output(result.stdout)
        except RawOutputError as e:
            raise StrategyFailure(self.name, str(e)) from e

    async def probe(self) -> bool:
        """Check whether this strategy's calendar store responds."""
        result = await self.runner(self.probe_script)
        return result.success and result.stdout.strip() == scripts.AVAILABLE_SIGNAL


class OutlookComStrategy(PowerShellStrategy):
    """Outlook desktop calendar through its COM automation interface."""

    name = "outlook-com"
    query_template = scripts.OUTLOOK_QUERY_SCRIPT
    probe_script = scripts.OUTLOOK_PROBE_SCRIPT


class WindowsRuntimeStrategy(PowerShellStrategy):
    """Windows appointment store through the WinRT Appointments API."""

    name = "windows-runtime"
    query_template = scripts.WINDOWS_RUNTIME_QUERY_SCRIPT
    probe_script = scripts.WINDOWS_RUNTIME_PROBE_SCRIPT


def default_strategies(runner: ScriptRunner | None = None) -> list[PowerShellStrategy]:
    """Primary then secondary strategy, sharing one runner."""
    runner = runner or powershell_runner()
    return [OutlookComStrategy(runner), WindowsRuntimeStrategy(runner)]


class StrategyExecutor:
    """Run strategies in order until one succeeds."""

    def __init__(self, strategies: Sequence[PowerShellStrategy]):
        self.strategies = list(strategies)

    async def probe(self) -> bool:
        """Return True if any strategy's store is reachable. Never raises."""
        for strategy in self.strategies:
            try:
                if await strategy.probe():
                    logger.info(f"Calendar store reachable via {strategy.name}")
                    return True
                logger.info(f"Calendar store not reachable via {strategy.name}")
            except Exception as e:
                logger.warning(f"Availability check via {strategy.name} failed: {e}")
        return False

    async def acquire(self, time_range: TimeRange, now: datetime | None = None) -> AcquisitionResult:
        """Fetch raw events with fallback. Never raises.

        Returns:
            AcquisitionResult naming the strategy that succeeded, or an empty
            result with no strategy when all of them failed
        """
        for strategy in self.strategies:
            try:
                records = await strategy.fetch(time_range, now)
            except StrategyFailure as e:
                logger.warning(f"Calendar strategy failed, trying next: {e}")
                continue
            except Exception as e:
                logger.exception(f"Unexpected error in calendar strategy {strategy.name}: {e}")
                continue
            logger.debug(f"{strategy.name} returned {len(records)} raw records")
            return AcquisitionResult(records=records, strategy=strategy.name)

        logger.error("All calendar access methods failed")
        return AcquisitionResult()
