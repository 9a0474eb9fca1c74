# SPDX-FileCopyrightText: 2025 Calendar Context Contributors
# SPDX-License-Identifier: MPL-2.0

"""Calendar context CLI commands.

All commands output JSON.
"""

import asyncio
import json
import sys

import click

from calendar_context.config import load_settings
from calendar_context.manager import IntegrationManager


def _build_manager(force_enable: bool = False) -> IntegrationManager:
    settings = load_settings()
    manager = IntegrationManager(settings)
    if force_enable:
        manager.calendar.update_config(enabled=True)
    return manager


async def _fetch_events(manager: IntegrationManager):
    await manager.start()
    return await manager.calendar.get_calendar_events()


@click.group()
def calendar():
    """Local calendar context commands."""
    pass


@calendar.command("probe")
def probe_cmd():
    """Check whether a local calendar store is reachable."""
    try:
        manager = _build_manager()
        available = asyncio.run(manager.calendar.test_calendar_access())
        click.echo(json.dumps({"available": available}, indent=2))
    except Exception as e:
        click.echo(json.dumps({"error": str(e)}), err=True)
        sys.exit(1)


@calendar.command("events")
@click.option("--days-back", default=None, type=click.IntRange(min=0), help="Days in the past to include")
@click.option("--days-forward", default=None, type=click.IntRange(min=0), help="Days in the future to include")
@click.option("--force-enable", is_flag=True, help="Fetch even if disabled in config")
def events_cmd(days_back: int | None, days_forward: int | None, force_enable: bool):
    """Fetch calendar events once and print them."""
    try:
        manager = _build_manager(force_enable)
        # Window options override the configured defaults for this run only
        changes = {}
        if days_back is not None:
            changes["look_behind_days"] = days_back
        if days_forward is not None:
            changes["look_ahead_days"] = days_forward
        if changes:
            manager.calendar.update_config(**changes)

        events = asyncio.run(_fetch_events(manager))
        click.echo(json.dumps([event.to_dict() for event in events], indent=2))
    except Exception as e:
        click.echo(json.dumps({"error": str(e)}), err=True)
        sys.exit(1)


@calendar.command("status")
def status_cmd():
    """Initialize and print the integration status."""
    try:
        manager = _build_manager()
        asyncio.run(manager.start())
        click.echo(json.dumps(manager.calendar.get_status().to_dict(), indent=2))
    except Exception as e:
        click.echo(json.dumps({"error": str(e)}), err=True)
        sys.exit(1)


def main() -> None:
    calendar()


if __name__ == "__main__":
    main()
