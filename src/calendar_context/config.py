# SPDX-FileCopyrightText: 2025 Calendar Context Contributors
# SPDX-License-Identifier: MPL-2.0

"""Settings loading from YAML."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from calendar_context.models import IntegrationConfig
from calendar_context.shell import DEFAULT_POWERSHELL, DEFAULT_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).parent.parent.parent
DEFAULT_CONFIG_PATH = REPO_ROOT / "config" / "calendar.yaml"

_CALENDAR_LIST_KEYS = ("included_calendars", "excluded_calendars")
_BOOL_KEYS = ("enabled", "include_all_day_events")
_INTEGRATION_KEYS = (
    *_CALENDAR_LIST_KEYS,
    *_BOOL_KEYS,
    "look_ahead_days",
    "look_behind_days",
    "min_event_duration",
)


@dataclass(frozen=True)
class Settings:
    """Process-level settings."""

    integration: IntegrationConfig = field(default_factory=IntegrationConfig)
    refresh_interval_minutes: int = 15
    command_timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    powershell_executable: str = DEFAULT_POWERSHELL


def config_path() -> Path:
    """Config file location, overridable with CALENDAR_CONTEXT_CONFIG."""
    override = os.environ.get("CALENDAR_CONTEXT_CONFIG")
    return Path(override) if override else DEFAULT_CONFIG_PATH


def parse_integration_config(data: dict | None) -> IntegrationConfig:
    """Build an IntegrationConfig from the ``calendar`` section of the file.

    Unknown keys are ignored with a warning.

    Raises:
        ValueError: If a value is invalid
    """
    if not data:
        return IntegrationConfig()
    if not isinstance(data, dict):
        raise ValueError(f"calendar section must be a mapping, got {type(data).__name__}")

    kwargs = {}
    for key, value in data.items():
        if key not in _INTEGRATION_KEYS:
            logger.warning(f"Ignoring unknown calendar setting: {key}")
            continue
        if key in _CALENDAR_LIST_KEYS:
            if value is None:
                value = []
            if not isinstance(value, list):
                raise ValueError(f"{key} must be a list of calendar names")
            value = frozenset(str(name) for name in value)
        elif key in _BOOL_KEYS and not isinstance(value, bool):
            raise ValueError(f"{key} must be true or false")
        kwargs[key] = value

    return IntegrationConfig(**kwargs)


def parse_settings(data: dict | None) -> Settings:
    """Build Settings from a loaded YAML document.

    Raises:
        ValueError: If the document has the wrong shape or invalid values
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("config file must contain a mapping")

    refresh = data.get("refresh_interval_minutes", 15)
    if isinstance(refresh, bool) or not isinstance(refresh, int) or refresh <= 0:
        raise ValueError("refresh_interval_minutes must be a positive integer")

    timeout = data.get("command_timeout_seconds", DEFAULT_TIMEOUT_SECONDS)
    if isinstance(timeout, bool) or not isinstance(timeout, int | float) or timeout <= 0:
        raise ValueError("command_timeout_seconds must be a positive number")

    executable = (
        os.environ.get("CALENDAR_CONTEXT_POWERSHELL")
        or data.get("powershell_executable")
        or DEFAULT_POWERSHELL
    )

    return Settings(
        integration=parse_integration_config(data.get("calendar")),
        refresh_interval_minutes=refresh,
        command_timeout_seconds=float(timeout),
        powershell_executable=str(executable),
    )


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from YAML, falling back to defaults.

    A missing or malformed file is logged and yields the default settings.
    """
    path = path or config_path()

    if not path.exists():
        logger.warning(f"No calendar config found at {path}, using defaults")
        return parse_settings(None)

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
        return parse_settings(data)
    except (yaml.YAMLError, OSError, ValueError, TypeError) as e:
        logger.warning(f"Could not load calendar config from {path}: {e}")
        return parse_settings(None)
