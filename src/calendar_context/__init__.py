"""Local calendar context acquisition."""

from calendar_context.integration import CalendarIntegration
from calendar_context.manager import IntegrationManager
from calendar_context.models import (
    CanonicalCalendarEvent,
    EventStatus,
    IntegrationConfig,
    IntegrationState,
    IntegrationStatus,
    TimeRange,
)

__all__ = [
    "CalendarIntegration",
    "IntegrationManager",
    "CanonicalCalendarEvent",
    "EventStatus",
    "IntegrationConfig",
    "IntegrationState",
    "IntegrationStatus",
    "TimeRange",
]
