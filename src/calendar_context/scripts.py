# SPDX-FileCopyrightText: 2025 Calendar Context Contributors
# SPDX-License-Identifier: MPL-2.0

"""PowerShell scripts for querying the local calendar stores.

Scripts are templates with two day-count tokens. They are only ever
filled in through ``build_script``, which accepts nothing but
non-negative integers.
"""

import math
from datetime import datetime

LOOK_BEHIND_TOKEN = "{look_behind_days}"
LOOK_AHEAD_TOKEN = "{look_ahead_days}"

AVAILABLE_SIGNAL = "available"

SECONDS_PER_DAY = 24 * 60 * 60


class ScriptParameterError(ValueError):
    """A script parameter was not a non-negative integer."""


# Outlook COM (MAPI calendar folder 9)
OUTLOOK_QUERY_SCRIPT = r"""
$ErrorActionPreference = "Stop"
try {
  $outlook = New-Object -ComObject Outlook.Application
  $namespace = $outlook.GetNameSpace("MAPI")
  $calendar = $namespace.GetDefaultFolder(9)

  $startDate = (Get-Date).AddDays(-{look_behind_days}).Date
  $endDate = (Get-Date).AddDays({look_ahead_days}).Date

  # Order matters: sort, expand recurrences, then restrict to the window.
  # An unrestricted expansion of an open-ended series never ends.
  $items = $calendar.Items
  $items.Sort("[Start]")
  $items.IncludeRecurrences = $true
  $filter = "[Start] >= '" + $startDate.ToString("g") + "' AND [Start] <= '" + $endDate.ToString("g") + "'"
  $appointments = $items.Restrict($filter)

  $events = @()
  foreach ($appointment in $appointments) {
    $events += @{
      Subject = $appointment.Subject
      Start = $appointment.Start.ToString("yyyy-MM-ddTHH:mm:ss")
      End = $appointment.End.ToString("yyyy-MM-ddTHH:mm:ss")
      Location = $appointment.Location
      IsAllDay = $appointment.AllDayEvent
      BusyStatus = $appointment.BusyStatus
      Categories = $appointment.Categories
      Body = $appointment.Body
      Sensitivity = $appointment.Sensitivity
      Organizer = $appointment.Organizer
      RequiredAttendees = $appointment.RequiredAttendees
      OptionalAttendees = $appointment.OptionalAttendees
      Resources = $appointment.Resources
      CalendarName = $appointment.Parent.Name
    }
  }

  ConvertTo-Json -InputObject @($events) -Depth 3 -Compress
} catch {
  [Console]::Error.WriteLine("Failed to access Outlook calendar: $_")
  exit 1
}
"""

# Windows.ApplicationModel.Appointments (WinRT)
WINDOWS_RUNTIME_QUERY_SCRIPT = r"""
$ErrorActionPreference = "Stop"
try {
  Add-Type -AssemblyName "Windows.ApplicationModel, Version=10.0.0.0, Culture=neutral, PublicKeyToken=null, ContentType=WindowsRuntime"
  Add-Type -AssemblyName "Windows.ApplicationModel.Appointments, Version=10.0.0.0, Culture=neutral, PublicKeyToken=null, ContentType=WindowsRuntime"

  $store = [Windows.ApplicationModel.Appointments.AppointmentManager]::RequestStoreAsync([Windows.ApplicationModel.Appointments.AppointmentStoreAccessType]::AllCalendarsReadOnly).GetAwaiter().GetResult()

  $startDate = (Get-Date).AddDays(-{look_behind_days}).Date
  $endDate = (Get-Date).AddDays({look_ahead_days}).Date

  $appointments = $store.FindAppointmentsAsync($startDate, $endDate.Subtract($startDate)).GetAwaiter().GetResult()

  $events = @()
  foreach ($appointment in $appointments) {
    $events += @{
      Subject = $appointment.Subject
      Start = $appointment.StartTime.LocalDateTime.ToString("yyyy-MM-ddTHH:mm:ss")
      End = $appointment.StartTime.Add($appointment.Duration).LocalDateTime.ToString("yyyy-MM-ddTHH:mm:ss")
      Location = $appointment.Location
      IsAllDay = $appointment.AllDay
      BusyStatus = $appointment.BusyStatus.ToString()
      Categories = $appointment.Categories -join ","
      Body = $appointment.Details
      Sensitivity = $appointment.Sensitivity.ToString()
      Organizer = $appointment.Organizer.DisplayName
      CalendarName = "Windows Calendar"
    }
  }

  ConvertTo-Json -InputObject @($events) -Depth 3 -Compress
} catch {
  [Console]::Error.WriteLine("Failed to access Windows Calendar: $_")
  exit 1
}
"""

OUTLOOK_PROBE_SCRIPT = r"""
try {
  $outlook = New-Object -ComObject Outlook.Application -ErrorAction Stop
  $namespace = $outlook.GetNameSpace("MAPI")
  $null = $namespace.GetDefaultFolder(9)
  "available"
} catch {
  "unavailable"
}
"""

WINDOWS_RUNTIME_PROBE_SCRIPT = r"""
try {
  Add-Type -AssemblyName "Windows.ApplicationModel.Appointments, Version=10.0.0.0, Culture=neutral, PublicKeyToken=null, ContentType=WindowsRuntime" -ErrorAction Stop
  "available"
} catch {
  "unavailable"
}
"""


def _check_day_count(name: str, value) -> int:
    # bool is an int subclass; True must not become "1" in a script
    if isinstance(value, bool) or not isinstance(value, int):
        raise ScriptParameterError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise ScriptParameterError(f"{name} must be non-negative, got {value}")
    return value


def build_script(template: str, look_behind_days: int, look_ahead_days: int) -> str:
    """Fill the day-count tokens of a query script.

    Raises:
        ScriptParameterError: If either value is not a non-negative int
    """
    behind = _check_day_count("look_behind_days", look_behind_days)
    ahead = _check_day_count("look_ahead_days", look_ahead_days)
    return template.replace(LOOK_BEHIND_TOKEN, str(behind)).replace(LOOK_AHEAD_TOKEN, str(ahead))


def day_counts(start: datetime, end: datetime, now: datetime | None = None) -> tuple[int, int]:
    """Compute (look_behind_days, look_ahead_days) for a query window.

    Look-behind is the ceiling of elapsed days from start to now, look-ahead
    the ceiling of remaining days from now to end. Both are clamped at zero
    so a window entirely in the future or past still yields a valid script.
    """
    if now is None:
        now = datetime.now(start.tzinfo)
    behind = math.ceil((now - start).total_seconds() / SECONDS_PER_DAY)
    ahead = math.ceil((end - now).total_seconds() / SECONDS_PER_DAY)
    return max(behind, 0), max(ahead, 0)
