# SPDX-FileCopyrightText: 2025 Calendar Context Contributors
# SPDX-License-Identifier: MPL-2.0

"""Parse calendar script output into raw event records."""

import json
import logging

from calendar_context.models import RawEvent

logger = logging.getLogger(__name__)


class RawOutputError(ValueError):
    """Script output was not a JSON array of event objects."""


def parse_raw_output(stdout: str) -> list[RawEvent]:
    """Parse the JSON emitted by a query script.

    Accepts a JSON array of objects. ConvertTo-Json emits a bare object for
    a single-element collection and nothing at all for an empty one, so a
    lone object is treated as one record and blank output as no records.
    Non-object array entries are skipped.

    Raises:
        RawOutputError: If the output is not valid JSON, or is JSON of the
            wrong shape
    """
    text = stdout.lstrip("\ufeff").strip()
    if not text:
        return []

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise RawOutputError(f"Invalid JSON from calendar script: {e}") from e

    if isinstance(data, dict):
        return [data]
    if not isinstance(data, list):
        raise RawOutputError(f"Expected a JSON array, got {type(data).__name__}")

    records = [item for item in data if isinstance(item, dict)]
    skipped = len(data) - len(records)
    if skipped:
        logger.warning(f"Skipped {skipped} non-object entries in calendar output")
    return records
