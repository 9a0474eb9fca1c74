# SPDX-FileCopyrightText: 2025 Calendar Context Contributors
# SPDX-License-Identifier: MPL-2.0

"""Tests for calendar script output parsing."""

import pytest

from calendar_context.parser import RawOutputError, parse_raw_output


def test_empty_array_is_no_events():
    """'[]' parses to an empty list."""
    assert parse_raw_output("[]") == []


def test_blank_output_is_no_events():
    """ConvertTo-Json prints nothing for an empty collection."""
    assert parse_raw_output("  \r\n") == []


def test_array_of_objects():
    """Each object becomes one record."""
    stdout = '[{"Subject": "A", "Start": "2026-01-05T10:00:00"}, {"Subject": "B"}]'
    records = parse_raw_output(stdout)
    assert [r["Subject"] for r in records] == ["A", "B"]


def test_single_object_is_one_record():
    """A bare object is treated as a one-element batch."""
    records = parse_raw_output('{"Subject": "Solo"}')
    assert records == [{"Subject": "Solo"}]


def test_utf8_bom_stripped():
    """A leading byte-order mark does not break parsing."""
    assert parse_raw_output('\ufeff[{"Subject": "A"}]') == [{"Subject": "A"}]


def test_non_object_entries_skipped():
    """Scalars inside the array are ignored."""
    assert parse_raw_output('[1, {"Subject": "A"}, "x"]') == [{"Subject": "A"}]


@pytest.mark.parametrize("stdout", ["not json", "[{", "Failed to access calendar"])
def test_invalid_json_raises(stdout):
    """Unparsable output is an error."""
    with pytest.raises(RawOutputError):
        parse_raw_output(stdout)


@pytest.mark.parametrize("stdout", ['"available"', "42", "null"])
def test_wrong_shape_raises(stdout):
    """JSON that is not an array or object is an error."""
    with pytest.raises(RawOutputError):
        parse_raw_output(stdout)
