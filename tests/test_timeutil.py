# tests/test_timeutil.py

from datetime import datetime, timedelta, timezone

import pytest

from todotask.errors import InvalidTimestamp
from todotask.timeutil import (
    add_minutes,
    calc_duration,
    format_timestamp,
    minutes_between,
    now,
    parse_timestamp,
)


def test_parse_timestamp_zulu_is_utc() -> None:
    parsed = parse_timestamp("2024-01-01T09:00:00Z")
    assert parsed == datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)
    assert parsed.utcoffset() == timedelta(0)


def test_parse_timestamp_normalizes_offsets_to_utc() -> None:
    parsed = parse_timestamp("2024-01-01T11:30:00+02:00")
    assert parsed.tzinfo == timezone.utc
    assert parsed.hour == 9
    assert parsed.minute == 30


@pytest.mark.parametrize(
    "value",
    [
        "2024-01-01T09:00:00",
        "tomorrow",
        "",
        "2024-13-01T09:00:00Z",
        "0001-01-01T00:00:00+01:00",
        "9999-12-31T23:30:00-01:00",
        None,
        42,
    ],
)
def test_parse_timestamp_rejects_ambiguous_or_invalid(value) -> None:
    with pytest.raises(InvalidTimestamp):
        parse_timestamp(value)


def test_parse_timestamp_error_names_field() -> None:
    with pytest.raises(InvalidTimestamp) as excinfo:
        parse_timestamp("nope", "start_time")
    assert excinfo.value.field == "start_time"
    assert "InvalidTimestamp (start_time)" in excinfo.value.describe()


def test_now_is_aware_utc() -> None:
    assert now().tzinfo == timezone.utc


def test_minute_arithmetic() -> None:
    start = parse_timestamp("2024-01-01T23:58:00Z")
    later = add_minutes(start, 5)
    assert later == parse_timestamp("2024-01-02T00:03:00Z")
    assert minutes_between(start, later) == 5
    assert add_minutes(start, -1) == parse_timestamp("2024-01-01T23:57:00Z")


def test_format_timestamp_pretty_drops_midnight() -> None:
    midnight = parse_timestamp("2024-01-01T00:00:00Z")
    assert format_timestamp(midnight, pretty=True, tz=timezone.utc) == "2024-01-01"
    assert format_timestamp(midnight, tz=timezone.utc) == "2024-01-01 00:00:00"
    morning = parse_timestamp("2024-01-01T09:05:00Z")
    assert format_timestamp(morning, pretty=True, tz=timezone.utc) == "2024-01-01 09:05"


def test_calc_duration() -> None:
    assert calc_duration("1d2h3m") == timedelta(days=1, hours=2, minutes=3)
    assert calc_duration("90m") == timedelta(minutes=90)
    assert calc_duration("", default=timedelta(hours=1)) == timedelta(hours=1)
    assert calc_duration("soon") is None
