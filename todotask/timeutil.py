# -*- coding: utf-8 -*-
"""Timestamp parsing, formatting and arithmetic.

All instants handled by the core are timezone-aware and normalized to UTC.
Local time only appears when formatting for display.
"""
import re
from datetime import datetime, timedelta, timezone

import tzlocal
from dateutil import parser as dtparser

from .errors import InvalidTimestamp


def parse_timestamp(timestr, field=None):
    """Parse an ISO-8601 timestamp carrying an explicit UTC offset.

    Args:
        timestr (str):  the timestamp, e.g. "2024-01-01T09:00:00Z".
        field (str):    the field being parsed (used in errors).

    Returns:
        timeobj (datetime): the instant, normalized to UTC.

    """
    if isinstance(timestr, datetime):
        timeobj = timestr
    elif isinstance(timestr, str):
        try:
            timeobj = dtparser.isoparse(timestr.strip())
        except (ValueError, OverflowError):
            raise InvalidTimestamp(timestr, field) from None
    else:
        raise InvalidTimestamp(timestr, field)
    # a naive timestamp is ambiguous across machines
    if timeobj.tzinfo is None or timeobj.utcoffset() is None:
        raise InvalidTimestamp(timestr, field)
    try:
        return timeobj.astimezone(timezone.utc)
    except (ValueError, OverflowError):
        raise InvalidTimestamp(timestr, field) from None


def now():
    """Current instant in UTC."""
    return datetime.now(tz=timezone.utc)


def to_utc(timeobj):
    """Normalize an aware datetime to UTC.

    Args:
        timeobj (datetime): an aware datetime.

    Returns:
        timeobj (datetime): the same instant in UTC.

    """
    if timeobj.tzinfo is None:
        raise InvalidTimestamp(timeobj)
    return timeobj.astimezone(timezone.utc)


def add_minutes(timeobj, minutes):
    """Shift an instant by a (possibly negative) number of minutes."""
    return to_utc(timeobj) + timedelta(minutes=minutes)


def minutes_between(start, end):
    """Whole and fractional minutes from start to end."""
    return (to_utc(end) - to_utc(start)).total_seconds() / 60


def local_zone():
    """The local timezone used for display."""
    return tzlocal.get_localzone()


def format_timestamp(timeobj, pretty=False, tz=None):
    """Convert a datetime obj to a string in the display timezone.

    Args:
        timeobj (datetime): a datetime object.
        pretty (bool):      return a pretty formatted string.
        tz (tzinfo):        display timezone (default: local zone).

    Returns:
        timestamp (str): "%Y-%m-%d %H:%M:%S" or "%Y-%m-%d[ %H:%M]".

    """
    timeobj = timeobj.astimezone(tz=tz or local_zone())
    if pretty:
        if timeobj.strftime("%H:%M") == "00:00":
            timestamp = timeobj.strftime("%Y-%m-%d")
        else:
            timestamp = timeobj.strftime("%Y-%m-%d %H:%M")
    else:
        timestamp = timeobj.strftime("%Y-%m-%d %H:%M:%S")
    return timestamp


def calc_duration(expression, default=None):
    """Calculates the duration represented by an expression in the form
    (x)d(y)h(z)m, (y)h(z)m, or (z)m for days, hours, and minutes.

    Args:
        expression (str):       the duration expression.
        default (timedelta):    returned when the expression is empty or
    does not describe a positive duration.

    Returns:
        duration (timedelta):   the duration.

    """
    if not expression:
        return default
    expression = str(expression).lower()
    d_search = re.search(r"\d+d", expression)
    h_search = re.search(r"\d+h", expression)
    m_search = re.search(r"\d+m", expression)
    days = int(d_search[0].replace('d', '')) if d_search else 0
    hours = int(h_search[0].replace('h', '')) if h_search else 0
    minutes = int(m_search[0].replace('m', '')) if m_search else 0
    duration = timedelta(days=days, hours=hours, minutes=minutes)

    if not duration:
        return default

    return duration
