# -*- coding: utf-8 -*-
"""Calendar mirroring.

``IcsCalendarSync`` writes each task as an iCalendar VEVENT file that
calendar applications can subscribe to or import. The same formatting backs
the ``export`` command.
"""
import logging
import os
from abc import ABC, abstractmethod
from textwrap import TextWrapper

from .config import APP_NAME
from .models import ReminderKind
from .timeutil import now as utcnow

PRODID = f"-//todotask//{APP_NAME}//EN"

logger = logging.getLogger(__name__)


class CalendarSync(ABC):
    """Receives finalized tasks after they were added or changed."""

    @abstractmethod
    def push(self, task):
        """Mirror one Task to the calendar."""


def _export_timestamp(timeobj):
    """Print a datetime string in iCalendar-compatible format."""
    return timeobj.strftime("%Y%m%dT%H%M%SZ")


def _export_wrap(text, length=75):
    """Wraps text that exceeds a given line length, with an
    indentation of one space on the next line.

    Args:
        text (str):     the text to be wrapped.
        length (int):   the maximum line length (default: 75).

    Returns:
        wrapped (str):  the wrapped text.

    """
    wrapper = TextWrapper(
        width=length,
        subsequent_indent=' ',
        drop_whitespace=False,
        break_long_words=True)
    return '\r\n'.join(wrapper.wrap(text))


def _escape(text):
    return (text.replace('\\', '\\\\')
            .replace(';', '\\;')
            .replace(',', '\\,')
            .replace('\n', '\\n'))


def _alarm(trigger, description):
    return (
        "BEGIN:VALARM\r\n"
        f"{trigger}\r\n"
        "ACTION:DISPLAY\r\n"
        f"{_export_wrap('DESCRIPTION:' + _escape(description))}\r\n"
        "END:VALARM\r\n"
    )


def task_to_vevent(task):
    """Format a task as an iCalendar VEVENT block.

    Args:
        task (Task):    the task.

    Returns:
        vevent (str):   CRLF-terminated VEVENT lines.

    """
    stamp = task.updated or task.created or utcnow()
    created = task.created or stamp
    vevent = (
        "BEGIN:VEVENT\r\n"
        f"UID:{task.id}@{APP_NAME}\r\n"
        f"DTSTAMP:{_export_timestamp(stamp)}\r\n"
        f"CREATED:{_export_timestamp(created)}\r\n"
        f"DTSTART:{_export_timestamp(task.start_time)}\r\n"
        f"DTEND:{_export_timestamp(task.end_time)}\r\n"
        f"{_export_wrap('SUMMARY:' + _escape(task.title))}\r\n"
    )
    if task.details:
        vevent += f"{_export_wrap('DESCRIPTION:' + _escape(task.details))}\r\n"
    if task.recurring and task.frequency_minutes:
        vevent += f"RRULE:FREQ=MINUTELY;INTERVAL={task.frequency_minutes}\r\n"
    lead = ReminderKind.PRE_START.lead_minutes
    vevent += _alarm(
        f"TRIGGER:-PT{lead}M", f"'{task.title}' starts in {lead} minutes")
    lead = ReminderKind.PRE_END.lead_minutes
    vevent += _alarm(
        f"TRIGGER;RELATED=END:-PT{lead}M",
        f"'{task.title}' ends in {lead} minutes")
    vevent += "END:VEVENT\r\n"
    return vevent


def build_calendar(tasks):
    """Wrap tasks in a VCALENDAR document.

    Args:
        tasks (iterable):   Task values.

    Returns:
        ical (str): the iCalendar document.

    """
    ical = (
        "BEGIN:VCALENDAR\r\n"
        "VERSION:2.0\r\n"
        f"PRODID:{PRODID}\r\n"
    )
    for task in tasks:
        ical += task_to_vevent(task)
    ical += "END:VCALENDAR\r\n"
    return ical


class IcsCalendarSync(CalendarSync):
    """Writes ``<id>.ics`` files into a directory.

    Attributes:
        directory (str):    where calendar files are written.

    """
    def __init__(self, directory):
        """Initializes an IcsCalendarSync() object."""
        self.directory = directory

    def filename(self, task_id):
        return os.path.join(self.directory, f"{task_id}.ics")

    def push(self, task):
        os.makedirs(self.directory, exist_ok=True)
        filename = self.filename(task.id)
        with open(filename, "w", encoding="utf-8", newline="") as ical_file:
            ical_file.write(build_calendar([task]))
        logger.debug("wrote %s", filename)
