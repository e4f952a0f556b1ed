# -*- coding: utf-8 -*-
"""Expansion of tasks into occurrences.

A recurring task repeats every ``frequency_minutes`` forever: occurrence k
spans [start + k*f, end + k*f]. The series is never materialized. Callers
ask for a window and the first index inside it is computed directly, so a
window far in the future costs the same as one near the task start.
"""
import itertools
from datetime import timedelta

from .errors import InvalidRecurrence
from .models import Occurrence
from .timeutil import to_utc

MIN_FREQUENCY_MINUTES = 1


def validate_recurrence(task):
    """Check the recurrence fields of a task.

    Args:
        task (Task):    the task to check.

    """
    if not task.recurring:
        return
    freq = task.frequency_minutes
    if freq is None:
        raise InvalidRecurrence(
            "recurring task requires frequency_minutes", task.id)
    if isinstance(freq, bool) or not isinstance(freq, int):
        raise InvalidRecurrence(
            f"frequency_minutes must be an integer, got {freq!r}", task.id)
    if freq < MIN_FREQUENCY_MINUTES:
        raise InvalidRecurrence(
            "frequency_minutes must be at least "
            f"{MIN_FREQUENCY_MINUTES}, got {freq}", task.id)
    try:
        task.end_time + timedelta(minutes=freq)
    except OverflowError:
        raise InvalidRecurrence(
            f"frequency_minutes {freq} is out of range", task.id) from None


def _ceil_div(delta, step):
    return -((-delta) // step)


def first_index(task, window_start):
    """The smallest k whose occurrence ends at or after window_start.

    Args:
        task (Task):                a valid recurring task.
        window_start (datetime):    start of the query window, or None.

    Returns:
        k (int):    the first occurrence index touching the window.

    """
    if window_start is None:
        return 0
    k = _ceil_div(to_utc(window_start) - task.end_time, task.frequency)
    return max(0, k)


def occurrence_at(task, k):
    """Build occurrence k of a task.

    Args:
        task (Task):    the task.
        k (int):        occurrence index (only 0 for one-off tasks).

    Returns:
        occurrence (Occurrence):    the occurrence.

    """
    if k < 0 or (k and not task.recurring):
        raise IndexError(f"task {task.id} has no occurrence {k}")
    if k == 0:
        return Occurrence(task.id, task.start_time, task.end_time, 0)
    offset = task.frequency * k
    return Occurrence(
        task.id, task.start_time + offset, task.end_time + offset, k)


def _intersects(occurrence, window_start, window_end):
    if window_end is not None and occurrence.start > window_end:
        return False
    if window_start is not None and occurrence.end < window_start:
        return False
    return True


def _expand(task, window_start, window_end):
    if not task.recurring:
        base = occurrence_at(task, 0)
        if _intersects(base, window_start, window_end):
            yield base
        return
    for k in itertools.count(first_index(task, window_start)):
        try:
            occurrence = occurrence_at(task, k)
        except OverflowError:
            # the series ends at the largest representable date
            return
        if window_end is not None and occurrence.start > window_end:
            return
        yield occurrence


def occurrences_in_window(
        task,
        window_start=None,
        window_end=None,
        max_occurrences=None):
    """Lazily yield the occurrences of a task that touch a window.

    Intervals are closed: an occurrence ending exactly at window_start, or
    starting exactly at window_end, is included. With no window_end the
    sequence of a recurring task is infinite; every call starts afresh.

    Args:
        task (Task):                the task to expand.
        window_start (datetime):    start of the window (None: from k=0).
        window_end (datetime):      end of the window (None: unbounded).
        max_occurrences (int):      stop after this many occurrences.

    Returns:
        occurrences (iterator):     Occurrence values in start order.

    """
    validate_recurrence(task)
    if window_start is not None:
        window_start = to_utc(window_start)
    if window_end is not None:
        window_end = to_utc(window_end)
        if window_start is not None and window_end < window_start:
            raise ValueError("window_end is earlier than window_start")
    occurrences = _expand(task, window_start, window_end)
    if max_occurrences is not None:
        occurrences = itertools.islice(occurrences, max_occurrences)
    return occurrences


def next_occurrence(task, after):
    """Find the first occurrence starting strictly after an instant.

    Args:
        task (Task):        the task.
        after (datetime):   the reference instant.

    Returns:
        occurrence (Occurrence):    the next occurrence, or None for a
    one-off task that already started or a series past the largest date.

    """
    validate_recurrence(task)
    after = to_utc(after)
    if not task.recurring:
        if task.start_time > after:
            return occurrence_at(task, 0)
        return None
    k = max(0, (after - task.start_time) // task.frequency + 1)
    try:
        return occurrence_at(task, k)
    except OverflowError:
        return None
