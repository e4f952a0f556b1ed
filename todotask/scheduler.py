# -*- coding: utf-8 -*-
"""Reminder scheduling.

Each occurrence of a task carries two reminders: PreStart fires 5 minutes
before the occurrence starts, PreEnd fires 2 minutes before it ends.
Evaluation is on demand: the caller supplies "now" and a FiredSet, and gets
back the reminders that became due and were not delivered before.
"""
import logging
from datetime import timedelta

from .errors import InvalidRecurrence
from .models import REMINDER_LEADS, ReminderEvent, ReminderKind
from .recurrence import occurrences_in_window
from .timeutil import to_utc

DEFAULT_LOOKBACK = timedelta(minutes=5)

# a PreStart can be due while its occurrence is still in the future
MAX_LEAD = max(REMINDER_LEADS.values())

logger = logging.getLogger(__name__)


class DueReminders():
    """Result of one evaluation: ordered events plus per-task failures.

    Iterating yields the events; ``failures`` maps task id to the
    InvalidRecurrence that kept the task out of the batch.
    """
    def __init__(self, events=None, failures=None):
        self.events = events or []
        self.failures = failures or {}

    def __iter__(self):
        return iter(self.events)

    def __len__(self):
        return len(self.events)

    def __bool__(self):
        return bool(self.events)

    @property
    def ok(self):
        return not self.failures


def reminders_for(task, occurrence):
    """Build the PreStart and PreEnd events for one occurrence.

    Args:
        task (Task):                the task the occurrence belongs to.
        occurrence (Occurrence):    the occurrence.

    Returns:
        events (list):  [PreStart, PreEnd].

    """
    return [
        ReminderEvent(
            task_id=task.id,
            occurrence_start=occurrence.start,
            kind=ReminderKind.PRE_START,
            fire_at=occurrence.start - ReminderKind.PRE_START.lead,
            title=task.title,
            occurrence_end=occurrence.end),
        ReminderEvent(
            task_id=task.id,
            occurrence_start=occurrence.start,
            kind=ReminderKind.PRE_END,
            fire_at=occurrence.end - ReminderKind.PRE_END.lead,
            title=task.title,
            occurrence_end=occurrence.end),
    ]


def _candidates(repository, window_start, window_end, failures):
    for task in repository.list():
        try:
            occurrences = list(
                occurrences_in_window(task, window_start, window_end))
        except InvalidRecurrence as err:
            logger.warning("skipping task %s: %s", task.id, err)
            failures[task.id] = err
            continue
        for occurrence in occurrences:
            yield from reminders_for(task, occurrence)


def due_reminders(repository, now, fired_set, lookback=DEFAULT_LOOKBACK):
    """Compute the reminders due at `now` and mark them fired.

    Occurrences are looked up in [now - lookback, now + MAX_LEAD]. An
    occurrence that ended before now - lookback is considered missed and
    produces no reminders. Marking happens together with the due check, so
    repeated calls with the same now and fired_set return each event once.

    Args:
        repository (TaskRepository):    the tasks.
        now (datetime):                 evaluation instant.
        fired_set (FiredSet):           reminders already delivered; updated
    in place.
        lookback (timedelta):           how far back to look for occurrences.

    Returns:
        due (DueReminders): events ordered by fire_at, task id, kind.

    """
    now = to_utc(now)
    failures = {}
    events = []
    with repository.lock:
        for event in _candidates(
                repository, now - lookback, now + MAX_LEAD, failures):
            if event.fire_at <= now and event not in fired_set:
                fired_set.add(event)
                events.append(event)
    events.sort(key=ReminderEvent.sort_key)
    logger.debug("%d reminders due at %s", len(events), now.isoformat())
    return DueReminders(events, failures)


def upcoming_reminders(repository, now, horizon):
    """Preview reminders firing after `now` and up to `now + horizon`.

    Nothing is marked fired.

    Args:
        repository (TaskRepository):    the tasks.
        now (datetime):                 the reference instant.
        horizon (timedelta):            how far ahead to look.

    Returns:
        upcoming (DueReminders):    events ordered by fire_at, task id, kind.

    """
    now = to_utc(now)
    failures = {}
    with repository.lock:
        events = [
            event for event in _candidates(
                repository, now, now + horizon + MAX_LEAD, failures)
            if now < event.fire_at <= now + horizon
        ]
    events.sort(key=ReminderEvent.sort_key)
    return DueReminders(events, failures)


def deliver(events, dispatcher):
    """Hand each event to a dispatcher once.

    Dispatcher failures are logged and not retried.

    Args:
        events (iterable):                      ReminderEvent values.
        dispatcher (NotificationDispatcher):    the renderer.

    Returns:
        delivered (int):    the number of events delivered without error.

    """
    delivered = 0
    for event in events:
        try:
            dispatcher.deliver(event)
        except Exception:
            logger.exception(
                "delivery failed for task %s (%s)",
                event.task_id, event.kind.value)
        else:
            delivered += 1
    flush = getattr(dispatcher, "flush", None)
    if flush is not None:
        flush()
    return delivered
