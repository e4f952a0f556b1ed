# -*- coding: utf-8 -*-
"""Task, occurrence and reminder values."""
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum


class ReminderKind(str, Enum):
    """Which edge of an occurrence a reminder is tied to."""
    PRE_START = "pre_start"
    PRE_END = "pre_end"

    @property
    def lead(self):
        """How long before the occurrence edge the reminder fires."""
        return REMINDER_LEADS[self]

    @property
    def lead_minutes(self):
        return int(self.lead.total_seconds() // 60)

    @property
    def order(self):
        """Tie-break position (PreStart before PreEnd)."""
        return 0 if self is ReminderKind.PRE_START else 1


REMINDER_LEADS = {
    ReminderKind.PRE_START: timedelta(minutes=5),
    ReminderKind.PRE_END: timedelta(minutes=2),
}


@dataclass(frozen=True)
class Task:
    """A task record.

    Attributes:
        id (int):                   assigned by the repository (None until
    added).
        title (str):                task title.
        details (str):              free text, may be empty.
        start_time (datetime):      start instant (UTC).
        end_time (datetime):        end instant (UTC), not before start.
        recurring (bool):           the task repeats every frequency_minutes.
        frequency_minutes (int):    recurrence interval, only for recurring
    tasks.
        created (datetime):         when the task was added.
        updated (datetime):         when the task was last changed.

    """
    id: object
    title: str
    details: str
    start_time: object
    end_time: object
    recurring: bool = False
    frequency_minutes: object = None
    created: object = None
    updated: object = None

    @property
    def duration(self):
        return self.end_time - self.start_time

    @property
    def frequency(self):
        """The recurrence interval as a timedelta, or None."""
        if not self.recurring or not self.frequency_minutes:
            return None
        return timedelta(minutes=self.frequency_minutes)


@dataclass(frozen=True)
class Occurrence:
    """One concrete instance of a task; index is k in start + k*f."""
    task_id: int
    start: object
    end: object
    index: int = 0


@dataclass(frozen=True)
class ReminderEvent:
    """A reminder tied to one edge of an occurrence."""
    task_id: int
    occurrence_start: object
    kind: ReminderKind
    fire_at: object
    title: str = ""
    occurrence_end: object = None

    @property
    def key(self):
        """The (task id, occurrence start, kind) triple used for dedup."""
        return (self.task_id, self.occurrence_start, self.kind)

    def sort_key(self):
        return (self.fire_at, self.task_id, self.kind.order)


class FiredSet():
    """Triples of reminders that were already delivered.

    Scheduling stays a function of (repository, now, fired set): the set is
    passed in explicitly and may be persisted by the store between runs.
    Each triple remembers the end of its occurrence, which decides when the
    entry can be forgotten.
    """
    def __init__(self, entries=None):
        self._entries = {}
        for entry in entries or ():
            self.add(entry)

    @staticmethod
    def _as_key(entry):
        if isinstance(entry, ReminderEvent):
            return entry.key
        task_id, occurrence_start, kind = entry
        return (task_id, occurrence_start, ReminderKind(kind))

    def __contains__(self, entry):
        return self._as_key(entry) in self._entries

    def __iter__(self):
        return iter(sorted(
            self._entries, key=lambda x: (x[1], x[0], x[2].order)))

    def __len__(self):
        return len(self._entries)

    def add(self, entry, occurrence_end=None):
        """Mark a reminder (event or triple) as fired.

        Args:
            entry (obj):                a ReminderEvent or a (task id,
        occurrence start, kind) triple.
            occurrence_end (datetime):  end of the occurrence (taken from
        the event when not given).

        """
        if occurrence_end is None and isinstance(entry, ReminderEvent):
            occurrence_end = entry.occurrence_end
        self._entries[self._as_key(entry)] = occurrence_end

    def occurrence_end(self, entry):
        """The recorded occurrence end of an entry, or None."""
        return self._entries.get(self._as_key(entry))

    def discard(self, entry):
        self._entries.pop(self._as_key(entry), None)

    def forget_task(self, task_id):
        """Drop every entry belonging to a task."""
        self._entries = {
            x: end for x, end in self._entries.items() if x[0] != task_id}

    def prune(self, before):
        """Drop entries whose occurrence ended before an instant.

        Entries without a recorded end fall back to the occurrence start.

        Args:
            before (datetime):  the retention horizon.

        Returns:
            removed (int):  the number of entries dropped.

        """
        kept = {
            x: end for x, end in self._entries.items()
            if (end or x[1]) >= before}
        removed = len(self._entries) - len(kept)
        self._entries = kept
        return removed
