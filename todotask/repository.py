# -*- coding: utf-8 -*-
"""The canonical in-memory collection of tasks."""
import logging
import threading
from dataclasses import replace
from datetime import datetime

from . import timeutil
from .errors import NotFound, StorageError, ValidationError
from .recurrence import validate_recurrence

EDITABLE_FIELDS = (
    "title",
    "details",
    "start_time",
    "end_time",
    "recurring",
    "frequency_minutes",
)

logger = logging.getLogger(__name__)


class TaskRepository():
    """Owns every Task and writes each change through to a TaskStore.

    Mutations return only after the store accepted the write. A single
    re-entrant lock guards the collection; the reminder scheduler takes the
    same lock while it evaluates and marks reminders.

    Attributes:
        store (TaskStore):          persistence backend.
        calendar (CalendarSync):    optional calendar mirror.
        clock (callable):           returns the current instant.

    """
    def __init__(self, store, calendar=None, clock=None):
        """Initializes a TaskRepository() object."""
        self.store = store
        self.calendar = calendar
        self.clock = clock or timeutil.now
        self.lock = threading.RLock()
        self.tasks = {}
        self.next_id = 1

    def __len__(self):
        return len(self.tasks)

    def __contains__(self, task_id):
        return task_id in self.tasks

    def load(self):
        """Replace the collection with the records held by the store."""
        records = self.store.load_all()
        tasks = {}
        for task in records:
            if task.id in tasks:
                raise StorageError(f"duplicate task id {task.id}")
            tasks[task.id] = task
        with self.lock:
            self.tasks = tasks
            if tasks:
                self.next_id = max(self.next_id, max(tasks) + 1)
        logger.debug("loaded %d tasks", len(tasks))
        return self

    reload = load

    @staticmethod
    def validate(task):
        """Check task invariants and normalize the recurrence fields.

        Args:
            task (Task):    the task to check.

        Returns:
            task (Task):    the task, with frequency_minutes cleared when
        the task does not recur.

        """
        if not isinstance(task.title, str) or not task.title.strip():
            raise ValidationError("title", "title must not be empty")
        if not isinstance(task.details, str):
            raise ValidationError("details", "details must be a string")
        for field in ("start_time", "end_time"):
            value = getattr(task, field)
            if not isinstance(value, datetime) or value.tzinfo is None:
                raise ValidationError(
                    field, f"{field} must be a timezone-aware timestamp")
        task = replace(
            task,
            start_time=timeutil.to_utc(task.start_time),
            end_time=timeutil.to_utc(task.end_time),
            recurring=bool(task.recurring))
        if task.end_time < task.start_time:
            raise ValidationError(
                "end_time", "end_time must not be earlier than start_time")
        if not task.recurring:
            return replace(task, frequency_minutes=None)
        validate_recurrence(task)
        return task

    def _push(self, task):
        """Mirror a task to the calendar; failures never reach the caller."""
        if self.calendar is None:
            return
        try:
            self.calendar.push(task)
        except Exception:
            logger.exception("calendar sync failed for task %s", task.id)

    def add(self, task):
        """Validate, number and persist a new task.

        Args:
            task (Task):    the new task (its id is ignored).

        Returns:
            task_id (int):  the assigned id.

        """
        task = self.validate(task)
        with self.lock:
            stamp = self.clock()
            task = replace(
                task, id=self.next_id, created=stamp, updated=stamp)
            self.store.save(task)
            self.tasks[task.id] = task
            self.next_id = task.id + 1
        logger.info("added task %s", task.id)
        self._push(task)
        return task.id

    def get(self, task_id):
        with self.lock:
            try:
                return self.tasks[task_id]
            except KeyError:
                raise NotFound(task_id) from None

    def list(self):
        """All tasks ordered by start_time, ties broken by id."""
        with self.lock:
            tasks = list(self.tasks.values())
        return sorted(tasks, key=lambda x: (x.start_time, x.id))

    def edit(self, task_id, **changes):
        """Change fields of an existing task.

        Args:
            task_id (int):  the task to change.
            changes:        new values for any of EDITABLE_FIELDS.

        Returns:
            task (Task):    the updated task.

        """
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            field = sorted(unknown)[0]
            raise ValidationError(field, f"{field} cannot be changed")
        with self.lock:
            current = self.get(task_id)
            task = self.validate(replace(current, **changes))
            task = replace(task, updated=self.clock())
            self.store.save(task)
            self.tasks[task_id] = task
        logger.info("updated task %s", task_id)
        self._push(task)
        return task

    def remove(self, task_id):
        with self.lock:
            if task_id not in self.tasks:
                raise NotFound(task_id)
            self.store.delete(task_id)
            del self.tasks[task_id]
        logger.info("removed task %s", task_id)
