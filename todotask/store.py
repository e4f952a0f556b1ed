# -*- coding: utf-8 -*-
"""Task persistence.

``TaskStore`` is the interface the repository writes through.
``YamlTaskStore`` keeps one YAML file per task in a data directory, plus a
``fired.yml`` file recording reminders that were already delivered.
"""
import logging
import os
import tempfile
from abc import ABC, abstractmethod

import yaml

from .errors import StorageError, TodoTaskError
from .models import FiredSet, ReminderKind, Task
from .timeutil import parse_timestamp

FIRED_FILE = "fired.yml"

logger = logging.getLogger(__name__)


class TaskStore(ABC):
    """Durable storage for task records."""

    @abstractmethod
    def load_all(self):
        """Return every stored Task."""

    @abstractmethod
    def save(self, task):
        """Create or replace the record for a task."""

    @abstractmethod
    def delete(self, task_id):
        """Remove the record for a task id."""


def _timestr(timeobj):
    return timeobj.isoformat() if timeobj else None


def task_to_record(task):
    """Convert a Task into the mapping written to disk.

    Args:
        task (Task):    the task.

    Returns:
        data (dict):    {"task": {...}} with ISO-8601 timestamps.

    """
    return {
        "task": {
            "id": task.id,
            "title": task.title,
            "details": task.details,
            "start_time": _timestr(task.start_time),
            "end_time": _timestr(task.end_time),
            "recurring": bool(task.recurring),
            "frequency_minutes": (
                task.frequency_minutes if task.recurring else None),
            "created": _timestr(task.created),
            "updated": _timestr(task.updated),
        }
    }


def task_from_record(data):
    """Build a Task from a mapping read from disk.

    Args:
        data (dict):    the parsed file contents.

    Returns:
        task (Task):    the task.

    """
    if not isinstance(data, dict) or not isinstance(data.get("task"), dict):
        raise ValueError("no task data")
    record = data["task"]
    task_id = record.get("id")
    if isinstance(task_id, bool) or not isinstance(task_id, int):
        raise ValueError(f"invalid id {task_id!r}")
    recurring = bool(record.get("recurring"))
    created = record.get("created")
    updated = record.get("updated")
    return Task(
        id=task_id,
        title=str(record.get("title") or ""),
        details=str(record.get("details") or ""),
        start_time=parse_timestamp(record.get("start_time"), "start_time"),
        end_time=parse_timestamp(record.get("end_time"), "end_time"),
        recurring=recurring,
        frequency_minutes=(
            record.get("frequency_minutes") if recurring else None),
        created=parse_timestamp(created, "created") if created else None,
        updated=parse_timestamp(updated, "updated") if updated else None)


def _fired_record(fired, entry):
    task_id, start, kind = entry
    record = {"id": task_id, "start": start.isoformat(), "kind": kind.value}
    end = fired.occurrence_end(entry)
    if end is not None:
        record["end"] = end.isoformat()
    return record


class YamlTaskStore(TaskStore):
    """Stores each task as ``<id>.yml`` in a data directory.

    Attributes:
        data_dir (str): directory containing task files.

    """
    def __init__(self, data_dir):
        """Initializes a YamlTaskStore() object."""
        self.data_dir = data_dir
        self._verify_data_dir()

    def _verify_data_dir(self):
        """Create the tasks data directory if it doesn't exist."""
        if not os.path.exists(self.data_dir):
            try:
                os.makedirs(self.data_dir)
            except OSError as err:
                raise StorageError(
                    f"{self.data_dir} doesn't exist and can't be created",
                    err) from err
        elif not os.path.isdir(self.data_dir):
            raise StorageError(f"{self.data_dir} is not a directory")
        elif not os.access(self.data_dir, os.R_OK | os.W_OK | os.X_OK):
            raise StorageError(
                "You don't have read/write/execute permissions to "
                f"{self.data_dir}")

    def _task_file(self, task_id):
        return os.path.join(self.data_dir, f"{task_id}.yml")

    def _write_yaml_file(self, data, filename):
        """Write YAML data to a file, replacing it atomically.

        Args:
            data (dict):    the structured data to write.
            filename (str): the location to write the data.

        """
        fd, tmpname = tempfile.mkstemp(
            dir=self.data_dir, prefix=".", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as out_file:
                yaml.safe_dump(
                    data,
                    out_file,
                    default_flow_style=False,
                    sort_keys=False)
            os.replace(tmpname, filename)
        except (OSError, yaml.YAMLError) as err:
            if os.path.exists(tmpname):
                os.remove(tmpname)
            raise StorageError(f"failure writing {filename}", err) from err

    @staticmethod
    def _read_yaml_file(filename):
        try:
            with open(filename, "r", encoding="utf-8") as in_file:
                return yaml.safe_load(in_file)
        except (OSError, yaml.YAMLError) as err:
            raise StorageError(f"failure reading {filename}", err) from err

    def load_all(self):
        """Read task files from `data_dir`.

        Malformed files are reported and skipped so one damaged record does
        not hide the others.

        Returns:
            tasks (list):   the parsed tasks.

        """
        tasks = []
        try:
            with os.scandir(self.data_dir) as entries:
                names = sorted(
                    entry.path for entry in entries
                    if entry.is_file() and entry.name.endswith('.yml')
                    and entry.name[:-4].isdigit())
        except OSError as err:
            raise StorageError(
                f"failure reading {self.data_dir}", err) from err
        for fullpath in names:
            try:
                task = task_from_record(self._read_yaml_file(fullpath))
            except (ValueError, TodoTaskError) as err:
                logger.error("failure parsing %s - SKIPPING: %s",
                             fullpath, err)
                continue
            if f"{task.id}.yml" != os.path.basename(fullpath):
                logger.error("id %s does not match %s - SKIPPING",
                             task.id, fullpath)
                continue
            tasks.append(task)
        return tasks

    def save(self, task):
        self._write_yaml_file(task_to_record(task), self._task_file(task.id))
        logger.debug("saved task %s", task.id)

    def delete(self, task_id):
        filename = self._task_file(task_id)
        try:
            os.remove(filename)
        except OSError as err:
            raise StorageError(f"failure deleting {filename}", err) from err
        logger.debug("deleted task %s", task_id)

    def load_fired(self):
        """Read the reminders already delivered in earlier runs.

        Returns:
            fired (FiredSet):   the delivered reminder triples.

        """
        filename = os.path.join(self.data_dir, FIRED_FILE)
        fired = FiredSet()
        if not os.path.exists(filename):
            return fired
        data = self._read_yaml_file(filename)
        if not isinstance(data, dict):
            data = {}
        for entry in data.get("fired") or []:
            try:
                end = entry.get("end")
                fired.add(
                    (int(entry["id"]),
                     parse_timestamp(entry["start"], "start"),
                     ReminderKind(entry["kind"])),
                    parse_timestamp(end, "end") if end else None)
            except (AttributeError, KeyError, TypeError, ValueError,
                    TodoTaskError) as err:
                logger.warning(
                    "ignoring bad entry in %s: %s", filename, err)
        return fired

    def save_fired(self, fired, horizon=None):
        """Write the delivered reminders, dropping stale entries.

        Args:
            fired (FiredSet):   the delivered reminder triples.
            horizon (datetime): drop entries whose occurrence ended
        before this instant.

        """
        if horizon is not None:
            removed = fired.prune(horizon)
            if removed:
                logger.debug("pruned %d fired reminders", removed)
        data = {
            "fired": [
                _fired_record(fired, entry) for entry in fired
            ]
        }
        self._write_yaml_file(data, os.path.join(self.data_dir, FIRED_FILE))
