# -*- coding: utf-8 -*-
"""Exceptions raised by the todotask core.

Every error carries a ``kind`` (the class name shown to the user) and,
where it applies, the offending ``field``.
"""


class TodoTaskError(Exception):
    """Base class for all todotask errors.

    Attributes:
        field (str):    the offending field, if any.

    """
    field = None

    @property
    def kind(self):
        """The error kind presented to the user."""
        return self.__class__.__name__

    def describe(self):
        """Format the error for display on the command line.

        Returns:
            text (str): "<Kind> (<field>): <message>" or "<Kind>: <message>".

        """
        if self.field:
            return f"{self.kind} ({self.field}): {self}"
        return f"{self.kind}: {self}"


class InvalidTimestamp(TodoTaskError):
    """A string is not a valid, unambiguous instant."""
    def __init__(self, value, field=None):
        self.value = value
        self.field = field
        super().__init__(
            f"'{value}' is not an ISO-8601 timestamp with a UTC offset")


class ValidationError(TodoTaskError):
    """A task field violates an invariant."""
    def __init__(self, field, message):
        self.field = field
        super().__init__(message)


class InvalidRecurrence(TodoTaskError):
    """A recurring task has an unusable frequency."""
    def __init__(self, reason, task_id=None):
        self.reason = reason
        self.task_id = task_id
        self.field = "frequency_minutes"
        super().__init__(reason)


class NotFound(TodoTaskError):
    """No task with the requested id exists."""
    def __init__(self, task_id):
        self.task_id = task_id
        self.field = "id"
        super().__init__(f"task {task_id} not found")


class StorageError(TodoTaskError):
    """The persistence backend failed.

    Attributes:
        cause (Exception):  the underlying exception, if any.

    """
    def __init__(self, message, cause=None):
        self.cause = cause
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)


class ConfigError(TodoTaskError):
    """The configuration file is missing or unreadable."""
    def __init__(self, message):
        self.field = "config"
        super().__init__(message)
