# -*- coding: utf-8 -*-
"""Rendering of reminder events."""
import json
from abc import ABC, abstractmethod

from rich.console import Console
from rich.text import Text

from .models import ReminderKind
from .timeutil import format_timestamp

MESSAGES = {
    ReminderKind.PRE_START:
        f"starts in {ReminderKind.PRE_START.lead_minutes} minutes!",
    ReminderKind.PRE_END:
        f"ends in {ReminderKind.PRE_END.lead_minutes} minutes!",
}


def reminder_message(event):
    """The one-line text of a reminder."""
    return f"Reminder: '{event.title}' {MESSAGES[event.kind]}"


class NotificationDispatcher(ABC):
    """Receives due reminder events."""

    @abstractmethod
    def deliver(self, event):
        """Render one ReminderEvent."""

    def flush(self):
        """Called once after a batch of events was delivered."""


class ConsoleDispatcher(NotificationDispatcher):
    """Prints reminders to the terminal.

    Attributes:
        console (Console):  rich console to print to.
        style (str):        style for the message text.
        date_style (str):   style for the timestamp.

    """
    def __init__(self, console=None, style="bold", date_style="green"):
        """Initializes a ConsoleDispatcher() object."""
        self.console = console or Console()
        self.style = style
        self.date_style = date_style

    def deliver(self, event):
        line = Text()
        line.append(
            f"[{format_timestamp(event.fire_at, pretty=True)}] ",
            style=self.date_style)
        line.append(reminder_message(event), style=self.style)
        line.append(f" (task {event.task_id})")
        self.console.print(line)


class JsonDispatcher(NotificationDispatcher):
    """Collects reminders and prints them as one JSON document on flush.

    Attributes:
        console (Console):  rich console to print to.
        reminders (list):   reminders collected since the last flush.

    """
    def __init__(self, console=None):
        """Initializes a JsonDispatcher() object."""
        self.console = console or Console()
        self.reminders = []

    def deliver(self, event):
        self.reminders.append({
            "id": event.task_id,
            "kind": event.kind.value,
            "datetime": format_timestamp(event.fire_at, pretty=True),
            "fire_at": event.fire_at.isoformat(),
            "occurrence_start": event.occurrence_start.isoformat(),
            "notification": "display",
            "summary": event.title,
            "body": reminder_message(event),
        })

    def flush(self):
        if self.reminders:
            self.console.print_json(
                json.dumps({"reminders": self.reminders}, indent=4))
        self.reminders = []
