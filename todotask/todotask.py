#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""todotask
Version:  0.1.0
Author:   Sean O'Connell <sean@sdoconnell.net>
License:  MIT
Homepage: https://github.com/sdoconnell/todotask
About:
A terminal-based task and reminder tool with local file-based storage.

usage: todotask [-h] [-c <file>] [--debug] for more help: todotask <command> -h ...

Terminal-based tasks and reminders.

commands:
  (for more help: todotask <command> -h)
    add                 add a new task
    delete (rm)         delete a task
    export              export tasks as iCalendar output
    info                show info about a task
    list (ls)           list tasks
    modify (mod)        modify a task
    reminders (rem)     deliver due reminders
    shell               interactive shell
    version             show version info

optional arguments:
  -h, --help            show this help message and exit
  -c <file>, --config <file>
                        config file
  --debug               verbose logging to stderr


Copyright © 2021 Sean O'Connell

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in all
copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
SOFTWARE.

"""
import argparse
import logging
import os
import shlex
import sys
from cmd import Cmd

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from . import timeutil
from .calsync import IcsCalendarSync, build_calendar
from .config import APP_NAME, Config, default_paths
from .errors import TodoTaskError, ValidationError
from .models import Task
from .notify import ConsoleDispatcher, JsonDispatcher
from .recurrence import next_occurrence
from .repository import TaskRepository
from .scheduler import deliver, due_reminders, upcoming_reminders
from .store import YamlTaskStore

APP_VERS = "0.1.0"
APP_COPYRIGHT = "Copyright © 2021 Sean O'Connell."
APP_LICENSE = "Released under MIT license."
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def setup_logging(level="WARNING"):
    """Send package log records to stderr.

    Args:
        level (str):    the minimum level to show.

    """
    root = logging.getLogger(APP_NAME)
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(
        fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root.addHandler(handler)


def print_error(err):
    """Report a core error on stderr.

    Args:
        err (TodoTaskError):    the error.

    """
    print(f"ERROR: {err.describe()}.", file=sys.stderr)


class Tasks():
    """Performs task operations.

    Attributes:
        config (Config):        application settings.
        clock (callable):       returns the current instant.
        console (Console):      rich console for output.

    """
    def __init__(self, config, clock=None, console=None):
        """Initializes a Tasks() object."""
        self.config = config
        self.data_dir = config.data_dir
        self.clock = clock or timeutil.now
        self.console = console or Console(
            no_color=not config.color_enabled)
        self.store = YamlTaskStore(self.data_dir)
        if config.calendar_dir:
            calendar = IcsCalendarSync(config.calendar_dir)
        else:
            calendar = None
        self.repository = TaskRepository(
            self.store, calendar=calendar, clock=self.clock)
        self.repository.load()
        self.fired = self.store.load_fired()

    @staticmethod
    def _parse_task_id(value):
        """Convert a task id argument to an integer.

        Args:
            value (str):    the id as typed.

        Returns:
            task_id (int):  the id, or the value unchanged when it is not
        numeric (the lookup then fails with NotFound).

        """
        try:
            return int(value)
        except (TypeError, ValueError):
            return value

    def _format_recurrence(self, task):
        if not task.recurring:
            return Text("No")
        return Text(
            f"every {task.frequency_minutes}m",
            style=self.config.color_recurring)

    def _format_date(self, timeobj):
        return Text(
            timeutil.format_timestamp(timeobj, pretty=True),
            style=self.config.color_date)

    def refresh(self):
        """Public method to refresh data."""
        self.repository.reload()
        logger.debug("refreshed %d tasks", len(self.repository))

    def add(
            self,
            title,
            details,
            start_time,
            end_time,
            recurring=False,
            frequency_minutes=None):
        """Create a new task.

        Args:
            title (str):                task title.
            details (str):              task details.
            start_time (str):           ISO-8601 start with UTC offset.
            end_time (str):             ISO-8601 end with UTC offset.
            recurring (bool):           the task repeats.
            frequency_minutes (int):    recurrence interval in minutes.

        Returns:
            task_id (int):  the new task id.

        """
        task = Task(
            id=None,
            title=title,
            details=details or "",
            start_time=timeutil.parse_timestamp(start_time, "start_time"),
            end_time=timeutil.parse_timestamp(end_time, "end_time"),
            recurring=recurring,
            frequency_minutes=frequency_minutes)
        task_id = self.repository.add(task)
        print(f"Task '{title}' added with ID: {task_id}")
        return task_id

    def delete(self, task_id, force=False):
        """Delete a task identified by id.

        Args:
            task_id (str):  the id of the task to be deleted.
            force (bool):   don't ask for confirmation.

        """
        task_id = self._parse_task_id(task_id)
        task = self.repository.get(task_id)
        if force:
            confirm = "yes"
        else:
            confirm = input(
                f"Delete '{task.title}' ({task_id})? [yes/no]: ").lower()
        if confirm in ['yes', 'y']:
            self.repository.remove(task_id)
            self.fired.forget_task(task_id)
            self.store.save_fired(self.fired)
            print(f"Deleted task: {task_id}")
        else:
            print("Cancelled")

    def export(self):
        """Print every task as an iCalendar document."""
        tasks = self.repository.list()
        if tasks:
            sys.stdout.write(build_calendar(tasks))
        else:
            print("No records found.")

    def info(self, task_id):
        """Display info about a specific task.

        Args:
            task_id (str):  the task for which to provide info.

        """
        task = self.repository.get(self._parse_task_id(task_id))
        now = self.clock()

        summary_table = Table(
            title=f"Task info - {task.id}",
            title_style=self.config.color_title,
            title_justify="left",
            box=box.SIMPLE,
            show_header=False,
            show_lines=False,
            pad_edge=False,
            collapse_padding=False,
            padding=(0, 0, 0, 0))
        summary_table.add_column("field", style=self.config.color_label)
        summary_table.add_column("data")

        summary_table.add_row("title:", Text(task.title))
        if task.details:
            summary_table.add_row("details:", Text(task.details))
        summary_table.add_row("start:", self._format_date(task.start_time))
        summary_table.add_row("end:", self._format_date(task.end_time))
        summary_table.add_row("recurring:", self._format_recurrence(task))
        upcoming = next_occurrence(task, now) if task.recurring else None
        if upcoming:
            summary_table.add_row(
                "next start:", self._format_date(upcoming.start))
        if task.created:
            summary_table.add_row(
                "created:", self._format_date(task.created))
        if task.updated:
            summary_table.add_row(
                "updated:", self._format_date(task.updated))

        layout = Table.grid()
        layout.add_column("single")
        layout.add_row("")
        layout.add_row(summary_table)
        self.console.print(layout)

    def list(self):
        """List tasks ordered by start time."""
        task_table = Table(
            title="Tasks",
            title_style=self.config.color_title,
            title_justify="left",
            box=box.SIMPLE,
            show_header=True,
            header_style=self.config.color_label,
            show_lines=False,
            pad_edge=False,
            collapse_padding=False,
            padding=(0, 1, 0, 0))
        task_table.add_column("id", justify="right")
        task_table.add_column("title")
        task_table.add_column("start")
        task_table.add_column("end")
        task_table.add_column("recurring")

        tasks = self.repository.list()
        if tasks:
            for task in tasks:
                title = Text(task.title)
                if task.details:
                    title.append(f" - {task.details}", style="dim")
                task_table.add_row(
                    str(task.id),
                    title,
                    self._format_date(task.start_time),
                    self._format_date(task.end_time),
                    self._format_recurrence(task))
        else:
            task_table.add_row("", "None", "", "", "")

        layout = Table.grid()
        layout.add_column("single")
        layout.add_row("")
        layout.add_row(task_table)
        self.console.print(layout)

    def modify(
            self,
            task_id,
            new_title=None,
            new_details=None,
            new_start_time=None,
            new_end_time=None,
            new_recurring=None,
            new_frequency_minutes=None):
        """Modify a task using provided parameters.

        Args:
            task_id (str):                  task id.
            new_title (str):                task title.
            new_details (str):              task details.
            new_start_time (str):           ISO-8601 start.
            new_end_time (str):             ISO-8601 end.
            new_recurring (bool):           the task repeats.
            new_frequency_minutes (int):    recurrence interval.

        """
        task_id = self._parse_task_id(task_id)
        changes = {}
        if new_title is not None:
            changes['title'] = new_title
        if new_details is not None:
            changes['details'] = new_details
        if new_start_time is not None:
            changes['start_time'] = timeutil.parse_timestamp(
                new_start_time, "start_time")
        if new_end_time is not None:
            changes['end_time'] = timeutil.parse_timestamp(
                new_end_time, "end_time")
        if new_recurring is not None:
            changes['recurring'] = new_recurring
        if new_frequency_minutes is not None:
            changes['frequency_minutes'] = new_frequency_minutes
        if not changes:
            print("Nothing to change")
            return
        self.repository.edit(task_id, **changes)
        print(f"Updated task: {task_id}")

    def reminders(self, upcoming=None, json_output=False, quiet=False):
        """Deliver due reminders, or preview upcoming ones.

        Args:
            upcoming (str):     preview interval (XdYhZm) instead of
        delivering.
            json_output (bool): print reminders as JSON.
            quiet (bool):       print nothing when no reminder is due.

        Returns:
            failures (dict):    task id -> InvalidRecurrence for tasks that
        could not be evaluated.

        """
        if json_output:
            dispatcher = JsonDispatcher(console=self.console)
        else:
            dispatcher = ConsoleDispatcher(
                console=self.console,
                date_style=self.config.color_date)
        now = self.clock()
        if upcoming:
            horizon = timeutil.calc_duration(upcoming)
            if not horizon:
                raise ValidationError(
                    "upcoming", f"invalid interval '{upcoming}'")
            result = upcoming_reminders(self.repository, now, horizon)
            deliver(result, dispatcher)
        else:
            result = due_reminders(
                self.repository, now, self.fired,
                lookback=self.config.lookback)
            deliver(result, dispatcher)
            # an entry can be forgotten once its occurrence can no longer
            # re-enter the lookback window
            retention = max(self.config.lookback, self.config.fired_retention)
            self.store.save_fired(self.fired, horizon=now - retention)
        for err in result.failures.values():
            print_error(err)
        if not result and not quiet and not json_output:
            print("No reminders.")
        return result.failures


class FSHandler(FileSystemEventHandler):
    """Handler to watch for file changes and refresh data from files.

    Attributes:
        shell (obj):    the calling shell object.

    """
    def __init__(self, shell):
        """Initializes an FSHandler() object."""
        self.shell = shell

    def on_any_event(self, event):
        """Refresh data in memory on data file changes.

        Args:
            event (obj):    file system event.

        """
        if event.event_type in [
                'created', 'modified', 'deleted', 'moved']:
            self.shell.do_refresh("silent")


class TasksShell(Cmd):
    """Provides methods for interactive shell use.

    Due reminders are delivered before every prompt.

    Attributes:
        tasks (obj):     an instance of Tasks().

    """
    def __init__(
            self,
            tasks,
            completekey='tab',
            stdin=None,
            stdout=None,
            watch=True):
        """Initializes a TasksShell() object."""
        super().__init__(completekey=completekey, stdin=stdin, stdout=stdout)
        self.tasks = tasks
        self.observer = None

        # start watchdog for data_dir changes
        # and perform refresh() on changes
        if watch:
            self.observer = Observer()
            handler = FSHandler(self)
            self.observer.schedule(
                    handler,
                    self.tasks.data_dir,
                    recursive=True)
            self.observer.start()

        self.doc_header = (
            "Commands (for more info type: help):"
        )
        self.ruler = "―"
        self.prompt = "tasks> "
        self.nohelp = (
            "\nNo help for %s\n"
        )
        self.intro = (
            f"{APP_NAME} {APP_VERS}\n\n"
            f"Enter command (or 'help')\n"
        )

    # class method overrides
    def default(self, args):
        """Handle command aliases and unknown commands.

        Args:
            args (str): the command arguments.

        """
        if args in ["quit", "EOF"]:
            return self.do_exit("")
        if args.startswith("ls"):
            return self.do_list("")
        if args.startswith("rm"):
            return self.do_delete(args[2:].strip())
        if args.startswith("mod"):
            return self.do_modify(args[3:].strip())
        if args.startswith("rem"):
            return self.do_reminders(args[3:].strip())
        print("\nNo such command. See 'help'.\n")
        return False

    def emptyline(self):
        """Ignore empty line entry."""

    def onecmd(self, line):
        """Run one command, reporting core errors instead of exiting."""
        try:
            return super().onecmd(line)
        except TodoTaskError as err:
            print_error(err)
        except SystemExit:
            # argparse exits on bad arguments and -h
            pass
        return False

    def _due_reminders(self):
        """Deliver due reminders between commands."""
        try:
            self.tasks.reminders(quiet=True)
        except TodoTaskError as err:
            print_error(err)

    def preloop(self):
        self._due_reminders()

    def postcmd(self, stop, line):
        if not stop:
            self._due_reminders()
        return stop

    def postloop(self):
        if self.observer is not None:
            self.observer.stop()
            self.observer.join()

    def do_add(self, args):
        """Add a task.

        Args:
            args (str): the command arguments.

        """
        parser = argparse.ArgumentParser(prog='add')
        add_task_arguments(parser)
        opts = parser.parse_args(shlex.split(args))
        self.tasks.add(
            opts.title,
            opts.details,
            opts.start_time,
            opts.end_time,
            opts.recurring,
            opts.frequency_minutes)

    def do_delete(self, args):
        """Delete a task.

        Args:
            args (str): the command arguments.

        """
        if len(args) > 0:
            commands = args.split()
            self.tasks.delete(commands[0])
        else:
            self.help_delete()

    def do_exit(self, args):
        """Exit the tasks shell.

        Args:
            args (str): the command arguments, ignored.

        """
        return True

    def do_export(self, args):
        """Print tasks as iCalendar data.

        Args:
            args (str): the command arguments, ignored.

        """
        self.tasks.export()

    def do_info(self, args):
        """Output info about a task.

        Args:
            args (str): the command arguments.

        """
        if len(args) > 0:
            commands = args.split()
            self.tasks.info(commands[0])
        else:
            self.help_info()

    def do_list(self, args):
        """Output a list of tasks.

        Args:
            args (str): the command arguments, ignored.

        """
        self.tasks.list()

    def do_modify(self, args):
        """Modify a task.

        Args:
            args (str): the command arguments.

        """
        parser = argparse.ArgumentParser(prog='modify')
        modify_task_arguments(parser)
        opts = parser.parse_args(shlex.split(args))
        self.tasks.modify(
            opts.id,
            new_title=opts.title,
            new_details=opts.details,
            new_start_time=opts.start_time,
            new_end_time=opts.end_time,
            new_recurring=opts.recurring,
            new_frequency_minutes=opts.frequency_minutes)

    def do_refresh(self, args):
        """Refresh task information if files changed on disk.

        Args:
            args (str): the command arguments.

        """
        try:
            self.tasks.refresh()
        except TodoTaskError as err:
            print_error(err)
            return
        if args != 'silent':
            print("Data refreshed.")

    def do_reminders(self, args):
        """Deliver due reminders or preview upcoming ones.

        Args:
            args (str): an optional preview interval (XdYhZm).

        """
        self.tasks.reminders(upcoming=args.strip() or None)

    @staticmethod
    def help_add():
        """Output help for 'add' command."""
        print(
            '\nadd --title <title> --start_time <datetime> '
            '--end_time <datetime> [--details <text>] [--recurring '
            '--frequency_minutes <number>]:\n'
            '    Add a new task. Datetimes are ISO-8601 with a UTC '
            'offset, e.g. 2024-01-01T09:00:00Z.\n'
        )

    @staticmethod
    def help_delete():
        """Output help for 'delete' command."""
        print(
            '\ndelete (rm) <id>:\n'
            '    Delete a task.\n'
        )

    @staticmethod
    def help_exit():
        """Output help for 'exit' command."""
        print(
            '\nexit:\n'
            '    Exit the tasks shell.\n'
        )

    @staticmethod
    def help_info():
        """Output help for 'info' command."""
        print(
            '\ninfo <id>:\n'
            '    Show info about a task.\n'
        )

    @staticmethod
    def help_list():
        """Output help for 'list' command."""
        print(
            '\nlist (ls):\n'
            '    List tasks ordered by start time.\n'
        )

    @staticmethod
    def help_reminders():
        """Output help for 'reminders' command."""
        print(
            '\nreminders (rem) [interval]:\n'
            '    Deliver due reminders. With an interval ([Xd][Yh][Zm]), '
            'show the reminders coming up instead.\n'
        )


def add_task_arguments(parser):
    """Add the task fields accepted by 'add'.

    Args:
        parser (ArgumentParser):    the parser to extend.

    """
    parser.add_argument(
        '--title',
        required=True,
        metavar='<title>',
        help='task title')
    parser.add_argument(
        '--details',
        default='',
        metavar='<text>',
        help='task details')
    parser.add_argument(
        '--start_time',
        '--start-time',
        dest='start_time',
        required=True,
        metavar='<datetime>',
        help='start datetime: ISO-8601 with offset, e.g. 2024-01-01T09:00Z')
    parser.add_argument(
        '--end_time',
        '--end-time',
        dest='end_time',
        required=True,
        metavar='<datetime>',
        help='end datetime: ISO-8601 with offset')
    parser.add_argument(
        '--recurring',
        dest='recurring',
        action='store_true',
        help='the task repeats')
    parser.add_argument(
        '--frequency_minutes',
        '--frequency-minutes',
        dest='frequency_minutes',
        type=int,
        metavar='<number>',
        help='recurrence interval in minutes (recurring tasks only)')


def modify_task_arguments(parser):
    """Add the options accepted by 'modify'.

    Args:
        parser (ArgumentParser):    the parser to extend.

    """
    parser.add_argument(
        'id',
        help='task id')
    parser.add_argument(
        '--title',
        metavar='<title>',
        help='task title')
    parser.add_argument(
        '--details',
        metavar='<text>',
        help='task details')
    parser.add_argument(
        '--start_time',
        '--start-time',
        dest='start_time',
        metavar='<datetime>',
        help='start datetime: ISO-8601 with offset')
    parser.add_argument(
        '--end_time',
        '--end-time',
        dest='end_time',
        metavar='<datetime>',
        help='end datetime: ISO-8601 with offset')
    recurrence = parser.add_mutually_exclusive_group()
    recurrence.add_argument(
        '--recurring',
        dest='recurring',
        action='store_const',
        const=True,
        help='make the task repeat')
    recurrence.add_argument(
        '--once',
        dest='recurring',
        action='store_const',
        const=False,
        help='stop the task repeating')
    parser.add_argument(
        '--frequency_minutes',
        '--frequency-minutes',
        dest='frequency_minutes',
        type=int,
        metavar='<number>',
        help='recurrence interval in minutes')


def parse_args(argv=None):
    """Parse command line arguments.

    Args:
        argv (list):    the arguments (default: sys.argv[1:]).

    Returns:
        parser (ArgumentParser):    the parser.
        args (Namespace):           the command line arguments provided.

    """
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description='Terminal-based tasks and reminders.')
    parser._positionals.title = 'commands'
    parser.set_defaults(command=None)
    subparsers = parser.add_subparsers(
        metavar=f'(for more help: {APP_NAME} <command> -h)')
    add = subparsers.add_parser(
        'add',
        help='add a new task')
    add_task_arguments(add)
    add.set_defaults(command='add')
    delete = subparsers.add_parser(
        'delete',
        aliases=['rm'],
        help='delete a task')
    delete.add_argument(
        'id',
        help='task id')
    delete.add_argument(
        '-f',
        '--force',
        dest='force',
        action='store_true',
        help="delete without confirmation")
    delete.set_defaults(command='delete')
    export = subparsers.add_parser(
        'export',
        help='export tasks as iCalendar output')
    export.set_defaults(command='export')
    info = subparsers.add_parser(
        'info',
        help='show info about a task')
    info.add_argument(
        'id',
        help='the task to view')
    info.set_defaults(command='info')
    listcmd = subparsers.add_parser(
        'list',
        aliases=['ls'],
        help='list tasks')
    listcmd.set_defaults(command='list')
    modify = subparsers.add_parser(
        'modify',
        aliases=['mod'],
        help='modify a task')
    modify_task_arguments(modify)
    modify.set_defaults(command='modify')
    reminders = subparsers.add_parser(
        'reminders',
        aliases=['rem'],
        help='deliver due reminders')
    reminders.add_argument(
        '-u',
        '--upcoming',
        metavar='<interval>',
        help='preview reminders in the next interval ([Xd][Yh][Zm])')
    reminders.add_argument(
        '-j',
        '--json',
        dest='json',
        action='store_true',
        help='output as JSON')
    reminders.set_defaults(command='reminders')
    shell = subparsers.add_parser(
        'shell',
        help='interactive shell')
    shell.set_defaults(command='shell')
    version = subparsers.add_parser(
        'version',
        help='show version info')
    version.set_defaults(command='version')
    parser.add_argument(
        '-c',
        '--config',
        dest='config',
        metavar='<file>',
        help='config file')
    parser.add_argument(
        '--debug',
        dest='debug',
        action='store_true',
        help='verbose logging to stderr')
    args = parser.parse_args(argv)
    return parser, args


def main(argv=None, clock=None):
    """Entry point. Parses arguments, creates Tasks() object, calls
    requested method and parameters.

    Args:
        argv (list):        command line arguments (default: sys.argv[1:]).
        clock (callable):   overrides the current instant (for testing).

    Returns:
        status (int):   the exit status.

    """
    config_file, data_dir = default_paths()

    parser, args = parse_args(argv)

    if not args.command:
        parser.print_help(sys.stderr)
        return 1
    if args.command == "version":
        print(f"{APP_NAME} {APP_VERS}")
        print(APP_COPYRIGHT)
        print(APP_LICENSE)
        return 0

    if args.config:
        config_file = os.path.expandvars(
            os.path.expanduser(args.config))

    try:
        config = Config(config_file, data_dir)
        setup_logging("DEBUG" if args.debug else config.log_level)
        tasks = Tasks(config, clock=clock)

        if args.command == "add":
            tasks.add(
                title=args.title,
                details=args.details,
                start_time=args.start_time,
                end_time=args.end_time,
                recurring=args.recurring,
                frequency_minutes=args.frequency_minutes)
        elif args.command == "list":
            tasks.list()
        elif args.command == "info":
            tasks.info(args.id)
        elif args.command == "modify":
            tasks.modify(
                args.id,
                new_title=args.title,
                new_details=args.details,
                new_start_time=args.start_time,
                new_end_time=args.end_time,
                new_recurring=args.recurring,
                new_frequency_minutes=args.frequency_minutes)
        elif args.command == "delete":
            tasks.delete(args.id, args.force)
        elif args.command == "reminders":
            failures = tasks.reminders(
                upcoming=args.upcoming, json_output=args.json)
            if failures:
                return 1
        elif args.command == "export":
            tasks.export()
        elif args.command == "shell":
            shell = TasksShell(tasks)
            shell.cmdloop()
        else:
            return 1
    except TodoTaskError as err:
        print_error(err)
        return 1
    return 0


def run():
    """Console script wrapper around main()."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nInterrupted.")
        sys.exit(1)


# entry point
if __name__ == "__main__":
    run()
