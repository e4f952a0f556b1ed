# tests/test_scheduler.py

import threading
from datetime import timedelta

from todotask.models import FiredSet, ReminderKind
from todotask.recurrence import occurrence_at
from todotask.repository import TaskRepository
from todotask.scheduler import (
    deliver,
    due_reminders,
    reminders_for,
    upcoming_reminders,
)

from .fakes import MemoryTaskStore, RecordingDispatcher, make_task, ts


def _daily_standup(repo):
    return repo.add(make_task(
        title="Standup", recurring=True, frequency_minutes=1440))


def test_reminders_for_occurrence() -> None:
    task = make_task(task_id=1)
    pre_start, pre_end = reminders_for(task, occurrence_at(task, 0))
    assert pre_start.kind is ReminderKind.PRE_START
    assert pre_start.fire_at == ts("2024-01-01T08:55:00Z")
    assert pre_end.kind is ReminderKind.PRE_END
    assert pre_end.fire_at == ts("2024-01-01T09:13:00Z")
    assert pre_start.occurrence_start == pre_end.occurrence_start


def test_recurring_standup_fires_once(repo, fired) -> None:
    task_id = _daily_standup(repo)
    now = ts("2024-01-02T08:55:00Z")

    due = due_reminders(repo, now, fired)
    assert due.ok
    assert len(due) == 1
    event = due.events[0]
    assert event.task_id == task_id
    assert event.kind is ReminderKind.PRE_START
    assert event.occurrence_start == ts("2024-01-02T09:00:00Z")
    assert event.title == "Standup"
    assert event in fired

    assert not due_reminders(repo, now, fired)


def test_nothing_due_before_lead(repo, fired) -> None:
    _daily_standup(repo)
    assert not due_reminders(repo, ts("2024-01-02T08:54:59Z"), fired)
    assert len(fired) == 0


def test_pre_end_fires_two_minutes_before_end(repo, fired) -> None:
    _daily_standup(repo)
    due_reminders(repo, ts("2024-01-02T08:55:00Z"), fired)
    due = due_reminders(repo, ts("2024-01-02T09:13:00Z"), fired)
    assert [e.kind for e in due] == [ReminderKind.PRE_END]
    assert due.events[0].occurrence_start == ts("2024-01-02T09:00:00Z")


def test_late_evaluation_catches_up_within_lookback(repo, fired) -> None:
    repo.add(make_task())
    due = due_reminders(repo, ts("2024-01-01T09:18:00Z"), fired)
    assert [e.kind for e in due] == [
        ReminderKind.PRE_START, ReminderKind.PRE_END]


def test_missed_occurrence_is_not_reported(repo, fired) -> None:
    repo.add(make_task())
    assert not due_reminders(repo, ts("2024-01-01T10:00:00Z"), fired)


def test_custom_lookback_widens_window(repo, fired) -> None:
    repo.add(make_task())
    due = due_reminders(
        repo, ts("2024-01-01T10:00:00Z"), fired,
        lookback=timedelta(hours=1))
    assert len(due) == 2


def test_ties_are_ordered_by_task_then_kind(repo, fired) -> None:
    repo.add(make_task(
        title="Short", start="2024-01-01T09:00:00Z",
        end="2024-01-01T09:07:00Z", recurring=True, frequency_minutes=10))
    due = due_reminders(repo, ts("2024-01-01T09:05:00Z"), fired)
    assert [(e.fire_at, e.kind, e.occurrence_start) for e in due] == [
        (ts("2024-01-01T08:55:00Z"), ReminderKind.PRE_START,
         ts("2024-01-01T09:00:00Z")),
        (ts("2024-01-01T09:05:00Z"), ReminderKind.PRE_START,
         ts("2024-01-01T09:10:00Z")),
        (ts("2024-01-01T09:05:00Z"), ReminderKind.PRE_END,
         ts("2024-01-01T09:00:00Z")),
    ]


def test_events_of_several_tasks_are_ordered(repo, fired) -> None:
    later = repo.add(make_task(
        title="B", start="2024-01-01T09:02:00Z", end="2024-01-01T10:00:00Z"))
    earlier = repo.add(make_task(title="A"))
    due = due_reminders(repo, ts("2024-01-01T08:58:00Z"), fired)
    assert [e.task_id for e in due] == [earlier, later]


def test_invalid_task_does_not_block_others(fired) -> None:
    broken = make_task(
        task_id=2, title="Broken", recurring=True, frequency_minutes=0)
    good = make_task(task_id=1)
    repo = TaskRepository(MemoryTaskStore([good, broken])).load()

    due = due_reminders(repo, ts("2024-01-01T08:55:00Z"), fired)
    assert [e.task_id for e in due] == [1]
    assert not due.ok
    assert list(due.failures) == [2]


def test_removed_task_produces_no_reminders(repo, fired) -> None:
    task_id = _daily_standup(repo)
    repo.remove(task_id)
    assert not due_reminders(repo, ts("2024-01-02T08:55:00Z"), fired)


def test_concurrent_evaluations_deliver_once(repo) -> None:
    _daily_standup(repo)
    fired = FiredSet()
    now = ts("2024-01-02T08:55:00Z")
    results = []

    def evaluate():
        results.append(len(due_reminders(repo, now, fired)))

    threads = [threading.Thread(target=evaluate) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert sum(results) == 1


def test_upcoming_does_not_mark(repo, fired) -> None:
    _daily_standup(repo)
    upcoming = upcoming_reminders(
        repo, ts("2024-01-02T08:00:00Z"), timedelta(hours=1))
    assert [(e.kind, e.fire_at) for e in upcoming] == [
        (ReminderKind.PRE_START, ts("2024-01-02T08:55:00Z"))]
    assert len(fired) == 0
    assert len(due_reminders(repo, ts("2024-01-02T08:55:00Z"), fired)) == 1


def test_deliver_isolates_dispatcher_failures(repo, fired) -> None:
    repo.add(make_task(title="A"))
    repo.add(make_task(title="B"))
    due = due_reminders(repo, ts("2024-01-01T08:55:00Z"), fired)
    dispatcher = RecordingDispatcher(fail_on={1})

    assert deliver(due, dispatcher) == 1
    assert [e.task_id for e in dispatcher.delivered] == [2]
    assert dispatcher.flushed == 1
    # failed deliveries are not retried
    assert not due_reminders(repo, ts("2024-01-01T08:55:00Z"), fired)


def test_out_of_range_frequency_is_a_task_failure(fired) -> None:
    huge = make_task(
        task_id=2, title="Huge", recurring=True, frequency_minutes=10**12)
    repo = TaskRepository(MemoryTaskStore([make_task(task_id=1), huge])).load()

    due = due_reminders(repo, ts("2024-01-01T08:55:00Z"), fired)
    assert [e.task_id for e in due] == [1]
    assert list(due.failures) == [2]
