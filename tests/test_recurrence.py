# tests/test_recurrence.py

import itertools
from datetime import timedelta

import pytest

from todotask.errors import InvalidRecurrence
from todotask.recurrence import (
    first_index,
    next_occurrence,
    occurrence_at,
    occurrences_in_window,
    validate_recurrence,
)

from .fakes import make_task, ts


def daily(**kwargs):
    return make_task(recurring=True, frequency_minutes=1440, task_id=1, **kwargs)


def test_single_task_inside_window() -> None:
    task = make_task(task_id=1)
    found = list(occurrences_in_window(
        task, ts("2024-01-01T08:00:00Z"), ts("2024-01-01T10:00:00Z")))
    assert len(found) == 1
    assert found[0].start == task.start_time
    assert found[0].end == task.end_time


@pytest.mark.parametrize(
    "window_start, window_end, expected",
    [
        ("2024-01-01T06:00:00Z", "2024-01-01T08:59:59Z", 0),
        ("2024-01-01T09:15:01Z", "2024-01-01T12:00:00Z", 0),
        ("2024-01-01T06:00:00Z", "2024-01-01T09:00:00Z", 1),
        ("2024-01-01T09:15:00Z", "2024-01-01T12:00:00Z", 1),
        ("2024-01-01T09:05:00Z", "2024-01-01T09:06:00Z", 1),
    ],
)
def test_single_task_window_intersection(window_start, window_end, expected) -> None:
    task = make_task(task_id=1)
    found = list(occurrences_in_window(task, ts(window_start), ts(window_end)))
    assert len(found) == expected


def test_non_recurring_ignores_frequency() -> None:
    task = make_task(task_id=1, frequency_minutes=0)
    found = list(occurrences_in_window(
        task, ts("2024-01-01T00:00:00Z"), ts("2024-02-01T00:00:00Z")))
    assert len(found) == 1


def test_recurring_starts_are_exact_multiples() -> None:
    task = make_task(
        task_id=1, recurring=True, frequency_minutes=90,
        start="2024-01-01T09:00:00Z", end="2024-01-01T09:30:00Z")
    found = list(occurrences_in_window(
        task, ts("2024-01-03T00:00:00Z"), ts("2024-01-04T00:00:00Z")))
    assert found
    for occurrence in found:
        offset = timedelta(minutes=90 * occurrence.index)
        assert occurrence.start == task.start_time + offset
        assert occurrence.end == task.end_time + offset
    assert [o.index for o in found] == list(
        range(found[0].index, found[0].index + len(found)))


@pytest.mark.parametrize(
    "window_start",
    [
        "2023-12-25T00:00:00Z",
        "2024-01-01T09:00:00Z",
        "2024-01-01T09:15:00Z",
        "2024-01-01T09:15:01Z",
        "2024-01-05T09:10:00Z",
        "2024-01-09T23:59:00Z",
    ],
)
def test_first_index_matches_linear_scan(window_start) -> None:
    task = daily()
    window_start = ts(window_start)
    scanned = next(
        k for k in itertools.count()
        if occurrence_at(task, k).end >= window_start)
    assert first_index(task, window_start) == scanned
    first = next(occurrences_in_window(task, window_start))
    assert first.index == scanned


def test_far_future_window_starts_near_the_window() -> None:
    task = make_task(
        task_id=1, recurring=True, frequency_minutes=1,
        start="2024-01-01T09:00:00Z", end="2024-01-01T09:00:30Z")
    found = list(occurrences_in_window(
        task, ts("2424-01-01T09:00:00Z"), ts("2424-01-01T09:02:00Z")))
    assert [o.start for o in found] == [
        ts("2424-01-01T09:00:00Z"),
        ts("2424-01-01T09:01:00Z"),
        ts("2424-01-01T09:02:00Z"),
    ]


def test_overlapping_occurrences_are_all_yielded() -> None:
    task = make_task(
        task_id=1, recurring=True, frequency_minutes=10,
        start="2024-01-01T09:00:00Z", end="2024-01-01T09:30:00Z")
    found = list(occurrences_in_window(
        task, ts("2024-01-01T09:25:00Z"), ts("2024-01-01T09:25:00Z")))
    # occurrences 0, 1 and 2 are all running at 09:25
    assert [o.index for o in found] == [0, 1, 2]
    assert found[0].end > found[1].start


def test_unbounded_window_is_lazy_and_restartable() -> None:
    task = daily()
    first = list(itertools.islice(occurrences_in_window(task), 3))
    again = list(itertools.islice(occurrences_in_window(task), 3))
    assert first == again
    assert [o.index for o in first] == [0, 1, 2]


def test_max_occurrences_caps_output() -> None:
    task = daily()
    found = list(occurrences_in_window(
        task, ts("2024-01-01T00:00:00Z"), None, max_occurrences=5))
    assert len(found) == 5


def test_reversed_window_is_rejected() -> None:
    with pytest.raises(ValueError):
        occurrences_in_window(
            daily(), ts("2024-01-02T00:00:00Z"), ts("2024-01-01T00:00:00Z"))


@pytest.mark.parametrize("frequency", [0, -5, None, 1.5, "60"])
def test_invalid_frequency_raises(frequency) -> None:
    task = make_task(task_id=7, recurring=True, frequency_minutes=frequency)
    with pytest.raises(InvalidRecurrence) as excinfo:
        occurrences_in_window(task, ts("2024-01-01T00:00:00Z"))
    assert excinfo.value.task_id == 7
    with pytest.raises(InvalidRecurrence):
        validate_recurrence(task)


def test_next_occurrence() -> None:
    task = daily()
    upcoming = next_occurrence(task, ts("2024-01-03T09:00:00Z"))
    assert upcoming.start == ts("2024-01-04T09:00:00Z")
    upcoming = next_occurrence(task, ts("2023-06-01T00:00:00Z"))
    assert upcoming.index == 0

    single = make_task(task_id=2)
    assert next_occurrence(single, ts("2024-01-01T08:00:00Z")).start == single.start_time
    assert next_occurrence(single, ts("2024-01-01T09:00:00Z")) is None


def test_occurrence_at_rejects_other_indexes_for_one_off_tasks() -> None:
    with pytest.raises(IndexError):
        occurrence_at(make_task(task_id=1), 1)


def test_out_of_range_frequency_is_rejected() -> None:
    task = make_task(task_id=3, recurring=True, frequency_minutes=10**12)
    with pytest.raises(InvalidRecurrence):
        validate_recurrence(task)


def test_series_stops_at_the_largest_date() -> None:
    task = make_task(
        task_id=1, recurring=True, frequency_minutes=1440,
        start="9999-12-30T00:00:00Z", end="9999-12-30T00:15:00Z")
    found = list(occurrences_in_window(task, ts("9999-12-29T00:00:00Z")))
    assert [o.index for o in found] == [0, 1]
    assert next_occurrence(task, ts("9999-12-31T00:00:00Z")) is None
