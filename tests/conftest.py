# tests/conftest.py

import logging

import pytest

from todotask.models import FiredSet
from todotask.repository import TaskRepository

from .fakes import MemoryTaskStore, RecordingCalendar, ts


@pytest.fixture()
def store():
    return MemoryTaskStore()


@pytest.fixture()
def calendar():
    return RecordingCalendar()


@pytest.fixture()
def repo(store, calendar):
    """
    Repository over an in-memory store with a fixed clock.
    """
    return TaskRepository(
        store,
        calendar=calendar,
        clock=lambda: ts("2023-12-31T12:00:00Z"),
    ).load()


@pytest.fixture()
def fired():
    return FiredSet()


@pytest.fixture()
def config_file(tmp_path):
    """
    Config file pointing the data directory into tmp_path.
    """
    path = tmp_path / "config"
    path.write_text(
        "[main]\n"
        f"data_dir = {tmp_path / 'data'}\n"
        f"calendar_dir = {tmp_path / 'calendar'}\n"
        "\n"
        "[colors]\n"
        "disable_colors = true\n",
        encoding="utf-8",
    )
    return str(path)


@pytest.fixture(autouse=True)
def reset_logging():
    """
    Drop handlers installed by the CLI so they don't outlive capsys.
    """
    yield
    logger = logging.getLogger("todotask")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
