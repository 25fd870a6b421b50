from __future__ import annotations

import logging
from pathlib import Path

import pytest

from mytodo.conf import settings
from mytodo.todo.exceptions import StorageError
from mytodo.todo.models import Task
from mytodo.todo.storage import MemoryTaskStorage


@pytest.fixture(autouse=True)
def _isolate_mytodo_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests hermetic: redirect data and log paths to tmp_path."""

    log_dir = tmp_path / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(settings, "DATA_FILE", tmp_path / "todos.json", raising=False)
    monkeypatch.setattr(settings, "LOG_DIR", log_dir, raising=False)
    monkeypatch.setattr(settings, "STORAGE_KEY", "todos", raising=False)

    yield

    # setup_logging() attaches handlers to the package logger; drop them between tests.
    logger = logging.getLogger("mytodo")
    for h in list(logger.handlers):
        h.close()
        logger.removeHandler(h)


class FailingStorage(MemoryTaskStorage):
    """Memory storage whose load/save can be switched to fail."""

    def __init__(self, fail_load: bool = False, fail_save: bool = False) -> None:
        super().__init__()
        self.fail_load = fail_load
        self.fail_save = fail_save
        self.save_calls = 0

    def load(self) -> list[Task]:
        if self.fail_load:
            raise StorageError("disk unavailable")
        return super().load()

    def save(self, tasks: list[Task]) -> None:
        self.save_calls += 1
        if self.fail_save:
            raise StorageError("disk full")
        super().save(tasks)


@pytest.fixture()
def storage() -> FailingStorage:
    return FailingStorage()
