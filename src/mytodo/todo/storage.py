"""Storage backends for the task list.

Backends persist the whole collection as one value under a fixed key. Every
``save`` overwrites that value; there are no incremental updates.
"""

from __future__ import annotations

import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from typing_extensions import override

from mytodo.todo.exceptions import StorageError
from mytodo.todo.models import Task, dump_tasks, load_tasks, tasks_from_data, tasks_to_data

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "todos"


class TaskStorage(ABC):
    """Base class for task list storage."""

    key: str

    def __init__(self, key: str = DEFAULT_STORAGE_KEY) -> None:
        self.key = key

    @abstractmethod
    def load(self) -> list[Task]:
        """Return the stored tasks, or an empty list when nothing was saved yet.

        Raises:
            StorageError: On I/O failure or malformed data.
        """
        raise NotImplementedError

    @abstractmethod
    def save(self, tasks: list[Task]) -> None:
        """Overwrite the stored tasks.

        Raises:
            StorageError: On I/O or encoding failure.
        """
        del tasks
        raise NotImplementedError


class MemoryTaskStorage(TaskStorage):
    """In-process key-value storage. Values are kept as encoded JSON text."""

    values: dict[str, str]

    def __init__(self, key: str = DEFAULT_STORAGE_KEY) -> None:
        super().__init__(key)
        self.values = {}

    @override
    def load(self) -> list[Task]:
        raw = self.values.get(self.key)
        if raw is None:
            return []
        return load_tasks(raw)

    @override
    def save(self, tasks: list[Task]) -> None:
        self.values[self.key] = dump_tasks(tasks)


class FileTaskStorage(TaskStorage):
    """JSON key-value file on disk.

    The file holds a JSON object; the task list lives under ``key``. Other keys
    are left untouched on save. Writes go to a temp file first and are moved
    into place with ``os.replace``.
    """

    path: Path

    def __init__(self, path: Path, key: str = DEFAULT_STORAGE_KEY) -> None:
        super().__init__(key)
        self.path = Path(path)

    def _read_document(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            raw = self.path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read {self.path}: {e}") from e
        if not raw.strip():
            return {}
        try:
            document = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StorageError(f"Invalid JSON in {self.path}: {e}") from e
        if not isinstance(document, dict):
            raise StorageError(f"Expected a JSON object in {self.path}")
        return document

    @override
    def load(self) -> list[Task]:
        document = self._read_document()
        if self.key not in document:
            return []
        tasks = tasks_from_data(document[self.key])
        logger.debug("Loaded %d tasks from %s", len(tasks), self.path)
        return tasks

    @override
    def save(self, tasks: list[Task]) -> None:
        document = self._read_document()
        document[self.key] = tasks_to_data(tasks)

        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(document, ensure_ascii=False, indent=2), encoding="utf-8")
            os.replace(tmp, self.path)
        except OSError as e:
            raise StorageError(f"Failed to write {self.path}: {e}") from e
        logger.debug("Saved %d tasks to %s", len(tasks), self.path)
