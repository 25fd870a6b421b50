"""In-memory task store with persistence after every mutation.

The store owns the task list for the running process. Each mutating operation
runs validate -> mutate -> save -> return. Unknown ids, out-of-range indices and
empty titles are silent no-ops, not errors.

A failed save raises ``StorageError`` after the in-memory change has been
applied; nothing is rolled back, so the change may not be durable.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TypeVar
from uuid import UUID

from mytodo.todo.exceptions import StorageError
from mytodo.todo.models import SubTask, Task
from mytodo.todo.storage import TaskStorage

logger = logging.getLogger(__name__)

_Item = TypeVar("_Item", Task, SubTask)

# All-digit refs shorter than this are only ever positions.
MIN_NUMERIC_ID_PREFIX = 4


class TaskStore:
    """Authoritative task collection backed by a TaskStorage."""

    storage: TaskStorage
    _tasks: list[Task]

    def __init__(self, storage: TaskStorage) -> None:
        self.storage = storage
        self._tasks = []
        try:
            self._tasks = storage.load()
        except StorageError as e:
            logger.warning("Initial load failed, starting with an empty list: %s", e)

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    def _save(self) -> list[Task]:
        self.storage.save(self._tasks)
        return list(self._tasks)

    def _index_of(self, task_id: UUID) -> int | None:
        for i, task in enumerate(self._tasks):
            if task.id == task_id:
                return i
        return None

    def get_task(self, task_id: UUID) -> Task | None:
        index = self._index_of(task_id)
        return None if index is None else self._tasks[index]

    def find_task(self, ref: str) -> Task | None:
        """Resolve a user reference: a 1-based position or a (prefix of a) task id.

        In-range numbers are positions. Short numbers outside the list match
        nothing; other refs are matched against ids.

        Returns None when nothing matches or an id prefix is ambiguous.
        """
        return _resolve_ref(self._tasks, ref)

    # --- Operations ---

    def list_tasks(self) -> list[Task]:
        """Reload from storage and return the refreshed list.

        The in-memory list is replaced only if the load succeeds.
        """
        tasks = self.storage.load()
        self._tasks = tasks
        return list(self._tasks)

    def add_task(self, title: str) -> list[Task]:
        if not title:
            return list(self._tasks)
        task = Task(title=title)
        self._tasks.append(task)
        logger.info("Added task %s", task.id)
        return self._save()

    def toggle_task_completion(self, task_id: UUID) -> list[Task]:
        task = self.get_task(task_id)
        if task is None:
            return list(self._tasks)
        task.is_completed = not task.is_completed
        # Completing a parent completes its children; un-completing leaves them.
        if task.is_completed:
            for sub in task.sub_tasks:
                sub.is_completed = True
        return self._save()

    def delete_tasks_at(self, indices: Iterable[int]) -> list[Task]:
        """Remove tasks at the given 0-based positions. Out-of-range positions are ignored."""
        drop = {i for i in indices if 0 <= i < len(self._tasks)}
        if drop:
            self._tasks = [task for i, task in enumerate(self._tasks) if i not in drop]
            logger.info("Deleted %d task(s) by position", len(drop))
        return self._save()

    def delete_tasks(self, task_ids: Iterable[UUID]) -> list[Task]:
        """Remove tasks with the given ids. Unknown ids are ignored."""
        drop = set(task_ids)
        before = len(self._tasks)
        self._tasks = [task for task in self._tasks if task.id not in drop]
        if len(self._tasks) != before:
            logger.info("Deleted %d task(s) by id", before - len(self._tasks))
        return self._save()

    def toggle_task_expanded(self, task_id: UUID) -> list[Task]:
        task = self.get_task(task_id)
        if task is None:
            return list(self._tasks)
        task.is_expanded = not task.is_expanded
        return self._save()

    def add_sub_task(self, task_id: UUID, title: str) -> list[Task]:
        task = self.get_task(task_id)
        if task is None or not title:
            return list(self._tasks)
        # The parent's completion is not recomputed here; only sub-task toggles do that.
        sub = SubTask(title=title)
        task.sub_tasks.append(sub)
        logger.info("Added sub-task %s to task %s", sub.id, task.id)
        return self._save()

    def toggle_sub_task_completion(self, task_id: UUID, sub_task_id: UUID) -> list[Task]:
        task = self.get_task(task_id)
        if task is None:
            return list(self._tasks)
        sub = task.get_sub_task(sub_task_id)
        if sub is None:
            return list(self._tasks)
        sub.is_completed = not sub.is_completed
        task.is_completed = task.all_sub_tasks_completed
        return self._save()

    def delete_sub_task(self, task_id: UUID, sub_task_id: UUID) -> list[Task]:
        task = self.get_task(task_id)
        if task is None:
            return list(self._tasks)
        # Parent completion is not recomputed after removal.
        task.sub_tasks = [sub for sub in task.sub_tasks if sub.id != sub_task_id]
        return self._save()


def find_sub_task(task: Task, ref: str) -> SubTask | None:
    """Resolve a sub-task reference (1-based position or id prefix) within a task."""
    return _resolve_ref(task.sub_tasks, ref)


def _resolve_ref(items: list[_Item], ref: str) -> _Item | None:
    ref = ref.strip()
    if not ref:
        return None
    if ref.isascii() and ref.isdigit():
        if 1 <= int(ref) <= len(items):
            return items[int(ref) - 1]
        # Short out-of-range numbers never match an id.
        if len(ref) < MIN_NUMERIC_ID_PREFIX:
            return None
    return _match_id_prefix(items, ref)


def _match_id_prefix(items: list[_Item], prefix: str) -> _Item | None:
    prefix = prefix.lower()
    matches = [item for item in items if str(item.id).startswith(prefix)]
    if len(matches) == 1:
        return matches[0]
    return None
