"""Presentation binding: exposes store state and operations to a UI.

UIs subscribe to state snapshots instead of reading store internals. A failed
operation never raises out of the binding; it publishes a state whose
``error_message`` describes what went wrong.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Iterable
from uuid import UUID

from mytodo.todo.exceptions import StorageError
from mytodo.todo.models import Task
from mytodo.todo.store import TaskStore

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True, slots=True)
class TaskListState:
    tasks: tuple[Task, ...] = ()
    error_message: str | None = None
    is_loading: bool = False


StateListener = Callable[[TaskListState], None]


def _snapshot(tasks: Iterable[Task]) -> tuple[Task, ...]:
    """Deep copies, so published states do not change when the store mutates its tasks."""
    return tuple(task.model_copy(deep=True) for task in tasks)


class TaskListBinding:
    """Runs store operations and publishes the resulting state to listeners."""

    store: TaskStore
    state: TaskListState
    _listeners: list[StateListener]

    def __init__(self, store: TaskStore) -> None:
        self.store = store
        self.state = TaskListState(tasks=_snapshot(store.tasks))
        self._listeners = []

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register a listener; returns a function that removes it again."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, state: TaskListState) -> None:
        self.state = state
        for listener in list(self._listeners):
            listener(state)

    def _run(self, action: str, operation: Callable[[], list[Task]]) -> bool:
        """Run a store operation; on StorageError keep the current store view and report it."""
        try:
            tasks = operation()
        except StorageError as e:
            message = f"Failed to {action}: {e}"
            logger.error(message)
            # The store may have applied the change in memory even though saving failed.
            self._publish(TaskListState(tasks=_snapshot(self.store.tasks), error_message=message))
            return False
        self._publish(TaskListState(tasks=_snapshot(tasks)))
        return True

    @property
    def error_message(self) -> str | None:
        return self.state.error_message

    @property
    def tasks(self) -> tuple[Task, ...]:
        return self.state.tasks

    def load(self) -> bool:
        self._publish(dataclasses.replace(self.state, is_loading=True, error_message=None))
        return self._run("load tasks", self.store.list_tasks)

    def add_task(self, title: str) -> bool:
        if not title:
            return False
        return self._run("add task", lambda: self.store.add_task(title))

    def toggle_task_completion(self, task_id: UUID) -> bool:
        return self._run(
            "update task status", lambda: self.store.toggle_task_completion(task_id)
        )

    def delete_tasks_at(self, indices: Iterable[int]) -> bool:
        positions = list(indices)
        return self._run("delete tasks", lambda: self.store.delete_tasks_at(positions))

    def delete_tasks(self, task_ids: Iterable[UUID]) -> bool:
        ids = list(task_ids)
        return self._run("delete tasks", lambda: self.store.delete_tasks(ids))

    def toggle_task_expanded(self, task_id: UUID) -> bool:
        return self._run(
            "expand or collapse task", lambda: self.store.toggle_task_expanded(task_id)
        )

    def add_sub_task(self, task_id: UUID, title: str) -> bool:
        if not title:
            return False
        return self._run("add sub-task", lambda: self.store.add_sub_task(task_id, title))

    def toggle_sub_task_completion(self, task_id: UUID, sub_task_id: UUID) -> bool:
        return self._run(
            "update sub-task status",
            lambda: self.store.toggle_sub_task_completion(task_id, sub_task_id),
        )

    def delete_sub_task(self, task_id: UUID, sub_task_id: UUID) -> bool:
        return self._run(
            "delete sub-task", lambda: self.store.delete_sub_task(task_id, sub_task_id)
        )
