"""Composition root: build storage, store and binding once and wire them together."""

from __future__ import annotations

import dataclasses

from mytodo.conf import Settings, settings as default_settings
from mytodo.todo.binding import TaskListBinding
from mytodo.todo.storage import FileTaskStorage, MemoryTaskStorage, TaskStorage
from mytodo.todo.store import TaskStore


@dataclasses.dataclass(frozen=True, slots=True)
class TodoApp:
    storage: TaskStorage
    store: TaskStore
    binding: TaskListBinding


def build_app(settings: Settings | None = None, *, in_memory: bool = False) -> TodoApp:
    """Create the application object graph.

    The store performs its initial load here; a failed load leaves it empty.
    """
    settings = settings or default_settings
    storage: TaskStorage
    if in_memory:
        storage = MemoryTaskStorage(key=settings.STORAGE_KEY)
    else:
        storage = FileTaskStorage(settings.DATA_FILE, key=settings.STORAGE_KEY)
    store = TaskStore(storage)
    return TodoApp(storage=storage, store=store, binding=TaskListBinding(store))
