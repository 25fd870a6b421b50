"""Task list domain: models, storage, store and presentation binding."""

from .binding import TaskListBinding, TaskListState
from .exceptions import StorageError, TodoError
from .models import SubTask, Task
from .storage import FileTaskStorage, MemoryTaskStorage, TaskStorage
from .store import TaskStore

__all__ = [
    "FileTaskStorage",
    "MemoryTaskStorage",
    "StorageError",
    "SubTask",
    "Task",
    "TaskListBinding",
    "TaskListState",
    "TaskStorage",
    "TaskStore",
    "TodoError",
]
