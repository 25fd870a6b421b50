"""Task and sub-task models plus the JSON codec used by storage backends.

Attributes are snake_case in Python; the persisted form uses the camelCase
field names (``isCompleted``, ``subTasks``, ``isExpanded``) so files written by
older builds stay readable.
"""

from __future__ import annotations

import json
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from mytodo.todo.exceptions import StorageError


class SubTask(BaseModel):
    """A child entry of exactly one task. No further nesting."""

    model_config = ConfigDict(populate_by_name=True)

    id: UUID = Field(default_factory=uuid4, frozen=True)
    title: str
    is_completed: bool = Field(default=False, alias="isCompleted", strict=True)


class Task(BaseModel):
    """A top-level todo entry, optionally owning an ordered list of sub-tasks."""

    model_config = ConfigDict(populate_by_name=True)

    id: UUID = Field(default_factory=uuid4, frozen=True)
    title: str
    is_completed: bool = Field(default=False, alias="isCompleted", strict=True)
    sub_tasks: list[SubTask] = Field(default_factory=list, alias="subTasks")
    # UI-only: whether sub-tasks are shown.
    is_expanded: bool = Field(default=False, alias="isExpanded", strict=True)

    def get_sub_task(self, sub_task_id: UUID) -> SubTask | None:
        for sub in self.sub_tasks:
            if sub.id == sub_task_id:
                return sub
        return None

    @property
    def all_sub_tasks_completed(self) -> bool:
        """True only if there is at least one sub-task and every one is completed."""
        return bool(self.sub_tasks) and all(sub.is_completed for sub in self.sub_tasks)


_TASK_LIST: TypeAdapter[list[Task]] = TypeAdapter(list[Task])


def tasks_to_data(tasks: list[Task]) -> list[dict[str, Any]]:
    """Convert tasks to JSON-compatible data (UUIDs as strings, camelCase keys)."""
    return _TASK_LIST.dump_python(tasks, mode="json", by_alias=True)


def tasks_from_data(data: Any) -> list[Task]:
    """Build tasks from decoded JSON data.

    Raises:
        StorageError: If the data does not describe a list of tasks.
    """
    try:
        return _TASK_LIST.validate_python(data)
    except ValidationError as e:
        raise StorageError(f"Malformed task data: {e.error_count()} validation error(s)") from e


def dump_tasks(tasks: list[Task]) -> str:
    return json.dumps(tasks_to_data(tasks), ensure_ascii=False)


def load_tasks(text: str | bytes) -> list[Task]:
    """Decode a JSON array of tasks. Any malformed input fails the whole decode."""
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise StorageError(f"Invalid JSON in task data: {e}") from e
    return tasks_from_data(data)
