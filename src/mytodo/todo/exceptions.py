"""Custom exception types used by the task store and its storage backends."""


class TodoError(Exception):
    """Base class for mytodo errors."""


class StorageError(TodoError):
    """Raised when the task list cannot be read, written, encoded or decoded."""
