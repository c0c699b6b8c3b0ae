from __future__ import annotations


class TodoError(Exception):
    """Base class for errors raised by the todo service."""


class TodoNotFoundError(TodoError):
    """No row exists for the requested id."""

    def __init__(self, todo_id: int) -> None:
        self.todo_id = todo_id
        super().__init__(f"Todo not found with id: {todo_id}")


class StorageError(TodoError):
    """The storage backend failed (connection, constraint, I/O)."""
