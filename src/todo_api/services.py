from __future__ import annotations

import logging
from typing import List

from .errors import TodoNotFoundError
from .models import TodoEntity
from .repositories import Repository
from .schemas import TodoIn

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class TodoService:
    """
    Business layer between the HTTP handlers and a Repository.

    Missing rows surface as TodoNotFoundError; StorageError from the
    repository propagates unchanged. Load-then-write sequences are not
    transactional, so concurrent writers to one id are last-writer-wins.
    """

    def __init__(self, repository: Repository) -> None:
        self._repository = repository

    def list(self) -> List[TodoEntity]:
        """All todos, newest first."""
        return self._repository.find_all_ordered_by_created_at_desc()

    def get(self, todo_id: int) -> TodoEntity:
        item = self._repository.find_by_id(todo_id)
        if item is None:
            logger.warning("Todo %s not found", todo_id)
            raise TodoNotFoundError(todo_id)
        return item

    def create(self, data: TodoIn) -> TodoEntity:
        created = self._repository.insert(
            title=data.title,
            description=data.description,
            completed=bool(data.completed),
        )
        logger.info("Created todo %s", created["id"])
        return created

    def update(self, todo_id: int, data: TodoIn) -> TodoEntity:
        """
        Replace title and description of an existing todo. `completed` is
        replaced when the body carries it and kept otherwise.
        """
        current = self.get(todo_id)
        current["title"] = data.title
        current["description"] = data.description
        if data.completed is not None:
            current["completed"] = data.completed

        updated = self._repository.update(current)
        if updated is None:
            # deleted between the load and the write
            raise TodoNotFoundError(todo_id)
        logger.info("Updated todo %s", todo_id)
        return updated

    def delete(self, todo_id: int) -> None:
        self.get(todo_id)
        if not self._repository.delete_by_id(todo_id):
            raise TodoNotFoundError(todo_id)
        logger.info("Deleted todo %s", todo_id)

    def list_by_completed(self, completed: bool) -> List[TodoEntity]:
        return self._repository.find_by_completed(completed)
