from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from threading import RLock
from typing import List, Optional

from .models import TodoEntity
from .settings import Settings

logger = logging.getLogger(__name__)


def local_now() -> datetime:
    """Current local wall-clock time as a naive datetime."""
    return datetime.now()


# PUBLIC_INTERFACE
class Repository(ABC):
    """Abstract repository contract for todo storage backends."""

    @abstractmethod
    def insert(self, title: str, description: Optional[str], completed: bool) -> TodoEntity:
        """Store a new row and return it with id, created_at and updated_at populated."""

    @abstractmethod
    def find_by_id(self, todo_id: int) -> Optional[TodoEntity]:
        """Return the row with the given id, or None if there is none."""

    @abstractmethod
    def find_all_ordered_by_created_at_desc(self) -> List[TodoEntity]:
        """Return every row, newest created_at first, ties broken by id descending."""

    @abstractmethod
    def find_by_completed(self, completed: bool) -> List[TodoEntity]:
        """Return every row whose completed flag equals `completed`."""

    @abstractmethod
    def update(self, entity: TodoEntity) -> Optional[TodoEntity]:
        """
        Write back title, description and completed for entity["id"] and
        refresh updated_at. Return the stored row, or None if it no longer exists.
        """

    @abstractmethod
    def delete_by_id(self, todo_id: int) -> bool:
        """Delete a row by id. Return True if a row was removed."""


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository suitable for testing and default runtime.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: dict[int, TodoEntity] = {}
        self._next_id = 1

    def _allocate_id(self) -> int:
        with self._lock:
            i = self._next_id
            self._next_id += 1
            return i

    def insert(self, title: str, description: Optional[str], completed: bool) -> TodoEntity:
        now = local_now()
        with self._lock:
            entity: TodoEntity = {
                "id": self._allocate_id(),
                "title": title,
                "description": description,
                "completed": completed,
                "created_at": now,
                "updated_at": now,
            }
            self._items[entity["id"]] = entity
            return entity.copy()

    def find_by_id(self, todo_id: int) -> Optional[TodoEntity]:
        with self._lock:
            item = self._items.get(todo_id)
            return None if item is None else item.copy()

    def find_all_ordered_by_created_at_desc(self) -> List[TodoEntity]:
        with self._lock:
            items = sorted(
                self._items.values(),
                key=lambda t: (t["created_at"], t["id"]),
                reverse=True,
            )
            return [t.copy() for t in items]

    def find_by_completed(self, completed: bool) -> List[TodoEntity]:
        with self._lock:
            return [t.copy() for t in sorted(self._items.values(), key=lambda t: t["id"]) if t["completed"] == completed]

    def update(self, entity: TodoEntity) -> Optional[TodoEntity]:
        with self._lock:
            existing = self._items.get(entity["id"])
            if existing is None:
                return None

            updated = existing.copy()
            updated["title"] = entity["title"]
            updated["description"] = entity["description"]
            updated["completed"] = entity["completed"]
            # A clock step backwards must not put updated_at before created_at
            updated["updated_at"] = max(local_now(), existing["created_at"])

            self._items[updated["id"]] = updated
            return updated.copy()

    def delete_by_id(self, todo_id: int) -> bool:
        with self._lock:
            return self._items.pop(todo_id, None) is not None


# PUBLIC_INTERFACE
def build_repository(settings: Settings) -> Repository:
    """
    Return the repository named by settings.persistence_backend.
    - memory: InMemoryRepository
    - sqlite: SQLiteRepository at the path named by settings.datasource_url
    """
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteRepository

        if settings.datasource_username or settings.datasource_password:
            logger.debug("Datasource credentials are ignored by the sqlite backend")
        return SQLiteRepository(settings.sqlite_db_path)
    return InMemoryRepository()
