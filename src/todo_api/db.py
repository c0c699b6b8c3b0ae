from __future__ import annotations

import logging
import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Generator, List, Optional

from .errors import StorageError
from .models import TodoEntity
from .repositories import Repository, local_now

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Cols:
    table: str = "todos"
    id: str = "id"
    title: str = "title"
    description: str = "description"
    completed: str = "completed"
    created_at: str = "created_at"
    updated_at: str = "updated_at"


_COLS = _Cols()


def _format_ts(value: datetime) -> str:
    # Fixed width so that text ordering matches chronological ordering
    return value.isoformat(timespec="microseconds")


class SQLiteRepository(Repository):
    """
    Lightweight SQLite repository implementing the Repository interface.

    A connection is opened for every call and closed on all exit paths;
    driver errors are re-raised as StorageError.
    """

    def __init__(self, db_path: str) -> None:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self._init_db()

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        try:
            conn = sqlite3.connect(self._db_path)
        except sqlite3.Error as exc:
            raise StorageError(f"Could not open database {self._db_path}: {exc}") from exc
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            raise StorageError(str(exc)) from exc
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_COLS.table} (
                    {_COLS.id} INTEGER PRIMARY KEY AUTOINCREMENT,
                    {_COLS.title} TEXT NOT NULL,
                    {_COLS.description} TEXT NULL,
                    {_COLS.completed} INTEGER NOT NULL DEFAULT 0,
                    {_COLS.created_at} TEXT NOT NULL,
                    {_COLS.updated_at} TEXT NOT NULL
                )
                """
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_COLS.table}_completed ON {_COLS.table}({_COLS.completed})"
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_COLS.table}_created_at ON {_COLS.table}({_COLS.created_at})"
            )
        logger.info("SQLite schema ready at %s", self._db_path)

    def _row_to_entity(self, row: sqlite3.Row) -> TodoEntity:
        return {
            "id": int(row[_COLS.id]),
            "title": str(row[_COLS.title]),
            "description": row[_COLS.description],
            "completed": bool(row[_COLS.completed]),
            "created_at": datetime.fromisoformat(row[_COLS.created_at]),
            "updated_at": datetime.fromisoformat(row[_COLS.updated_at]),
        }

    def _select_one(self, conn: sqlite3.Connection, todo_id: int) -> Optional[sqlite3.Row]:
        return conn.execute(f"SELECT * FROM {_COLS.table} WHERE {_COLS.id} = ?", (todo_id,)).fetchone()

    def insert(self, title: str, description: Optional[str], completed: bool) -> TodoEntity:
        now = _format_ts(local_now())
        with self._conn() as conn:
            cur = conn.execute(
                f"""
                INSERT INTO {_COLS.table} ({_COLS.title}, {_COLS.description}, {_COLS.completed},
                    {_COLS.created_at}, {_COLS.updated_at})
                VALUES (?, ?, ?, ?, ?)
                """,
                (title, description, 1 if completed else 0, now, now),
            )
            row = self._select_one(conn, cur.lastrowid)
            assert row is not None
            return self._row_to_entity(row)

    def find_by_id(self, todo_id: int) -> Optional[TodoEntity]:
        with self._conn() as conn:
            row = self._select_one(conn, todo_id)
            return self._row_to_entity(row) if row else None

    def find_all_ordered_by_created_at_desc(self) -> List[TodoEntity]:
        with self._conn() as conn:
            rows = conn.execute(
                f"SELECT * FROM {_COLS.table} ORDER BY {_COLS.created_at} DESC, {_COLS.id} DESC"
            ).fetchall()
            return [self._row_to_entity(r) for r in rows]

    def find_by_completed(self, completed: bool) -> List[TodoEntity]:
        with self._conn() as conn:
            rows = conn.execute(
                f"SELECT * FROM {_COLS.table} WHERE {_COLS.completed} = ? ORDER BY {_COLS.id}",
                (1 if completed else 0,),
            ).fetchall()
            return [self._row_to_entity(r) for r in rows]

    def update(self, entity: TodoEntity) -> Optional[TodoEntity]:
        with self._conn() as conn:
            cur = conn.execute(
                f"""
                UPDATE {_COLS.table}
                SET {_COLS.title} = ?, {_COLS.description} = ?, {_COLS.completed} = ?,
                    {_COLS.updated_at} = MAX(?, {_COLS.created_at})
                WHERE {_COLS.id} = ?
                """,
                (
                    entity["title"],
                    entity["description"],
                    1 if entity["completed"] else 0,
                    _format_ts(local_now()),
                    entity["id"],
                ),
            )
            if cur.rowcount == 0:
                return None
            row = self._select_one(conn, entity["id"])
            assert row is not None
            return self._row_to_entity(row)

    def delete_by_id(self, todo_id: int) -> bool:
        with self._conn() as conn:
            cur = conn.execute(f"DELETE FROM {_COLS.table} WHERE {_COLS.id} = ?", (todo_id,))
            return cur.rowcount > 0
