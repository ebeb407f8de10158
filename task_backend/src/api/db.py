from __future__ import annotations

import contextlib
import logging
import os
import sqlite3
from dataclasses import dataclass
from threading import RLock
from typing import Generator, List, Optional

from .errors import StoreError
from .models import TaskEntity
from .repositories import Repository
from .schemas import TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Cols:
    table: str = "tasks"
    id: str = "id"
    title: str = "title"
    description: str = "description"
    completed: str = "completed"


_COLS = _Cols()

# Bounds of a SQLite INTEGER; ids outside them cannot be bound, let alone stored.
_MIN_ID = -(2**63)
_MAX_ID = 2**63 - 1


def _storable_id(task_id: int) -> bool:
    return _MIN_ID <= task_id <= _MAX_ID


class SQLiteRepository(Repository):
    """
    SQLite repository implementing the Repository interface.

    One connection is opened at construction and held until close(); every
    operation runs under a lock and commits (or rolls back) before returning,
    so each call is atomic with respect to the others.
    """

    def __init__(self, db_path: str) -> None:
        if db_path != ":memory:":
            os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self._lock = RLock()
        try:
            self._conn = sqlite3.connect(db_path, check_same_thread=False)
        except sqlite3.Error as e:
            logger.exception("Could not open sqlite database path=%s", db_path)
            raise StoreError() from e
        self._conn.row_factory = sqlite3.Row
        self._init_db()
        logger.info("SQLite task store opened path=%s", db_path)

    @contextlib.contextmanager
    def _tx(self) -> Generator[sqlite3.Connection, None, None]:
        with self._lock:
            try:
                yield self._conn
                self._conn.commit()
            except sqlite3.Error as e:
                # rollback itself fails once the connection has been closed
                with contextlib.suppress(sqlite3.ProgrammingError):
                    self._conn.rollback()
                logger.exception("SQLite operation failed path=%s", self._db_path)
                raise StoreError() from e

    def _init_db(self) -> None:
        with self._tx() as conn:
            # AUTOINCREMENT keeps ids of deleted rows from being handed out again.
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_COLS.table} (
                    {_COLS.id} INTEGER PRIMARY KEY AUTOINCREMENT,
                    {_COLS.title} TEXT NOT NULL CHECK (length({_COLS.title}) > 0),
                    {_COLS.description} TEXT NOT NULL CHECK (length({_COLS.description}) > 0),
                    {_COLS.completed} INTEGER NOT NULL DEFAULT 0
                )
                """
            )

    def _row_to_entity(self, row: sqlite3.Row) -> TaskEntity:
        return {
            "id": int(row[_COLS.id]),
            "title": str(row[_COLS.title]),
            "description": str(row[_COLS.description]),
            "completed": bool(row[_COLS.completed]),
        }

    def _select(self, conn: sqlite3.Connection, task_id: int) -> Optional[sqlite3.Row]:
        return conn.execute(
            f"SELECT * FROM {_COLS.table} WHERE {_COLS.id} = ?", (task_id,)
        ).fetchone()

    def list(self) -> List[TaskEntity]:
        with self._tx() as conn:
            rows = conn.execute(f"SELECT * FROM {_COLS.table} ORDER BY {_COLS.id} ASC").fetchall()
            return [self._row_to_entity(r) for r in rows]

    def get(self, task_id: int) -> Optional[TaskEntity]:
        if not _storable_id(task_id):
            return None
        with self._tx() as conn:
            row = self._select(conn, task_id)
            return self._row_to_entity(row) if row else None

    def create(self, data: TaskCreate) -> TaskEntity:
        with self._tx() as conn:
            cur = conn.execute(
                f"""
                INSERT INTO {_COLS.table} ({_COLS.title}, {_COLS.description}, {_COLS.completed})
                VALUES (?, ?, 0)
                """,
                (data.title, data.description),
            )
            row = self._select(conn, cur.lastrowid)
            assert row is not None
            return self._row_to_entity(row)

    def update(self, task_id: int, data: TaskUpdate) -> Optional[TaskEntity]:
        if not _storable_id(task_id):
            return None
        with self._tx() as conn:
            cur = conn.execute(
                f"""
                UPDATE {_COLS.table}
                SET {_COLS.title} = ?, {_COLS.description} = ?, {_COLS.completed} = ?
                WHERE {_COLS.id} = ?
                """,
                (data.title, data.description, 1 if data.completed else 0, task_id),
            )
            if cur.rowcount == 0:
                return None
            row = self._select(conn, task_id)
            assert row is not None
            return self._row_to_entity(row)

    def delete(self, task_id: int) -> bool:
        if not _storable_id(task_id):
            return False
        with self._tx() as conn:
            cur = conn.execute(f"DELETE FROM {_COLS.table} WHERE {_COLS.id} = ?", (task_id,))
            return cur.rowcount > 0

    def close(self) -> None:
        with self._lock:
            self._conn.close()
        logger.info("SQLite task store closed path=%s", self._db_path)
