from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from threading import RLock
from typing import List, Optional

from .models import TaskEntity
from .schemas import TaskCreate, TaskUpdate
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class Repository(ABC):
    """Abstract repository contract for task storage backends."""

    @abstractmethod
    def list(self) -> List[TaskEntity]:
        """Return all tasks in ascending id order (empty list if none exist)."""

    @abstractmethod
    def get(self, task_id: int) -> Optional[TaskEntity]:
        """Return a TaskEntity by id, or None if not found."""

    @abstractmethod
    def create(self, data: TaskCreate) -> TaskEntity:
        """Create and return a new, not yet completed, TaskEntity."""

    @abstractmethod
    def update(self, task_id: int, data: TaskUpdate) -> Optional[TaskEntity]:
        """Replace title, description and completed. Return updated entity or None if not found."""

    @abstractmethod
    def delete(self, task_id: int) -> bool:
        """Delete a TaskEntity by id. Return True if deleted, False if not found."""

    def close(self) -> None:
        """Release backend resources. Called once at application shutdown."""


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository suitable for testing and default runtime.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: dict[int, TaskEntity] = {}
        self._next_id = 1

    def _allocate_id(self) -> int:
        with self._lock:
            i = self._next_id
            self._next_id += 1
            return i

    def list(self) -> List[TaskEntity]:
        with self._lock:
            return [self._items[k].copy() for k in sorted(self._items)]

    def get(self, task_id: int) -> Optional[TaskEntity]:
        with self._lock:
            item = self._items.get(task_id)
            return None if item is None else item.copy()

    def create(self, data: TaskCreate) -> TaskEntity:
        with self._lock:
            entity: TaskEntity = {
                "id": self._allocate_id(),
                "title": data.title,
                "description": data.description,
                "completed": False,
            }
            self._items[entity["id"]] = entity
            return entity.copy()

    def update(self, task_id: int, data: TaskUpdate) -> Optional[TaskEntity]:
        with self._lock:
            existing = self._items.get(task_id)
            if existing is None:
                return None

            updated: TaskEntity = {
                "id": existing["id"],
                "title": data.title,
                "description": data.description,
                "completed": data.completed,
            }
            self._items[task_id] = updated
            return updated.copy()

    def delete(self, task_id: int) -> bool:
        with self._lock:
            return self._items.pop(task_id, None) is not None


# PUBLIC_INTERFACE
def get_repository(settings: Optional[Settings] = None) -> Repository:
    """
    Factory to return the configured repository based on settings.
    - memory: InMemoryRepository
    - sqlite: SQLiteRepository backed by the standard library sqlite3 driver
    """
    settings = settings or get_settings()
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteRepository

        repo: Repository = SQLiteRepository(settings.sqlite_db_path)
    else:
        repo = InMemoryRepository()
    logger.info("Task store ready backend=%s", settings.persistence_backend)
    return repo
