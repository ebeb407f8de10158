from __future__ import annotations

from typing import TypedDict


# PUBLIC_INTERFACE
class TaskEntity(TypedDict):
    """
    A lightweight domain model representing a Task as held by the storage
    backends.

    Fields:
    - id: Unique integer identifier, assigned by the store and never reused
    - title: Non-empty title
    - description: Non-empty description
    - completed: Boolean completion flag (False on creation)
    """

    id: int
    title: str
    description: str
    completed: bool
