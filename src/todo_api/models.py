from __future__ import annotations

from datetime import datetime
from typing import Optional, TypedDict


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    A stored Todo row as handed between the repositories and the service.

    Fields:
    - id: Unique integer identifier, assigned by storage
    - title: Non-null title
    - description: Optional detailed description
    - completed: Boolean completion flag
    - created_at: Local naive creation timestamp, never mutated
    - updated_at: Local naive last update timestamp
    """

    id: int
    title: str
    description: Optional[str]
    completed: bool
    created_at: datetime
    updated_at: datetime
