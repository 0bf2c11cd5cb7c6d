"""Repository ports and their storage adapters.

The service layer depends only on the ports; the SQL and in-memory adapters
implement them.
"""

from .base import BaseRepository
from .memory_repository import (
    InMemoryStore,
    InMemoryTaskRepository,
    InMemoryUserRepository,
)
from .ports import TaskRepository, UserRepository
from .task_repository import SqlTaskRepository
from .user_repository import SqlUserRepository


__all__ = [
    "BaseRepository",
    "InMemoryStore",
    "InMemoryTaskRepository",
    "InMemoryUserRepository",
    "SqlTaskRepository",
    "SqlUserRepository",
    "TaskRepository",
    "UserRepository",
]
