"""Repository ports the service layer depends on.

Storage-agnostic contracts keyed by identifier. Lookups return ``None`` for a
missing record; any storage technology implements the same method set.
Adapters may raise domain errors (for instance ``EmailAlreadyExistsError``
when a unique constraint fires); anything else they raise is wrapped by the
services as a ``RepositoryError``.
"""

from abc import ABC, abstractmethod
from typing import Any
from uuid import UUID

from ..schemas.models import Task, User


class UserRepository(ABC):
    """Contract for user persistence."""

    @abstractmethod
    def find_all(self) -> list[User]:
        """Return every stored user."""

    @abstractmethod
    def find_by_id(self, user_id: UUID) -> User | None:
        """Return the user with ``user_id``, with its tasks when available."""

    @abstractmethod
    def find_by_email(self, email: str) -> User | None:
        """Return the user holding ``email``."""

    @abstractmethod
    def save(self, user: User) -> None:
        """Persist a new user."""

    @abstractmethod
    def update(self, user_id: UUID, user: User) -> None:
        """Replace the stored user's mutable fields and timestamps."""

    @abstractmethod
    def update_fields(self, user_id: UUID, fields: dict[str, Any]) -> User:
        """Apply an already-validated field set and return the full record."""

    @abstractmethod
    def delete(self, user_id: UUID) -> None:
        """Remove the user and the tasks it owns."""


class TaskRepository(ABC):
    """Contract for task persistence."""

    @abstractmethod
    def save(self, user_id: UUID, task: Task) -> None:
        """Persist a new task owned by ``user_id``."""

    @abstractmethod
    def find_user_tasks(self, user_id: UUID) -> list[Task]:
        """Return the tasks owned by ``user_id``, oldest first."""

    @abstractmethod
    def find_task_by_id(self, user_id: UUID, task_id: UUID) -> Task | None:
        """Return the task ``task_id`` if ``user_id`` owns it."""

    @abstractmethod
    def update(self, task_id: UUID, task: Task) -> None:
        """Replace the stored task's mutable fields and ``updated_at``."""

    @abstractmethod
    def delete(self, task_id: UUID) -> None:
        """Remove the task."""
