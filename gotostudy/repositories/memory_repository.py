"""In-memory implementations of the repository ports.

Both adapters operate on an explicit ``InMemoryStore`` instance passed in at
construction, never on module-level state. Records are copied on the way in
and out so callers cannot mutate stored state by accident. A lock makes each
call atomic, matching what a database gives the SQL adapters.
"""

import threading
from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from ..core.errors import (
    EmailAlreadyExistsError,
    InvalidUpdateFieldError,
    TaskNotFoundError,
    UserNotFoundError,
)
from ..schemas.models import USER_MUTABLE_FIELDS, Task, User
from .ports import TaskRepository, UserRepository


@dataclass
class InMemoryStore:
    """Storage shared by the in-memory user and task repositories."""

    users: dict[UUID, User] = field(default_factory=dict)
    tasks: dict[UUID, Task] = field(default_factory=dict)
    lock: threading.RLock = field(default_factory=threading.RLock)

    def tasks_of(self, user_id: UUID) -> list[Task]:
        """Return copies of the tasks owned by ``user_id``, oldest first."""
        owned = [task for task in self.tasks.values() if task.user_id == user_id]
        owned.sort(key=lambda task: task.created_at)
        return [task.model_copy(deep=True) for task in owned]

    def email_holder(self, email: str) -> User | None:
        """Return the stored user holding ``email``."""
        for user in self.users.values():
            if user.email == email:
                return user
        return None


class InMemoryUserRepository(UserRepository):
    """User repository backed by an ``InMemoryStore``."""

    def __init__(self, store: InMemoryStore | None = None):
        self.store = store if store is not None else InMemoryStore()

    def find_all(self) -> list[User]:
        with self.store.lock:
            users = sorted(self.store.users.values(), key=lambda u: u.created_at)
            return [user.model_copy(deep=True) for user in users]

    def find_by_id(self, user_id: UUID) -> User | None:
        with self.store.lock:
            user = self.store.users.get(user_id)
            if user is None:
                return None
            return user.model_copy(
                update={"tasks": self.store.tasks_of(user_id)}, deep=True
            )

    def find_by_email(self, email: str) -> User | None:
        with self.store.lock:
            user = self.store.email_holder(email)
            return user.model_copy(deep=True) if user else None

    def save(self, user: User) -> None:
        with self.store.lock:
            self._check_unique(user.email, user.id)
            self.store.users[user.id] = user.model_copy(
                update={"tasks": []}, deep=True
            )

    def update(self, user_id: UUID, user: User) -> None:
        with self.store.lock:
            stored = self._require(user_id)
            self._check_unique(user.email, user_id)
            self.store.users[user_id] = stored.model_copy(
                update={
                    "username": user.username,
                    "email": user.email,
                    "updated_at": user.updated_at,
                }
            )

    def update_fields(self, user_id: UUID, fields: dict[str, Any]) -> User:
        unknown = sorted(set(fields) - (USER_MUTABLE_FIELDS | {"updated_at"}))
        if unknown:
            raise InvalidUpdateFieldError(
                f"invalid update fields: {', '.join(unknown)}", unknown
            )

        with self.store.lock:
            stored = self._require(user_id)
            if "email" in fields:
                self._check_unique(fields["email"], user_id)
            self.store.users[user_id] = stored.model_copy(update=dict(fields))
            return self.find_by_id(user_id)

    def delete(self, user_id: UUID) -> None:
        with self.store.lock:
            self._require(user_id)
            del self.store.users[user_id]
            for task_id in [
                task.id for task in self.store.tasks.values() if task.user_id == user_id
            ]:
                del self.store.tasks[task_id]

    def _require(self, user_id: UUID) -> User:
        user = self.store.users.get(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def _check_unique(self, email: str, owner_id: UUID | None) -> None:
        holder = self.store.email_holder(email)
        if holder is not None and holder.id != owner_id:
            raise EmailAlreadyExistsError(email)


class InMemoryTaskRepository(TaskRepository):
    """Task repository backed by an ``InMemoryStore``."""

    def __init__(self, store: InMemoryStore | None = None):
        self.store = store if store is not None else InMemoryStore()

    def save(self, user_id: UUID, task: Task) -> None:
        with self.store.lock:
            self.store.tasks[task.id] = task.model_copy(
                update={"user_id": user_id}, deep=True
            )

    def find_user_tasks(self, user_id: UUID) -> list[Task]:
        with self.store.lock:
            return self.store.tasks_of(user_id)

    def find_task_by_id(self, user_id: UUID, task_id: UUID) -> Task | None:
        with self.store.lock:
            task = self.store.tasks.get(task_id)
            if task is None or task.user_id != user_id:
                return None
            return task.model_copy(deep=True)

    def update(self, task_id: UUID, task: Task) -> None:
        with self.store.lock:
            stored = self.store.tasks.get(task_id)
            if stored is None:
                raise TaskNotFoundError(task_id)
            self.store.tasks[task_id] = stored.model_copy(
                update={
                    "title": task.title,
                    "description": task.description,
                    "completed": task.completed,
                    "updated_at": task.updated_at,
                }
            )

    def delete(self, task_id: UUID) -> None:
        with self.store.lock:
            if self.store.tasks.pop(task_id, None) is None:
                raise TaskNotFoundError(task_id)
