"""Task service: sole authority for the task lifecycle.

Every operation that names a user checks the owner through the user
repository before touching tasks, so a task can only be created or updated
for a user that exists at that moment.
"""

import logging
from datetime import datetime
from uuid import UUID, uuid4

from ..core.errors import (
    InvalidTaskIDError,
    NoTasksFoundError,
    TaskNotFoundError,
    UserNotFoundError,
    repository_call,
)
from ..repositories.ports import TaskRepository, UserRepository
from ..schemas.models import TASK_MUTABLE_FIELDS, Task
from ..utils.clock import next_timestamp


logger = logging.getLogger(__name__)

NIL_UUID = UUID(int=0)


class TaskService:
    """Business operations for tasks owned by users."""

    def __init__(
        self,
        task_repository: TaskRepository,
        user_repository: UserRepository,
    ):
        """Initialize the service.

        Args:
            task_repository: Storage port for tasks.
            user_repository: Storage port consulted for owner existence.

        """
        self.task_repo = task_repository
        self.user_repo = user_repository

    def create_task(self, user_id: UUID, candidate: Task) -> Task:
        """Create a task for an existing user and return it as stored."""
        self._require_user(user_id)

        now = datetime.now()
        task = candidate.model_copy(
            update={
                "id": uuid4(),
                "user_id": user_id,
                "created_at": now,
                "updated_at": now,
            }
        )

        with repository_call("save task"):
            self.task_repo.save(user_id, task)

        logger.info(f"Created task {task.id} for user {user_id}")
        return task

    def find_user_tasks(self, user_id: UUID) -> list[Task]:
        """Return the tasks a user owns.

        Raises:
            UserNotFoundError: If the user does not exist.
            NoTasksFoundError: If the user exists but owns no tasks.

        """
        self._require_user(user_id)

        with repository_call("find user tasks"):
            tasks = list(self.task_repo.find_user_tasks(user_id))

        if not tasks:
            raise NoTasksFoundError(user_id)
        return tasks

    def find_task_by_id(self, user_id: UUID, task_id: UUID) -> Task:
        """Return a task owned by ``user_id``."""
        self._require_task_id(task_id)
        return self._require_task(user_id, task_id)

    def update_task(self, user_id: UUID, task_id: UUID, replacement: Task) -> None:
        """Overwrite a task's title, description and completion flag.

        ``user_id`` and ``created_at`` are preserved from the stored task and
        ``updated_at`` is refreshed; nothing else is read from
        ``replacement``.
        """
        self._require_task_id(task_id)
        self._require_user(user_id)
        existing = self._require_task(user_id, task_id)

        changes = {name: getattr(replacement, name) for name in TASK_MUTABLE_FIELDS}
        changes["updated_at"] = next_timestamp(existing.updated_at)
        updated = existing.model_copy(update=changes)

        with repository_call("update task"):
            self.task_repo.update(task_id, updated)

        logger.info(f"Updated task {task_id} of user {user_id}")

    def delete_task(self, user_id: UUID, task_id: UUID) -> None:
        """Delete a task owned by ``user_id``; unknown tasks are an error."""
        self._require_task_id(task_id)
        self._require_task(user_id, task_id)

        with repository_call("delete task"):
            self.task_repo.delete(task_id)

        logger.info(f"Deleted task {task_id} of user {user_id}")

    def _require_user(self, user_id: UUID) -> None:
        with repository_call("find user by id"):
            user = self.user_repo.find_by_id(user_id)
        if user is None:
            logger.warning(f"Task operation for unknown user {user_id}")
            raise UserNotFoundError(user_id)

    def _require_task(self, user_id: UUID, task_id: UUID) -> Task:
        with repository_call("find task by id"):
            task = self.task_repo.find_task_by_id(user_id, task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    @staticmethod
    def _require_task_id(task_id: UUID | None) -> None:
        if task_id is None or task_id == NIL_UUID:
            raise InvalidTaskIDError(task_id)
