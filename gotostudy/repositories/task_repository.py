"""SQLModel implementation of the task repository port."""

from uuid import UUID

from sqlmodel import select

from ..core.errors import TaskNotFoundError
from ..schemas.database import TaskTable
from ..schemas.models import Task
from .base import BaseRepository
from .ports import TaskRepository


class SqlTaskRepository(BaseRepository[TaskTable], TaskRepository):
    """Task repository backed by a SQLModel session."""

    def get_table_class(self) -> type[TaskTable]:
        """Return the table class for this repository."""
        return TaskTable

    def save(self, user_id: UUID, task: Task) -> None:
        """Insert a new task row owned by ``user_id``."""
        row = TaskTable.from_domain(task)
        row.user_id = user_id
        self.session.add(row)
        self.commit()

    def find_user_tasks(self, user_id: UUID) -> list[Task]:
        """Get tasks owned by a user, oldest first."""
        statement = (
            select(TaskTable)
            .where(TaskTable.user_id == user_id)
            .order_by(TaskTable.created_at)
        )
        return [row.to_domain() for row in self.session.exec(statement).all()]

    def find_task_by_id(self, user_id: UUID, task_id: UUID) -> Task | None:
        """Get a task scoped to its owner."""
        row = self.session.exec(
            select(TaskTable).where(
                TaskTable.id == task_id, TaskTable.user_id == user_id
            )
        ).first()
        return row.to_domain() if row else None

    def update(self, task_id: UUID, task: Task) -> None:
        """Overwrite title, description, completion flag and ``updated_at``."""
        row = self.get_row(task_id)
        if row is None:
            raise TaskNotFoundError(task_id)

        row.title = task.title
        row.description = task.description
        row.completed = task.completed
        row.updated_at = task.updated_at
        self.session.add(row)
        self.commit()

    def delete(self, task_id: UUID) -> None:
        """Delete a task row."""
        row = self.get_row(task_id)
        if row is None:
            raise TaskNotFoundError(task_id)

        self.session.delete(row)
        self.commit()
