"""SQLModel table definitions backing the SQL repository adapters.

The ``users.email`` unique constraint is the storage-level guarantee for
email uniqueness; the service-level check only rejects collisions early.
"""

from datetime import datetime
from uuid import UUID

from pydantic import NaiveDatetime
from sqlalchemy import DateTime, Index, UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

from .models import Task, User


class TimestampedTable(SQLModel):
    """Base for tables with creation and modification timestamps.

    Timestamps are naive local time, stored without a zone.
    """

    created_at: NaiveDatetime = Field(
        default_factory=datetime.now, sa_type=DateTime(timezone=False)
    )
    updated_at: NaiveDatetime = Field(
        default_factory=datetime.now, sa_type=DateTime(timezone=False)
    )


class UserTable(TimestampedTable, table=True):
    """Persistence row for a ``User``."""

    __tablename__ = "users"
    __table_args__ = (UniqueConstraint("email", name="uq_users_email"),)

    id: UUID = Field(primary_key=True)
    username: str = Field(max_length=100)
    email: str = Field(max_length=254)

    tasks: list["TaskTable"] = Relationship(
        back_populates="user",
        sa_relationship_kwargs={
            "cascade": "all, delete-orphan",
            "order_by": "TaskTable.created_at",
        },
    )

    def to_domain(self, include_tasks: bool = False) -> User:
        """Convert to the ``User`` domain record."""
        return User(
            id=self.id,
            username=self.username,
            email=self.email,
            created_at=self.created_at,
            updated_at=self.updated_at,
            tasks=[task.to_domain() for task in self.tasks] if include_tasks else [],
        )

    @classmethod
    def from_domain(cls, user: User) -> "UserTable":
        """Create a row from a ``User`` domain record."""
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class TaskTable(TimestampedTable, table=True):
    """Persistence row for a ``Task``."""

    __tablename__ = "tasks"
    __table_args__ = (Index("ix_tasks_user_id", "user_id"),)

    id: UUID = Field(primary_key=True)
    user_id: UUID = Field(foreign_key="users.id")
    title: str = Field(max_length=200)
    description: str = Field(max_length=2000)
    completed: bool = Field(default=False)

    user: UserTable | None = Relationship(back_populates="tasks")

    def to_domain(self) -> Task:
        """Convert to the ``Task`` domain record."""
        return Task(
            id=self.id,
            user_id=self.user_id,
            title=self.title,
            description=self.description,
            completed=self.completed,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    @classmethod
    def from_domain(cls, task: Task) -> "TaskTable":
        """Create a row from a ``Task`` domain record."""
        return cls(
            id=task.id,
            user_id=task.user_id,
            title=task.title,
            description=task.description,
            completed=task.completed,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )


__all__ = ["TaskTable", "TimestampedTable", "UserTable"]
