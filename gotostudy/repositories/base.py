"""Base repository for SQLModel-backed adapters.

Provides session handling shared by the SQL adapters: row lookup by
primary key and a per-call commit that rolls back on failure, so each
port call is atomic on its own.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar
from uuid import UUID

from sqlalchemy import func
from sqlmodel import Session, SQLModel, select


TableT = TypeVar("TableT", bound=SQLModel)


class BaseRepository(Generic[TableT], ABC):
    """Base repository with common session operations."""

    def __init__(self, session: Session):
        self.session = session

    @abstractmethod
    def get_table_class(self) -> type[TableT]:
        """Return the SQLModel table class."""

    def get_row(self, entity_id: UUID) -> TableT | None:
        """Get a row by primary key."""
        return self.session.get(self.get_table_class(), entity_id)

    def count(self) -> int:
        """Count stored rows."""
        statement = select(func.count()).select_from(self.get_table_class())
        return self.session.exec(statement).one()

    def commit(self) -> None:
        """Commit the pending unit of work, rolling back on failure."""
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
