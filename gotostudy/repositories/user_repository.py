"""SQLModel implementation of the user repository port."""

from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from ..core.errors import (
    EmailAlreadyExistsError,
    InvalidUpdateFieldError,
    UserNotFoundError,
)
from ..schemas.database import UserTable
from ..schemas.models import USER_MUTABLE_FIELDS, User
from .base import BaseRepository
from .ports import UserRepository


# Columns update_fields may touch: the mutable set plus the service stamp.
_UPDATABLE_COLUMNS = USER_MUTABLE_FIELDS | {"updated_at"}


class SqlUserRepository(BaseRepository[UserTable], UserRepository):
    """User repository backed by a SQLModel session."""

    def get_table_class(self) -> type[UserTable]:
        """Return the table class for this repository."""
        return UserTable

    def find_all(self) -> list[User]:
        """Return every user, oldest first, without tasks."""
        statement = select(UserTable).order_by(UserTable.created_at)
        return [row.to_domain() for row in self.session.exec(statement).all()]

    def find_by_id(self, user_id: UUID) -> User | None:
        """Return the user and its tasks."""
        row = self.get_row(user_id)
        return row.to_domain(include_tasks=True) if row else None

    def find_by_email(self, email: str) -> User | None:
        """Return the user holding ``email``."""
        row = self.session.exec(
            select(UserTable).where(UserTable.email == email)
        ).first()
        return row.to_domain() if row else None

    def save(self, user: User) -> None:
        """Insert a new user row."""
        self.session.add(UserTable.from_domain(user))
        self._commit_unique(user.email)

    def update(self, user_id: UUID, user: User) -> None:
        """Overwrite username, email and ``updated_at``."""
        row = self._require_row(user_id)
        row.username = user.username
        row.email = user.email
        row.updated_at = user.updated_at
        self.session.add(row)
        self._commit_unique(user.email)

    def update_fields(self, user_id: UUID, fields: dict[str, Any]) -> User:
        """Apply the given columns and return the refreshed user."""
        unknown = sorted(set(fields) - _UPDATABLE_COLUMNS)
        if unknown:
            raise InvalidUpdateFieldError(
                f"invalid update fields: {', '.join(unknown)}", unknown
            )

        row = self._require_row(user_id)
        for key, value in fields.items():
            setattr(row, key, value)
        self.session.add(row)
        self._commit_unique(fields.get("email", row.email))
        self.session.refresh(row)
        return row.to_domain(include_tasks=True)

    def delete(self, user_id: UUID) -> None:
        """Delete the user row; owned tasks cascade."""
        row = self._require_row(user_id)
        self.session.delete(row)
        self.commit()

    def _require_row(self, user_id: UUID) -> UserTable:
        row = self.get_row(user_id)
        if row is None:
            raise UserNotFoundError(user_id)
        return row

    def _commit_unique(self, email: str) -> None:
        """Commit, translating an email unique violation to a domain error."""
        try:
            self.commit()
        except IntegrityError as e:
            if "email" in str(e.orig).lower():
                raise EmailAlreadyExistsError(email) from e
            raise
