"""User service: sole authority for the user lifecycle.

Enforces email syntax and uniqueness, restricts partial updates to the
mutable field set, and manages identifiers and timestamps before delegating
to the injected ``UserRepository``.

The email uniqueness check is read-then-write and not atomic with the
write. Two concurrent registrations for one address can both pass it; the
storage unique constraint decides, and the SQL adapter reports its
violation as ``EmailAlreadyExistsError``.
"""

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any
from uuid import UUID, uuid4

from pydantic import ValidationError

from ..core.errors import (
    EmailAlreadyExistsError,
    InvalidUpdateFieldError,
    UserNotFoundError,
    repository_call,
)
from ..repositories.ports import UserRepository
from ..schemas.models import USER_MUTABLE_FIELDS, User, UserUpdate
from ..utils.clock import next_timestamp
from ..utils.validators import is_email_in_use, validate_email


logger = logging.getLogger(__name__)


class UserService:
    """Business operations for users.

    Holds no state beyond the repository it is constructed with.
    """

    def __init__(self, user_repository: UserRepository):
        """Initialize the service.

        Args:
            user_repository: Storage port for users.

        """
        self.user_repo = user_repository

    def register_user(self, candidate: User) -> User:
        """Register a new user.

        Validates the email, rejects addresses already in use, assigns a fresh
        identifier and both timestamps, then performs exactly one write.

        Raises:
            InvalidEmailError: If the email syntax is invalid.
            EmailAlreadyExistsError: If any user already holds the email.
            RepositoryError: If storage fails.

        """
        validate_email(candidate.email)
        self._ensure_email_available(candidate.email)

        now = datetime.now()
        user = candidate.model_copy(
            update={"id": uuid4(), "created_at": now, "updated_at": now, "tasks": []}
        )

        with repository_call("save user"):
            self.user_repo.save(user)

        logger.info(f"Registered user {user.id}")
        return user

    def get_all_users(self) -> list[User]:
        """Return every user; an empty list is a valid answer."""
        with repository_call("find all users"):
            return list(self.user_repo.find_all())

    def get_user_by_id(self, user_id: UUID) -> User:
        """Return the user with ``user_id`` or raise ``UserNotFoundError``."""
        return self._require_user(user_id)

    def update_user(self, user_id: UUID, replacement: User) -> None:
        """Replace a user's data.

        ``id`` and ``created_at`` are kept from the stored record and
        ``updated_at`` is refreshed; everything else comes from
        ``replacement``.

        Raises:
            InvalidEmailError: If the email syntax is invalid.
            UserNotFoundError: If ``user_id`` does not exist.
            EmailAlreadyExistsError: If another user holds the email.
            RepositoryError: If storage fails.

        """
        validate_email(replacement.email)
        existing = self._require_user(user_id)
        self._ensure_email_available(replacement.email, exclude_id=user_id)

        updated = replacement.model_copy(
            update={
                "id": existing.id,
                "created_at": existing.created_at,
                "updated_at": next_timestamp(existing.updated_at),
            }
        )

        with repository_call("update user"):
            self.user_repo.update(user_id, updated)

        logger.info(f"Updated user {user_id}")

    def update_user_fields(
        self, user_id: UUID, fields: Mapping[str, Any] | UserUpdate
    ) -> User:
        """Apply a partial update and return the resulting record.

        The whole payload is rejected before any read or write if it names a
        key outside ``username``/``email``, is empty, or carries a value that
        is not a non-empty string.

        Raises:
            InvalidUpdateFieldError: If the payload is not acceptable.
            InvalidEmailError: If a new email has invalid syntax.
            UserNotFoundError: If ``user_id`` does not exist.
            EmailAlreadyExistsError: If another user holds the new email.
            RepositoryError: If storage fails.

        """
        changes = self._coerce_update(fields).to_fields()
        if "email" in changes:
            validate_email(changes["email"])

        existing = self._require_user(user_id)
        if "email" in changes:
            self._ensure_email_available(changes["email"], exclude_id=user_id)

        changes["updated_at"] = next_timestamp(existing.updated_at)

        with repository_call("update user fields"):
            user = self.user_repo.update_fields(user_id, changes)

        logger.info(f"Updated fields {sorted(changes)} of user {user_id}")
        return user

    def delete_user(self, user_id: UUID) -> None:
        """Delete a user and the tasks it owns.

        Deleting an unknown user is an error, not a no-op.

        Raises:
            UserNotFoundError: If ``user_id`` does not exist.
            RepositoryError: If storage fails.

        """
        self._require_user(user_id)

        with repository_call("delete user"):
            self.user_repo.delete(user_id)

        logger.info(f"Deleted user {user_id}")

    def _require_user(self, user_id: UUID) -> User:
        with repository_call("find user by id"):
            user = self.user_repo.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def _ensure_email_available(self, email: str, exclude_id: UUID | None = None):
        if is_email_in_use(self.user_repo, email, exclude_id=exclude_id):
            logger.warning(f"Rejected email already in use: {email}")
            raise EmailAlreadyExistsError(email)

    @staticmethod
    def _coerce_update(fields: Mapping[str, Any] | UserUpdate) -> UserUpdate:
        """Turn a transport payload into a reviewed ``UserUpdate``."""
        if isinstance(fields, UserUpdate):
            return fields

        unknown = sorted(set(fields) - USER_MUTABLE_FIELDS)
        if unknown:
            logger.warning(f"Rejected update with unknown fields: {unknown}")
            raise InvalidUpdateFieldError(
                f"invalid update fields: {', '.join(unknown)}", unknown
            )

        try:
            return UserUpdate.model_validate(dict(fields))
        except ValidationError as e:
            bad = sorted({str(err["loc"][0]) for err in e.errors() if err["loc"]})
            raise InvalidUpdateFieldError(
                f"invalid update payload: {e.errors()[0]['msg']}", bad
            ) from e
