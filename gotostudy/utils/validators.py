"""Email validation helpers shared by the user service.

Provides the syntax check and the read-then-compare uniqueness check. The
uniqueness check is not atomic with the write that follows it; the storage
unique constraint remains the source of truth.
"""

import re
from uuid import UUID

from ..core.errors import InvalidEmailError, repository_call
from ..repositories.ports import UserRepository


EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def is_email_valid(email: str) -> bool:
    """Check whether ``email`` matches the accepted address syntax."""
    return isinstance(email, str) and EMAIL_PATTERN.fullmatch(email) is not None


def validate_email(email: str) -> str:
    """Return ``email`` unchanged or raise ``InvalidEmailError``."""
    if not is_email_valid(email):
        raise InvalidEmailError(email)
    return email


def is_email_in_use(
    repository: UserRepository, email: str, exclude_id: UUID | None = None
) -> bool:
    """Check if another user already holds ``email``.

    Args:
        repository: User repository to query.
        email: Address to look up.
        exclude_id: User allowed to hold the address (the one being
            updated). ``None`` for registrations.

    Returns:
        True if a different user holds the address.

    """
    with repository_call("find user by email"):
        existing = repository.find_by_email(email)

    if existing is None:
        return False
    if exclude_id is not None and existing.id == exclude_id:
        return False
    return True
