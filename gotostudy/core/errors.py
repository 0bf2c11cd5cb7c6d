"""Domain error taxonomy for the user and task services.

Every failure the service layer reports is a ``GoToStudyError`` subclass
carrying a stable ``code`` for caller branching and the HTTP status the
transport layer answers with. Callers should branch on the class (or the
code), never on the message text.
"""

import logging
from collections.abc import Generator
from contextlib import contextmanager
from enum import StrEnum


logger = logging.getLogger(__name__)


class ErrorCode(StrEnum):
    """Stable error codes exposed to transports."""

    USER_NOT_FOUND = "USER_NOT_FOUND"
    TASK_NOT_FOUND = "TASK_NOT_FOUND"
    EMAIL_ALREADY_EXISTS = "EMAIL_ALREADY_EXISTS"
    INVALID_EMAIL = "INVALID_EMAIL"
    INVALID_TASK_ID = "INVALID_TASK_ID"
    INVALID_UPDATE_FIELD = "INVALID_UPDATE_FIELD"
    INVALID_INPUT = "INVALID_INPUT"
    NO_TASKS_FOUND = "NO_TASKS_FOUND"
    REPOSITORY_FAILURE = "REPOSITORY_FAILURE"


class GoToStudyError(Exception):
    """Base exception for all domain failures."""

    code: ErrorCode = ErrorCode.INVALID_INPUT
    http_status: int = 400

    def __init__(self, message: str):
        """Initialize with a human readable message."""
        self.message = message
        super().__init__(message)

    def to_response(self) -> dict:
        """Convert to the REST error envelope."""
        return {"error": {"code": self.code.value, "message": self.message}}


class NotFoundError(GoToStudyError):
    """A referenced user or task does not exist."""

    http_status = 404


class UserNotFoundError(NotFoundError):
    """Raised when no user matches the given identifier."""

    code = ErrorCode.USER_NOT_FOUND

    def __init__(self, user_id):
        self.user_id = user_id
        super().__init__(f"user not found: {user_id}")


class TaskNotFoundError(NotFoundError):
    """Raised when no task matches the given identifier for a user."""

    code = ErrorCode.TASK_NOT_FOUND

    def __init__(self, task_id):
        self.task_id = task_id
        super().__init__(f"task not found: {task_id}")


class AlreadyExistsError(GoToStudyError):
    """A uniqueness rule would be violated."""

    http_status = 409


class EmailAlreadyExistsError(AlreadyExistsError):
    """Raised when another user already holds the email address."""

    code = ErrorCode.EMAIL_ALREADY_EXISTS

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"email already exists: {email}")


class InvalidInputError(GoToStudyError):
    """Input rejected before reaching storage."""

    code = ErrorCode.INVALID_INPUT
    http_status = 400


class InvalidEmailError(InvalidInputError):
    """Raised when an email address does not match the accepted syntax."""

    code = ErrorCode.INVALID_EMAIL

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"invalid email format: {email!r}")


class InvalidTaskIDError(InvalidInputError):
    """Raised when a task identifier is the nil UUID."""

    code = ErrorCode.INVALID_TASK_ID

    def __init__(self, task_id=None):
        self.task_id = task_id
        super().__init__("invalid task ID")


class InvalidUpdateFieldError(InvalidInputError):
    """Raised when a partial update payload cannot be applied."""

    code = ErrorCode.INVALID_UPDATE_FIELD

    def __init__(self, message: str, fields: list[str] | None = None):
        self.fields = fields or []
        super().__init__(message)


class NoTasksFoundError(GoToStudyError):
    """The user exists but owns no tasks.

    Deliberately not a ``NotFoundError``: a missing owner and an owner with
    nothing to list are different answers.
    """

    code = ErrorCode.NO_TASKS_FOUND
    http_status = 404

    def __init__(self, user_id):
        self.user_id = user_id
        super().__init__(f"no tasks found for user {user_id}")


class RepositoryError(GoToStudyError):
    """The storage adapter failed for reasons opaque to the service."""

    code = ErrorCode.REPOSITORY_FAILURE
    http_status = 500

    def __init__(self, operation: str, cause: Exception | None = None):
        self.operation = operation
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"repository failure during {operation}{detail}")


@contextmanager
def repository_call(operation: str) -> Generator[None, None, None]:
    """Wrap a storage call so adapter failures surface as ``RepositoryError``.

    Domain errors raised by an adapter (for instance a unique constraint
    translated to ``EmailAlreadyExistsError``) pass through unchanged.

    Usage:
        with repository_call("save user"):
            repository.save(user)

    """
    try:
        yield
    except GoToStudyError:
        raise
    except Exception as e:
        logger.error(f"Repository failure during {operation}: {e}")
        raise RepositoryError(operation, e) from e


__all__ = [
    "AlreadyExistsError",
    "EmailAlreadyExistsError",
    "ErrorCode",
    "GoToStudyError",
    "InvalidEmailError",
    "InvalidInputError",
    "InvalidTaskIDError",
    "InvalidUpdateFieldError",
    "NoTasksFoundError",
    "NotFoundError",
    "RepositoryError",
    "TaskNotFoundError",
    "UserNotFoundError",
    "repository_call",
]
