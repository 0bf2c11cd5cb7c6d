"""Core domain primitives shared by services, adapters and transports."""

from .errors import (
    AlreadyExistsError,
    EmailAlreadyExistsError,
    ErrorCode,
    GoToStudyError,
    InvalidEmailError,
    InvalidInputError,
    InvalidTaskIDError,
    InvalidUpdateFieldError,
    NoTasksFoundError,
    NotFoundError,
    RepositoryError,
    TaskNotFoundError,
    UserNotFoundError,
    repository_call,
)


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
