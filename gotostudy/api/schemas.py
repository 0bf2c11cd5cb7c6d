"""Request bodies accepted by the HTTP API.

Responses are the domain records themselves. Partial user updates are taken
as raw JSON objects so the service allow-list decides what is acceptable.
"""

from pydantic import BaseModel, ConfigDict, Field


class RequestModel(BaseModel):
    """Base for request bodies; unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid")


class UserCreateRequest(RequestModel):
    """Body of ``POST /users``."""

    username: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=1, max_length=254)


class UserReplaceRequest(UserCreateRequest):
    """Body of ``PUT /users/{user_id}``."""


class TaskCreateRequest(RequestModel):
    """Body of ``POST /users/{user_id}/tasks``."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=2000)
    completed: bool = False


class TaskReplaceRequest(TaskCreateRequest):
    """Body of ``PUT /users/{user_id}/tasks/{task_id}``."""


__all__ = [
    "TaskCreateRequest",
    "TaskReplaceRequest",
    "UserCreateRequest",
    "UserReplaceRequest",
]
