"""Domain entities and update intents for users and tasks.

These are plain pydantic records: identity, data and timestamps, no
behavior. Identifiers and timestamps are left unset on candidates and
assigned by the services on creation.
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# Keys a partial user update may carry.
USER_MUTABLE_FIELDS = frozenset({"username", "email"})

# Keys a full task update overwrites; everything else is preserved.
TASK_MUTABLE_FIELDS = frozenset({"title", "description", "completed"})


class UnifiedConfig:
    """Shared model configuration for every domain record."""

    PYDANTIC_CONFIG = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        use_enum_values=False,
        frozen=False,
        from_attributes=True,
    )


class BaseBusinessModel(BaseModel):
    """Base for pure business records."""

    model_config = UnifiedConfig.PYDANTIC_CONFIG


def _not_blank(value: str | None) -> str | None:
    if value is not None and not value.strip():
        raise ValueError("must not be blank")
    return value


class Task(BaseBusinessModel):
    """A to-do item owned by exactly one user."""

    id: UUID | None = None
    user_id: UUID | None = None
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=2000)
    completed: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("title", "description")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject whitespace-only text."""
        return _not_blank(v)


class User(BaseBusinessModel):
    """A registered user and, when loaded, the tasks it owns."""

    id: UUID | None = None
    username: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., min_length=1, max_length=254)
    created_at: datetime | None = None
    updated_at: datetime | None = None
    tasks: list[Task] = Field(default_factory=list)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str | None) -> str | None:
        """Reject whitespace-only usernames."""
        return _not_blank(v)


class UserUpdate(BaseBusinessModel):
    """Reviewed intent for a partial user update.

    Only fields the caller explicitly set are applied; presence is tracked by
    ``model_fields_set``. Unknown keys are rejected by ``extra="forbid"``.
    """

    username: str | None = Field(default=None, min_length=1, max_length=100)
    email: str | None = Field(default=None, min_length=1, max_length=254)

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str | None) -> str | None:
        """Reject whitespace-only usernames."""
        return _not_blank(v)

    @model_validator(mode="after")
    def validate_presence(self) -> "UserUpdate":
        """Require at least one field and forbid explicit nulls."""
        if not self.model_fields_set:
            raise ValueError("no fields to update")
        for name in self.model_fields_set:
            if getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def to_fields(self) -> dict[str, Any]:
        """Return only the fields the caller set."""
        return self.model_dump(include=set(self.model_fields_set))


__all__ = [
    "TASK_MUTABLE_FIELDS",
    "USER_MUTABLE_FIELDS",
    "BaseBusinessModel",
    "Task",
    "UnifiedConfig",
    "User",
    "UserUpdate",
]
