"""Service layer for user and task business rules.

This is the only place invariants are enforced; transports call into it and
it calls out through the repository ports.
"""

from .task_service import NIL_UUID, TaskService
from .user_service import UserService

__all__ = ["NIL_UUID", "TaskService", "UserService"]
