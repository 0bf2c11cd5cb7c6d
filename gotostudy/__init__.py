"""GoToStudy: a user and task record-management backend.

The service layer (``gotostudy.services``) enforces the business rules and
talks to storage only through the ports in ``gotostudy.repositories``.
Transports live in ``gotostudy.api`` (HTTP) and ``gotostudy.cli``.
"""

from .container import AppContainer
from .core.errors import GoToStudyError
from .schemas.models import Task, User, UserUpdate
from .services import TaskService, UserService


__version__ = "1.0.0"

__all__ = [
    "AppContainer",
    "GoToStudyError",
    "Task",
    "TaskService",
    "User",
    "UserService",
    "UserUpdate",
]
