"""Schema package: domain records and their storage tables.

Quick usage:
    from gotostudy.schemas import User, Task, UserUpdate
    from gotostudy.schemas import UserTable, TaskTable
"""

from .database import TaskTable, TimestampedTable, UserTable
from .models import (
    TASK_MUTABLE_FIELDS,
    USER_MUTABLE_FIELDS,
    BaseBusinessModel,
    Task,
    UnifiedConfig,
    User,
    UserUpdate,
)


__all__ = [
    "TASK_MUTABLE_FIELDS",
    "USER_MUTABLE_FIELDS",
    "BaseBusinessModel",
    "Task",
    "TaskTable",
    "TimestampedTable",
    "UnifiedConfig",
    "User",
    "UserTable",
    "UserUpdate",
]
