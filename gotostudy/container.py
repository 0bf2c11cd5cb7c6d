"""Application container: wires repositories into services.

Transports ask a container factory for an ``AppContainer`` per unit of work
(an HTTP request or a CLI command) and use only its services.
"""

from collections.abc import Callable, Generator
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass

from sqlalchemy.engine import Engine
from sqlmodel import Session

from .database import get_session_context
from .repositories import (
    InMemoryStore,
    InMemoryTaskRepository,
    InMemoryUserRepository,
    SqlTaskRepository,
    SqlUserRepository,
)
from .services import TaskService, UserService


@dataclass
class AppContainer:
    """Services for one unit of work."""

    user_service: UserService
    task_service: TaskService
    session: Session | None = None

    @classmethod
    def from_session(cls, session: Session) -> "AppContainer":
        """Build services over SQL repositories sharing ``session``."""
        user_repo = SqlUserRepository(session)
        task_repo = SqlTaskRepository(session)
        return cls(
            user_service=UserService(user_repo),
            task_service=TaskService(task_repo, user_repo),
            session=session,
        )

    @classmethod
    def in_memory(cls, store: InMemoryStore | None = None) -> "AppContainer":
        """Build services over in-memory repositories sharing one store."""
        store = store if store is not None else InMemoryStore()
        user_repo = InMemoryUserRepository(store)
        task_repo = InMemoryTaskRepository(store)
        return cls(
            user_service=UserService(user_repo),
            task_service=TaskService(task_repo, user_repo),
        )


ContainerFactory = Callable[[], AbstractContextManager[AppContainer]]


@contextmanager
def sql_container(engine: Engine | None = None) -> Generator[AppContainer, None, None]:
    """Yield a container bound to a fresh database session."""
    with get_session_context(engine) as session:
        yield AppContainer.from_session(session)


def memory_container_factory(store: InMemoryStore | None = None) -> ContainerFactory:
    """Return a factory whose containers all share one in-memory store."""
    store = store if store is not None else InMemoryStore()

    @contextmanager
    def factory() -> Generator[AppContainer, None, None]:
        yield AppContainer.in_memory(store)

    return factory


__all__ = [
    "AppContainer",
    "ContainerFactory",
    "memory_container_factory",
    "sql_container",
]
