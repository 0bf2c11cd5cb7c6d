"""Pytest configuration and fixtures for gotostudy tests."""

import tempfile
from pathlib import Path

import pytest
from sqlmodel import Session, SQLModel, create_engine

from gotostudy.container import AppContainer
from gotostudy.repositories import (
    InMemoryStore,
    InMemoryTaskRepository,
    InMemoryUserRepository,
    SqlTaskRepository,
    SqlUserRepository,
)
from gotostudy.schemas.models import Task, User
from gotostudy.services import TaskService, UserService


@pytest.fixture
def sample_user_data():
    """Registration data for the user most tests revolve around."""
    return {"username": "alice", "email": "alice@example.com"}


@pytest.fixture
def sample_user(sample_user_data):
    """Candidate ``User`` as a transport would build it."""
    return User.model_validate(sample_user_data)


@pytest.fixture
def sample_task():
    """Candidate ``Task`` as a transport would build it."""
    return Task(title="Read chapter 3", description="Linear algebra, eigenvalues")


@pytest.fixture
def memory_store():
    """Fresh in-memory store."""
    return InMemoryStore()


@pytest.fixture
def memory_user_repo(memory_store):
    return InMemoryUserRepository(memory_store)


@pytest.fixture
def memory_task_repo(memory_store):
    return InMemoryTaskRepository(memory_store)


@pytest.fixture
def user_service(memory_user_repo):
    """UserService over in-memory storage."""
    return UserService(memory_user_repo)


@pytest.fixture
def task_service(memory_task_repo, memory_user_repo):
    """TaskService over in-memory storage sharing the user store."""
    return TaskService(memory_task_repo, memory_user_repo)


@pytest.fixture
def temp_db_path():
    """Create temporary database path."""
    temp_file = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
    temp_file.close()
    db_path = temp_file.name

    yield db_path

    # Cleanup
    Path(db_path).unlink(missing_ok=True)


@pytest.fixture
def temp_engine(temp_db_path):
    """Create temporary database engine with all tables."""
    engine = create_engine(
        f"sqlite:///{temp_db_path}",
        echo=False,
        connect_args={"check_same_thread": False},
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def sql_session(temp_engine):
    """Session on the temporary database."""
    with Session(temp_engine) as session:
        yield session


@pytest.fixture
def sql_user_repo(sql_session):
    return SqlUserRepository(sql_session)


@pytest.fixture
def sql_task_repo(sql_session):
    return SqlTaskRepository(sql_session)


@pytest.fixture(params=["memory", "sql"])
def container(request):
    """Services over each storage adapter in turn."""
    if request.param == "memory":
        return AppContainer.in_memory()
    session = request.getfixturevalue("sql_session")
    return AppContainer.from_session(session)
