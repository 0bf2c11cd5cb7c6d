"""Tests for the SQLModel repository adapters on a temporary SQLite file."""

from datetime import datetime, timedelta
from uuid import uuid4

import pytest
from sqlalchemy import DateTime

from gotostudy.core.errors import (
    EmailAlreadyExistsError,
    InvalidUpdateFieldError,
    TaskNotFoundError,
    UserNotFoundError,
)
from gotostudy.schemas.database import TaskTable, UserTable
from gotostudy.schemas.models import Task, User


def make_user(email="alice@example.com", username="alice", created=None) -> User:
    created = created or datetime.now()
    return User(
        id=uuid4(),
        username=username,
        email=email,
        created_at=created,
        updated_at=created,
    )


def make_task(user_id, title="Read", created=None) -> Task:
    created = created or datetime.now()
    return Task(
        id=uuid4(),
        user_id=user_id,
        title=title,
        description="Chapter 1",
        created_at=created,
        updated_at=created,
    )


class TestSqlUserRepository:
    """Test the SQL user adapter."""

    def test_save_and_find(self, sql_user_repo):
        user = make_user()
        sql_user_repo.save(user)

        found = sql_user_repo.find_by_id(user.id)

        assert found == user
        assert sql_user_repo.find_by_email(user.email).id == user.id
        assert sql_user_repo.find_by_id(uuid4()) is None
        assert sql_user_repo.count() == 1

    def test_find_all_oldest_first(self, sql_user_repo):
        base = datetime.now()
        late = make_user("late@example.com", "late", created=base)
        early = make_user("early@example.com", "early", created=base - timedelta(1))
        sql_user_repo.save(late)
        sql_user_repo.save(early)

        assert [u.username for u in sql_user_repo.find_all()] == ["early", "late"]

    def test_naive_timestamps_round_trip(self, sql_user_repo, sql_task_repo):
        created = datetime(2024, 5, 1, 9, 30, 15, 123456)
        user = make_user(created=created)
        sql_user_repo.save(user)
        task = make_task(user.id, created=created)
        sql_task_repo.save(user.id, task)

        found = sql_user_repo.find_by_id(user.id)

        assert found.created_at == created
        assert found.updated_at == created
        assert found.created_at.tzinfo is None
        assert found.tasks[0].created_at == created
        assert found.tasks[0].updated_at.tzinfo is None

    def test_timestamp_columns_store_no_zone(self):
        for table in (UserTable, TaskTable):
            for name in ("created_at", "updated_at"):
                column_type = table.__table__.c[name].type
                assert isinstance(column_type, DateTime)
                assert column_type.timezone is False

    def test_unique_constraint_translated(self, sql_user_repo):
        """Test the storage constraint surfaces as a domain error."""
        sql_user_repo.save(make_user())

        with pytest.raises(EmailAlreadyExistsError):
            sql_user_repo.save(make_user(username="twin"))

        # The session is usable again after the rollback.
        assert sql_user_repo.count() == 1

    def test_update(self, sql_user_repo):
        user = make_user()
        sql_user_repo.save(user)
        later = user.updated_at + timedelta(seconds=1)

        sql_user_repo.update(
            user.id,
            user.model_copy(
                update={"username": "al", "email": "al@example.com", "updated_at": later}
            ),
        )

        found = sql_user_repo.find_by_id(user.id)
        assert (found.username, found.email, found.updated_at) == (
            "al",
            "al@example.com",
            later,
        )
        assert found.created_at == user.created_at

    def test_update_missing(self, sql_user_repo):
        with pytest.raises(UserNotFoundError):
            sql_user_repo.update(uuid4(), make_user())

    def test_update_fields(self, sql_user_repo):
        user = make_user()
        sql_user_repo.save(user)

        result = sql_user_repo.update_fields(user.id, {"email": "new@example.com"})

        assert result.email == "new@example.com"
        assert result.username == "alice"

    def test_update_fields_unknown_column(self, sql_user_repo):
        user = make_user()
        sql_user_repo.save(user)

        with pytest.raises(InvalidUpdateFieldError):
            sql_user_repo.update_fields(user.id, {"created_at": datetime.now()})

    def test_update_fields_duplicate_email(self, sql_user_repo):
        alice = make_user()
        bob = make_user("bob@example.com", "bob")
        sql_user_repo.save(alice)
        sql_user_repo.save(bob)

        with pytest.raises(EmailAlreadyExistsError):
            sql_user_repo.update_fields(bob.id, {"email": alice.email})

        assert sql_user_repo.find_by_id(bob.id).email == "bob@example.com"

    def test_delete_cascades(self, sql_user_repo, sql_task_repo):
        user = make_user()
        sql_user_repo.save(user)
        sql_task_repo.save(user.id, make_task(user.id))

        sql_user_repo.delete(user.id)

        assert sql_user_repo.find_by_id(user.id) is None
        assert sql_task_repo.find_user_tasks(user.id) == []
        assert sql_task_repo.count() == 0

    def test_delete_missing(self, sql_user_repo):
        with pytest.raises(UserNotFoundError):
            sql_user_repo.delete(uuid4())


class TestSqlTaskRepository:
    """Test the SQL task adapter."""

    @pytest.fixture
    def owner(self, sql_user_repo):
        user = make_user()
        sql_user_repo.save(user)
        return user

    def test_save_and_find(self, sql_task_repo, owner):
        task = make_task(owner.id)

        sql_task_repo.save(owner.id, task)

        assert sql_task_repo.find_task_by_id(owner.id, task.id) == task
        assert sql_task_repo.find_task_by_id(uuid4(), task.id) is None

    def test_user_lookup_includes_tasks(self, sql_task_repo, sql_user_repo, owner):
        task = make_task(owner.id)
        sql_task_repo.save(owner.id, task)

        assert sql_user_repo.find_by_id(owner.id).tasks == [task]

    def test_find_user_tasks_ordered(self, sql_task_repo, owner):
        base = datetime.now()
        second = make_task(owner.id, "second", created=base)
        first = make_task(owner.id, "first", created=base - timedelta(minutes=1))
        sql_task_repo.save(owner.id, second)
        sql_task_repo.save(owner.id, first)

        titles = [t.title for t in sql_task_repo.find_user_tasks(owner.id)]

        assert titles == ["first", "second"]

    def test_update(self, sql_task_repo, owner):
        task = make_task(owner.id)
        sql_task_repo.save(owner.id, task)
        later = task.updated_at + timedelta(seconds=1)

        sql_task_repo.update(
            task.id,
            task.model_copy(
                update={"title": "Done", "completed": True, "updated_at": later}
            ),
        )

        found = sql_task_repo.find_task_by_id(owner.id, task.id)
        assert found.title == "Done"
        assert found.completed is True
        assert found.updated_at == later

    def test_update_and_delete_missing(self, sql_task_repo, owner):
        task = make_task(owner.id)

        with pytest.raises(TaskNotFoundError):
            sql_task_repo.update(task.id, task)
        with pytest.raises(TaskNotFoundError):
            sql_task_repo.delete(task.id)

    def test_delete(self, sql_task_repo, owner):
        task = make_task(owner.id)
        sql_task_repo.save(owner.id, task)

        sql_task_repo.delete(task.id)

        assert sql_task_repo.find_task_by_id(owner.id, task.id) is None
