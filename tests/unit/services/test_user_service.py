"""Tests for user service business rules.

Tests cover:
- Registration: email syntax, uniqueness, identity and timestamps
- Full and partial updates, including self-collision and allow-listing
- Deletion and lookups
- Repository failure propagation
"""

from datetime import datetime, timedelta
from unittest.mock import Mock
from uuid import uuid4

import pytest

from gotostudy.core.errors import (
    EmailAlreadyExistsError,
    InvalidEmailError,
    InvalidUpdateFieldError,
    RepositoryError,
    UserNotFoundError,
)
from gotostudy.repositories.ports import UserRepository
from gotostudy.schemas.models import User, UserUpdate
from gotostudy.services.user_service import UserService


def stored_user(**overrides) -> User:
    """Build a user as the repository would return it."""
    created = datetime.now() - timedelta(hours=1)
    data = {
        "id": uuid4(),
        "username": "alice",
        "email": "alice@example.com",
        "created_at": created,
        "updated_at": created,
    }
    data.update(overrides)
    return User(**data)


class TestUserServiceWithMocks:
    """Service behaviour observed at the repository port."""

    @pytest.fixture
    def repo(self):
        repo = Mock(spec=UserRepository)
        repo.find_by_email.return_value = None
        return repo

    @pytest.fixture
    def service(self, repo):
        return UserService(repo)

    def test_init_stores_repository(self, repo):
        """Test the service holds only the injected repository."""
        service = UserService(repo)

        assert service.user_repo is repo

    def test_register_assigns_identity_and_timestamps(self, service, repo, sample_user):
        """Test registration fills id, timestamps and saves once."""
        user = service.register_user(sample_user)

        assert user.id is not None
        assert user.created_at is not None
        assert user.updated_at == user.created_at
        assert user.username == "alice"
        repo.save.assert_called_once_with(user)

    def test_register_does_not_mutate_candidate(self, service, sample_user):
        service.register_user(sample_user)

        assert sample_user.id is None

    def test_register_invalid_email_writes_nothing(self, service, repo):
        """Test an invalid email is rejected before any storage access."""
        with pytest.raises(InvalidEmailError):
            service.register_user(User(username="alice", email="not-an-email"))

        repo.find_by_email.assert_not_called()
        repo.save.assert_not_called()

    def test_register_taken_email(self, service, repo, sample_user):
        """Test any holder of the email blocks registration."""
        repo.find_by_email.return_value = stored_user()

        with pytest.raises(EmailAlreadyExistsError):
            service.register_user(sample_user)

        repo.save.assert_not_called()

    def test_register_storage_failure(self, service, repo, sample_user):
        """Test save failures surface as RepositoryError naming the operation."""
        repo.save.side_effect = RuntimeError("connection reset")

        with pytest.raises(RepositoryError) as exc_info:
            service.register_user(sample_user)

        assert exc_info.value.operation == "save user"

    def test_register_storage_unique_violation(self, service, repo, sample_user):
        """Test a storage-level collision reaches the caller unchanged."""
        repo.save.side_effect = EmailAlreadyExistsError(sample_user.email)

        with pytest.raises(EmailAlreadyExistsError):
            service.register_user(sample_user)

    def test_get_all_users_empty(self, service, repo):
        """Test an empty collection is a valid answer."""
        repo.find_all.return_value = []

        assert service.get_all_users() == []

    def test_get_user_by_id_missing(self, service, repo):
        repo.find_by_id.return_value = None

        with pytest.raises(UserNotFoundError):
            service.get_user_by_id(uuid4())

    def test_update_user_preserves_identity(self, service, repo):
        """Test id and created_at come from storage, updated_at advances."""
        existing = stored_user()
        repo.find_by_id.return_value = existing
        replacement = User(id=uuid4(), username="alice2", email="alice2@example.com")

        service.update_user(existing.id, replacement)

        user_id, saved = repo.update.call_args.args
        assert user_id == existing.id
        assert saved.id == existing.id
        assert saved.created_at == existing.created_at
        assert saved.updated_at > existing.updated_at
        assert saved.username == "alice2"
        assert saved.email == "alice2@example.com"

    def test_update_user_checks_uniqueness_excluding_self(self, service, repo):
        """Test keeping one's own email is not a collision."""
        existing = stored_user()
        repo.find_by_id.return_value = existing
        repo.find_by_email.return_value = existing

        service.update_user(existing.id, User(username="al", email=existing.email))

        repo.update.assert_called_once()

    def test_update_user_email_held_by_other(self, service, repo):
        existing = stored_user()
        repo.find_by_id.return_value = existing
        repo.find_by_email.return_value = stored_user(email="bob@example.com")

        with pytest.raises(EmailAlreadyExistsError):
            service.update_user(
                existing.id, User(username="alice", email="bob@example.com")
            )

        repo.update.assert_not_called()

    def test_update_user_missing(self, service, repo):
        repo.find_by_id.return_value = None

        with pytest.raises(UserNotFoundError):
            service.update_user(uuid4(), User(username="x", email="x@example.com"))

        repo.update.assert_not_called()

    def test_update_user_invalid_email(self, service, repo):
        with pytest.raises(InvalidEmailError):
            service.update_user(uuid4(), User(username="x", email="bad"))

        repo.find_by_id.assert_not_called()

    def test_update_fields_unknown_key_rejected_wholesale(self, service, repo):
        """Test a payload naming any foreign key never reaches storage."""
        with pytest.raises(InvalidUpdateFieldError) as exc_info:
            service.update_user_fields(
                uuid4(), {"username": "ok", "role": "admin"}
            )

        assert exc_info.value.fields == ["role"]
        repo.find_by_id.assert_not_called()
        repo.update_fields.assert_not_called()

    @pytest.mark.parametrize(
        "payload", [{}, {"username": ""}, {"username": None}, {"email": 123}]
    )
    def test_update_fields_bad_payload(self, service, repo, payload):
        """Test empty, blank, null and non-string payloads are rejected."""
        with pytest.raises(InvalidUpdateFieldError):
            service.update_user_fields(uuid4(), payload)

        repo.update_fields.assert_not_called()

    def test_update_fields_stamps_updated_at(self, service, repo):
        """Test only the given fields plus updated_at are delegated."""
        existing = stored_user()
        repo.find_by_id.return_value = existing
        repo.update_fields.return_value = existing

        result = service.update_user_fields(existing.id, {"username": "al"})

        user_id, fields = repo.update_fields.call_args.args
        assert user_id == existing.id
        assert set(fields) == {"username", "updated_at"}
        assert fields["username"] == "al"
        assert fields["updated_at"] > existing.updated_at
        assert result is existing
        repo.find_by_email.assert_not_called()

    def test_update_fields_accepts_update_intent(self, service, repo):
        existing = stored_user()
        repo.find_by_id.return_value = existing
        repo.update_fields.return_value = existing

        service.update_user_fields(existing.id, UserUpdate(email="new@example.com"))

        fields = repo.update_fields.call_args.args[1]
        assert fields["email"] == "new@example.com"
        repo.find_by_email.assert_called_once_with("new@example.com")

    def test_update_fields_invalid_email(self, service, repo):
        with pytest.raises(InvalidEmailError):
            service.update_user_fields(uuid4(), {"email": "nope"})

        repo.update_fields.assert_not_called()

    def test_delete_user(self, service, repo):
        existing = stored_user()
        repo.find_by_id.return_value = existing

        service.delete_user(existing.id)

        repo.delete.assert_called_once_with(existing.id)

    def test_delete_missing_user_is_an_error(self, service, repo):
        """Test deleting an unknown user raises instead of passing silently."""
        repo.find_by_id.return_value = None

        with pytest.raises(UserNotFoundError):
            service.delete_user(uuid4())

        repo.delete.assert_not_called()


class TestUserServiceInMemory:
    """Service behaviour against the in-memory adapter."""

    def test_register_once_per_email(self, user_service, sample_user):
        """Test a unique email registers exactly once."""
        user_service.register_user(sample_user)

        with pytest.raises(EmailAlreadyExistsError):
            user_service.register_user(User(username="other", email=sample_user.email))

        assert len(user_service.get_all_users()) == 1

    def test_invalid_email_persists_nothing(self, user_service):
        with pytest.raises(InvalidEmailError):
            user_service.register_user(User(username="x", email="not-an-email"))

        assert user_service.get_all_users() == []

    def test_update_fields_own_email(self, user_service, sample_user):
        """Test re-submitting one's own email succeeds."""
        user = user_service.register_user(sample_user)

        updated = user_service.update_user_fields(user.id, {"email": user.email})

        assert updated.email == user.email
        assert updated.updated_at > user.updated_at

    def test_update_fields_foreign_key_leaves_record(self, user_service, sample_user):
        """Test a rejected payload leaves the stored record unchanged."""
        user = user_service.register_user(sample_user)

        with pytest.raises(InvalidUpdateFieldError):
            user_service.update_user_fields(user.id, {"role": "admin"})

        assert user_service.get_user_by_id(user.id) == user

    def test_update_fields_returns_full_record(self, user_service, sample_user):
        user = user_service.register_user(sample_user)

        updated = user_service.update_user_fields(user.id, {"username": "alicia"})

        assert updated.id == user.id
        assert updated.username == "alicia"
        assert updated.email == user.email
        assert updated.created_at == user.created_at

    def test_update_fields_email_taken(self, user_service, sample_user):
        user = user_service.register_user(sample_user)
        user_service.register_user(User(username="bob", email="bob@example.com"))

        with pytest.raises(EmailAlreadyExistsError):
            user_service.update_user_fields(user.id, {"email": "bob@example.com"})

    def test_updated_at_strictly_increases(self, user_service, sample_user):
        """Test consecutive mutations always advance updated_at."""
        user = user_service.register_user(sample_user)
        stamps = [user.updated_at]

        for name in ("a", "b", "c"):
            stamps.append(
                user_service.update_user_fields(user.id, {"username": name}).updated_at
            )

        assert stamps == sorted(stamps)
        assert len(set(stamps)) == len(stamps)
        assert stamps[0] >= user.created_at

    def test_delete_then_lookup(self, user_service, sample_user):
        user = user_service.register_user(sample_user)

        user_service.delete_user(user.id)

        with pytest.raises(UserNotFoundError):
            user_service.get_user_by_id(user.id)
        with pytest.raises(UserNotFoundError):
            user_service.delete_user(user.id)
