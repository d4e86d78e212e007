# tests/test_users.py

import pytest

from src.todo_api.errors import AuthenticationError, ConflictError, InternalError, ValidationError
from src.todo_api.users import UserRepository

from .fakes import BrokenDatabase, FakeDatabase


@pytest.fixture()
def users():
    return UserRepository(FakeDatabase())


def test_register_returns_id_and_email_only(users):
    user = users.register("bob@example.com", "pw")
    assert user == {"id": 1, "email": "bob@example.com"}


def test_register_duplicate_is_conflict(users):
    users.register("bob@example.com", "pw")
    with pytest.raises(ConflictError):
        users.register("bob@example.com", "other")


@pytest.mark.parametrize("email,password", [(None, "pw"), ("bob@example.com", None), ("", ""), ("a@b.c", "")])
def test_register_requires_both_fields(users, email, password):
    with pytest.raises(ValidationError):
        users.register(email, password)


def test_authenticate_round_trip(users):
    created = users.register("bob@example.com", "pw")
    assert users.authenticate("bob@example.com", "pw") == created


def test_authenticate_failures_share_message(users):
    users.register("bob@example.com", "pw")
    with pytest.raises(AuthenticationError) as unknown:
        users.authenticate("nobody@example.com", "pw")
    with pytest.raises(AuthenticationError) as wrong:
        users.authenticate("bob@example.com", "nope")
    assert unknown.value.message == wrong.value.message == "Invalid credentials"


def test_storage_failure_is_internal():
    users = UserRepository(BrokenDatabase())
    with pytest.raises(InternalError):
        users.register("bob@example.com", "pw")
    with pytest.raises(InternalError):
        users.authenticate("bob@example.com", "pw")
