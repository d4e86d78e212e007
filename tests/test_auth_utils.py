# tests/test_auth_utils.py

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from src.todo_api.auth_utils import (
    check_admin_credentials,
    create_admin_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from src.todo_api.config import Settings
from src.todo_api.errors import AuthenticationError


def test_hash_is_salted_and_verifiable():
    first = hash_password("hunter2")
    second = hash_password("hunter2")
    assert first != second
    assert "$10$" in first
    assert verify_password("hunter2", first)
    assert not verify_password("hunter3", first)


def test_verify_against_garbage_hash_is_false():
    assert verify_password("pw", "not-a-hash") is False


def test_admin_credentials_exact_match(settings):
    assert check_admin_credentials(settings, "admin", "s3cret")
    assert not check_admin_credentials(settings, "Admin", "s3cret")
    assert not check_admin_credentials(settings, "admin", "s3cret ")
    assert not check_admin_credentials(settings, None, None)


def test_token_carries_subject_and_one_day_expiry(settings):
    token = create_admin_access_token(settings, "admin")
    payload = decode_access_token(settings, token)
    assert payload["sub"] == "admin"
    expires = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
    remaining = expires - datetime.now(timezone.utc)
    assert timedelta(hours=23) < remaining <= timedelta(days=1)


def test_token_signed_with_other_secret_is_rejected(settings):
    other = Settings(jwt_secret="a-completely-different-secret")
    token = create_admin_access_token(other, "admin")
    with pytest.raises(AuthenticationError):
        decode_access_token(settings, token)


def test_expired_token_is_rejected(settings):
    token = jwt.encode(
        {"sub": "admin", "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
        settings.jwt_secret,
        algorithm="HS256",
    )
    with pytest.raises(AuthenticationError):
        decode_access_token(settings, token)


def test_missing_secret_is_a_configuration_error(monkeypatch):
    monkeypatch.delenv("JWT_SECRET", raising=False)
    with pytest.raises(RuntimeError, match="JWT_SECRET"):
        create_admin_access_token(Settings(jwt_secret=None), "admin")


def test_admin_password_has_no_default(monkeypatch):
    monkeypatch.delenv("ADMIN_PASSWORD", raising=False)
    settings = Settings(jwt_secret="x" * 32)
    assert settings.admin_password is None
    with pytest.raises(RuntimeError, match="ADMIN_PASSWORD"):
        check_admin_credentials(settings, "admin", "admin")


def test_admin_password_falls_back_to_environment(monkeypatch):
    monkeypatch.setenv("ADMIN_PASSWORD", "from-env")
    settings = Settings(admin_password=None)
    assert check_admin_credentials(settings, "admin", "from-env")
    assert not check_admin_credentials(settings, "admin", "admin")
