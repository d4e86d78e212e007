# tests/conftest.py

import os

# Set up the environment before src.todo_api.main builds its module-level apps.
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-signing-tokens")
os.environ.setdefault("ADMIN_USERNAME", "admin")
os.environ.setdefault("ADMIN_PASSWORD", "s3cret")

import pytest
from fastapi.testclient import TestClient

from src.todo_api.config import Settings
from src.todo_api.main import create_identity_app, create_tasks_app

from .fakes import BrokenDatabase, FakeDatabase


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        admin_username="admin",
        admin_password="s3cret",
        jwt_secret="test-secret-key-for-signing-tokens",
    )


@pytest.fixture()
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture()
def identity_client(settings: Settings, fake_db: FakeDatabase) -> TestClient:
    # Not used as a context manager: lifespan (pool ping/drain) is tested separately.
    return TestClient(create_identity_app(settings=settings, database=fake_db))


@pytest.fixture()
def tasks_client(settings: Settings, fake_db: FakeDatabase) -> TestClient:
    return TestClient(create_tasks_app(settings=settings, database=fake_db))


@pytest.fixture()
def broken_tasks_client(settings: Settings) -> TestClient:
    return TestClient(create_tasks_app(settings=settings, database=BrokenDatabase()))
