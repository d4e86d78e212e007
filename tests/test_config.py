# tests/test_config.py

from src.todo_api.config import Settings, load_settings


def test_defaults(monkeypatch):
    for name in ("DB_HOST", "DB_PORT", "DB_USER", "DB_PASSWORD", "DB_NAME", "DATABASE_URL", "PORT",
                 "TASKS_REQUIRE_AUTH", "CORS_ALLOW_ORIGINS", "JWT_EXPIRES_MINUTES"):
        monkeypatch.delenv(name, raising=False)
    settings = load_settings()
    assert settings.port == 5000
    assert settings.db_port == 5432
    assert settings.jwt_expires_minutes == 1440
    assert settings.tasks_require_auth is False
    assert settings.cors_allow_origins == ["*"]
    assert settings.dsn == "postgresql://postgres@localhost:5432/todoapp"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("DB_HOST", "db.internal")
    monkeypatch.setenv("DB_USER", "todo")
    monkeypatch.setenv("DB_PASSWORD", "pw")
    monkeypatch.setenv("DB_NAME", "tasks")
    monkeypatch.setenv("DB_PORT", "6543")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("TASKS_REQUIRE_AUTH", "yes")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://a.test, http://b.test")
    settings = load_settings()
    assert settings.port == 8080
    assert settings.tasks_require_auth is True
    assert settings.cors_allow_origins == ["http://a.test", "http://b.test"]
    assert settings.dsn == "postgresql://todo:pw@db.internal:6543/tasks"


def test_database_url_wins():
    settings = Settings(database_url="postgresql://u:p@h/d", db_host="ignored")
    assert settings.dsn == "postgresql://u:p@h/d"


def test_admin_password_not_defaulted(monkeypatch):
    monkeypatch.delenv("ADMIN_PASSWORD", raising=False)
    assert load_settings().admin_password is None
