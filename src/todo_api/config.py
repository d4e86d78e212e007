import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv


# Existing process variables win over .env entries.
load_dotenv(override=False)


def _required_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise RuntimeError(
            f"Missing required environment variable '{name}'. "
            "Set it in the process environment or the local .env file."
        )
    return value


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name) or default
    return [item.strip() for item in raw.split(",") if item.strip()]


@dataclass
class Settings:
    """Runtime configuration shared by the identity and task services."""

    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = ""
    db_name: str = "todoapp"
    database_url: Optional[str] = None
    db_pool_min: int = 1
    db_pool_max: int = 10

    host: str = "0.0.0.0"
    port: int = 5000
    # Declared for clients that send it; nothing checks it yet.
    api_key: str = ""

    admin_username: str = "admin"
    admin_password: Optional[str] = None
    jwt_secret: Optional[str] = None
    jwt_algorithm: str = "HS256"
    jwt_expires_minutes: int = 1440
    tasks_require_auth: bool = False

    cors_allow_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"

    @property
    def dsn(self) -> str:
        """
        Build the libpq DSN.

        DATABASE_URL wins when set; otherwise it is assembled from the DB_* parts.
        """
        if self.database_url:
            return self.database_url
        auth = self.db_user
        if self.db_password:
            auth = f"{auth}:{self.db_password}"
        return f"postgresql://{auth}@{self.db_host}:{self.db_port}/{self.db_name}"

    def admin_secret(self) -> str:
        # Required for security; do not default.
        if not self.admin_password:
            return _required_env("ADMIN_PASSWORD")
        return self.admin_password

    def signing_secret(self) -> str:
        # Required for security; do not default.
        if not self.jwt_secret:
            return _required_env("JWT_SECRET")
        return self.jwt_secret


# PUBLIC_INTERFACE
def load_settings() -> Settings:
    """Read Settings from the environment."""
    return Settings(
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", ""),
        db_name=os.getenv("DB_NAME", "todoapp"),
        database_url=os.getenv("DATABASE_URL") or None,
        db_pool_min=int(os.getenv("DB_POOL_MIN", "1")),
        db_pool_max=int(os.getenv("DB_POOL_MAX", "10")),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "5000")),
        api_key=os.getenv("API_KEY", ""),
        admin_username=os.getenv("ADMIN_USERNAME", "admin"),
        admin_password=os.getenv("ADMIN_PASSWORD") or None,
        jwt_secret=os.getenv("JWT_SECRET") or None,
        jwt_algorithm=os.getenv("JWT_ALGORITHM", "HS256"),
        jwt_expires_minutes=int(os.getenv("JWT_EXPIRES_MINUTES", "1440")),
        tasks_require_auth=_env_bool("TASKS_REQUIRE_AUTH"),
        cors_allow_origins=_env_list("CORS_ALLOW_ORIGINS", "*"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


# PUBLIC_INTERFACE
def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
