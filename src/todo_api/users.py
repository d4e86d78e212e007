import logging
from typing import Any, Dict, Optional

import psycopg2
import psycopg2.errors

from src.todo_api.auth_utils import hash_password, verify_password
from src.todo_api.db import Database
from src.todo_api.errors import AuthenticationError, ConflictError, InternalError, ValidationError

logger = logging.getLogger(__name__)

# One message for unknown email and wrong password, so login does not reveal
# which accounts exist.
INVALID_CREDENTIALS = "Invalid credentials"


class UserRepository:
    """Signup and login against the `users` table."""

    def __init__(self, db: Database) -> None:
        self.db = db

    # PUBLIC_INTERFACE
    def register(self, email: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        """Create a user with a bcrypt-hashed password. Returns {id, email}."""
        if not email or not password:
            raise ValidationError("Email and password are required")

        hashed = hash_password(password)
        try:
            return self.db.execute_returning_one(
                "INSERT INTO users (email, password) VALUES (%s, %s) RETURNING id, email",
                [email, hashed],
            )
        except psycopg2.errors.UniqueViolation:
            raise ConflictError("Email already exists")
        except psycopg2.Error:
            logger.exception("Signup error")
            raise InternalError()

    # PUBLIC_INTERFACE
    def authenticate(self, username: Optional[str], password: Optional[str]) -> Dict[str, Any]:
        """Check an email/password pair. Returns {id, email} on success."""
        if not username or not password:
            raise ValidationError("Username and password required")

        try:
            user = self.db.fetch_one("SELECT id, email, password FROM users WHERE email=%s", [username])
        except psycopg2.Error:
            logger.exception("Login error")
            raise InternalError()

        if not user or not verify_password(password, user["password"]):
            raise AuthenticationError(INVALID_CREDENTIALS)
        return {"id": user["id"], "email": user["email"]}
