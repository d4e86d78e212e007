import hmac
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from src.todo_api.config import Settings
from src.todo_api.errors import AuthenticationError

BCRYPT_ROUNDS = 10

_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=BCRYPT_ROUNDS)
_bearer = HTTPBearer(auto_error=False)


# PUBLIC_INTERFACE
def hash_password(password: str) -> str:
    """Hash a plaintext password."""
    return _pwd_context.hash(password)


# PUBLIC_INTERFACE
def verify_password(password: str, password_hash: str) -> bool:
    """Verify a plaintext password against a stored hash."""
    try:
        return _pwd_context.verify(password, password_hash)
    except ValueError:
        # Stored value is not a recognizable hash.
        return False


# PUBLIC_INTERFACE
def check_admin_credentials(settings: Settings, username: Optional[str], password: Optional[str]) -> bool:
    """Exact match of the supplied pair against the configured admin pair."""
    if not username or not password:
        return False
    user_ok = hmac.compare_digest(username.encode(), settings.admin_username.encode())
    password_ok = hmac.compare_digest(password.encode(), settings.admin_secret().encode())
    return user_ok and password_ok


def _create_access_token(settings: Settings, payload: Dict[str, Any], expires_delta: timedelta) -> str:
    to_encode = payload.copy()
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.signing_secret(), algorithm=settings.jwt_algorithm)


# PUBLIC_INTERFACE
def create_admin_access_token(settings: Settings, username: str) -> str:
    """Create a JWT for the admin user, valid for JWT_EXPIRES_MINUTES (one day by default)."""
    return _create_access_token(
        settings,
        {"sub": username},
        expires_delta=timedelta(minutes=settings.jwt_expires_minutes),
    )


# PUBLIC_INTERFACE
def decode_access_token(settings: Settings, token: str) -> Dict[str, Any]:
    """Decode and verify a token; raises AuthenticationError when invalid or expired."""
    try:
        payload = jwt.decode(token, settings.signing_secret(), algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise AuthenticationError("Invalid token")
    if not payload.get("sub"):
        raise AuthenticationError("Invalid token payload")
    return payload


# PUBLIC_INTERFACE
def require_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> Optional[Dict[str, Any]]:
    """
    Dependency guarding the task routes.

    Returns the token payload, or None when TASKS_REQUIRE_AUTH is off.
    """
    settings: Settings = request.app.state.settings
    if not settings.tasks_require_auth:
        return None
    if credentials is None:
        raise AuthenticationError("Not authenticated")
    return decode_access_token(settings, credentials.credentials)
