"""Password hashing and access token handling.

Passwords are hashed with bcrypt; access tokens are HS256 JWTs carrying the
user id in `sub`.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
from jose import JWTError, jwt

from survey_service.config import get_settings
from survey_service.errors import AuthError

# bcrypt only looks at the first 72 bytes
_BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    """Hash a password with the configured bcrypt cost."""
    settings = get_settings()
    password_bytes = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=settings.bcrypt_rounds))
    return hashed.decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against a stored bcrypt hash."""
    password_bytes = plain_password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def create_access_token(user_id: int, expires_delta: Optional[timedelta] = None) -> str:
    """Issue a signed access token for a user.

    Args:
        user_id: Id placed in the `sub` claim
        expires_delta: Lifetime override (defaults to settings)

    Returns:
        Encoded JWT
    """
    settings = get_settings()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    now = datetime.now(timezone.utc)
    claims: Dict[str, Any] = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + expires_delta,
        "type": "access",
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> int:
    """Verify a token and return the user id it was issued for.

    Raises:
        AuthError: If the token is expired, malformed, badly signed, or not
            an access token
    """
    settings = get_settings()
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        # Includes expired tokens
        raise AuthError("Invalid token")

    if payload.get("type") != "access":
        raise AuthError("Invalid token")

    try:
        return int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise AuthError("Invalid token")
