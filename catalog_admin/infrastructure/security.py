"""Password hashing and access tokens."""

from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt

from catalog_admin.domain.exceptions import AuthenticationError


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed stored hash
        return False


def create_access_token(
    subject: str,
    secret: str,
    algorithm: str = "HS256",
    expires_minutes: int = 60 * 24,
) -> str:
    """Sign an access token for an admin.

    Args:
        subject: Admin ID stored in the ``sub`` claim.
        secret: Signing secret.
        algorithm: JWT algorithm.
        expires_minutes: Token lifetime.

    Returns:
        Encoded JWT.
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": subject,
        "iat": now,
        "exp": now + timedelta(minutes=expires_minutes),
        "type": "access",
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_access_token(token: str, secret: str, algorithm: str = "HS256") -> dict[str, Any]:
    """Verify and decode an access token.

    Raises:
        AuthenticationError: If the token is invalid, expired or not an access token.
    """
    try:
        payload = jwt.decode(token, secret, algorithms=[algorithm])
    except jwt.ExpiredSignatureError as e:
        raise AuthenticationError("Token expired") from e
    except jwt.InvalidTokenError as e:
        raise AuthenticationError("Invalid token") from e

    if payload.get("type") != "access":
        raise AuthenticationError("Invalid access token")
    return payload
