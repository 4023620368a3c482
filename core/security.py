"""
Password hashing and signed access tokens.

bcrypt for password hashes, PyJWT (HS256 by default) for tokens. Token
decoding translates the library's exceptions into UnauthorizedError so
callers only deal with the portal's error taxonomy.
"""

from datetime import timedelta
from typing import Any, Optional

import bcrypt
import jwt

from core.config import Settings, settings as default_settings
from core.exceptions import UnauthorizedError
from core.identifiers import utcnow


# bcrypt ignores everything past 72 bytes
_BCRYPT_MAX_BYTES = 72


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    rounds = rounds or default_settings.bcrypt_rounds
    password_bytes = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    if not hashed_password:
        return False
    password_bytes = plain_password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_access_token(
    subject: str,
    role: str,
    settings: Settings = default_settings,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """Issue a signed token embedding the principal id and role."""
    issued_at = utcnow()
    expire = issued_at + (expires_delta or timedelta(hours=settings.jwt_expires_hours))
    payload = {
        "sub": subject,
        "role": role,
        "iat": issued_at,
        "exp": expire,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings = default_settings) -> dict[str, Any]:
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except jwt.ExpiredSignatureError as exc:
        raise UnauthorizedError("Token expired") from exc
    except jwt.InvalidTokenError as exc:
        raise UnauthorizedError("Invalid token") from exc

    if not payload.get("sub"):
        raise UnauthorizedError("Invalid token")
    return payload
