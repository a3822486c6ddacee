"""
inkconnect/core/security.py

Password hashing and access token utilities:
- bcrypt password hashing through passlib
- JWT access token with expiration and JTI
- Access token decoding into a validated payload
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, cast

from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel, ValidationError as PydanticValidationError

from inkconnect.core.config import settings
from inkconnect.database.enums import UserRole

logger = logging.getLogger(__name__)

# ------------------------------------------------------
# --- Password Hashing ---
# ------------------------------------------------------
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def get_password_hash(password: str) -> str:
    """Hash a plain-text password using bcrypt."""
    return cast(str, pwd_context.hash(password))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain-text password against a hashed password."""
    return cast(bool, pwd_context.verify(plain_password, hashed_password))


# ------------------------------------------------------
# --- Access Token ---
# ------------------------------------------------------
class TokenPayload(BaseModel):
    """Claims carried by an access token."""

    sub: uuid.UUID
    role: UserRole
    jti: str | None = None
    exp: int | None = None


def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """
    Create a JWT access token with expiration and unique JTI.

    Args:
        data (dict[str, Any]): Payload data to include in the token (must contain 'sub' and 'role').
        expires_delta (timedelta | None): Optional custom expiration time. Defaults to settings.

    Returns:
        str: Encoded JWT access token.
    """
    if "sub" not in data or "role" not in data:
        logger.error("[TOKEN] Access token creation attempt missing 'sub' or 'role' in data.")
        raise ValueError("Access token payload must include 'sub' and 'role'.")

    expire: datetime = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    jti: str = str(uuid.uuid4())  # Unique token identifier for blacklisting
    payload: dict[str, Any] = {**data, "exp": expire, "jti": jti}

    logger.info(f"[TOKEN] Issuing access token for sub={data.get('sub')} exp={expire} jti={jti}")
    token = jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)
    return str(token)


def decode_access_token(token: str) -> TokenPayload:
    """
    Decode and validate an access token.

    Raises:
        ValueError: If the token is malformed, expired or carries invalid claims.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        return TokenPayload(**payload)
    except (JWTError, PydanticValidationError) as e:
        raise ValueError(f"Invalid access token: {e}") from e
