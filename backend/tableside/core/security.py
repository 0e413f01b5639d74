"""Admin account credentials: bcrypt password hashes and JWT access tokens.

Tokens carry ``sub`` (account id), ``email`` and ``role``; the RBAC
dependencies and the live-view WebSocket read them back with
``decode_access_token``.
"""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt
from jwt.exceptions import PyJWTError

from tableside.core.config import settings

logger = logging.getLogger(__name__)


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a sign-in password. A malformed stored hash counts as a mismatch."""
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError as e:
        logger.warning(f"Stored password hash is unusable: {e}")
        return False


def create_access_token(data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
    """Sign *data* with an expiry, issue time and unique token id."""
    issued_at = datetime.now(timezone.utc)
    lifetime = expires_delta if expires_delta is not None else timedelta(
        minutes=settings.access_token_expire_minutes
    )
    claims = dict(data)
    claims.update({
        "exp": issued_at + lifetime,
        "iat": issued_at,
        "jti": secrets.token_urlsafe(16),
    })
    return jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm)


def create_account_token(account_id: int, email: str, role: str) -> str:
    """Access token for an admin account."""
    return create_access_token({"sub": str(account_id), "email": email, "role": role})


def decode_access_token(token: str) -> dict[str, Any] | None:
    """Claims of a valid token, or None if it is malformed, forged or expired."""
    try:
        return jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
            options={"require": ["exp", "sub"]},
        )
    except PyJWTError as e:
        logger.debug(f"Rejected access token: {e}")
        return None
