"""Reusable input validators.

The sign-up and QR rules are plain predicates so every entry point that
accepts the same input applies the same rule.
"""

import re
from typing import Annotated, Optional

from fastapi import Path

from tableside.core.config import settings

# Positive integer ID validator for path parameters
PositiveIntId = Annotated[int, Path(gt=0, description="Resource ID (must be positive)")]

TABLE_CODE_PATTERN = re.compile(r"^\d{2}/CS/\d{3}$")

PASSWORD_MIN_LENGTH = 8
PASSWORD_SPECIAL_CHARACTERS = "!@#$%^&*"

_EMAIL_LOCAL_PART = re.compile(r"^[a-zA-Z0-9._%+-]+$")


def is_valid_table_code(code: Optional[str]) -> bool:
    """Check a decoded QR string, e.g. ``22/CS/062``."""
    if not code:
        return False
    return TABLE_CODE_PATTERN.match(code) is not None


def is_allowed_email(email: Optional[str], domain: Optional[str] = None) -> bool:
    """True if *email* belongs to the single sign-up domain."""
    if not email or email.count("@") != 1:
        return False
    local, _, host = email.partition("@")
    allowed = (domain or settings.allowed_email_domain).lower()
    return bool(_EMAIL_LOCAL_PART.match(local)) and host.lower() == allowed


def password_policy_error(password: str) -> Optional[str]:
    """Return the first broken password rule, or None if the password is acceptable."""
    if len(password) < PASSWORD_MIN_LENGTH:
        return f"Password must be at least {PASSWORD_MIN_LENGTH} characters long"
    if not re.search(r"[A-Z]", password):
        return "Password must contain at least one uppercase letter"
    if not re.search(r"[a-z]", password):
        return "Password must contain at least one lowercase letter"
    if not re.search(r"[0-9]", password):
        return "Password must contain at least one number"
    if not any(ch in PASSWORD_SPECIAL_CHARACTERS for ch in password):
        return f"Password must contain at least one special character ({PASSWORD_SPECIAL_CHARACTERS})"
    return None


def is_strong_password(password: str) -> bool:
    return password_policy_error(password) is None
