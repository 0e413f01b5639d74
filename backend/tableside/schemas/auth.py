"""Authentication schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from tableside.core.rbac import UserRole


class LoginRequest(BaseModel):
    """Login request body."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)


class SignupRequest(BaseModel):
    """Sign-up request body. Domain and password rules are checked by the route."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)
    name: Optional[str] = Field(None, max_length=255)


class Token(BaseModel):
    """JWT token response."""

    access_token: str
    token_type: str = "bearer"


class UserResponse(BaseModel):
    """User response schema."""

    id: int
    email: EmailStr
    name: Optional[str] = None
    role: UserRole
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}
