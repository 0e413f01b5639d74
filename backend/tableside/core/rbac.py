"""Role-Based Access Control (RBAC) utilities for admin accounts."""

from enum import Enum
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, status

from tableside.core.security import decode_access_token


class UserRole(str, Enum):
    """Admin account roles."""

    OWNER = "owner"
    MANAGER = "manager"
    STAFF = "staff"


# Role hierarchy: owner > manager > staff
ROLE_HIERARCHY = {
    UserRole.OWNER: 3,
    UserRole.MANAGER: 2,
    UserRole.STAFF: 1,
}


class TokenData:
    """Decoded token data.

    Attributes:
        user_id: The account's database ID.
        email: The account's email address.
        role: The account's role (owner/manager/staff).
    """

    def __init__(self, user_id: int, email: str, role: UserRole):
        self.user_id = user_id
        self.email = email
        self.role = role


def _token_from_request(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        token = auth_header.split(" ", 1)[1]
        if token:
            return token
    return request.cookies.get("access_token")


async def get_current_user(request: Request) -> TokenData:
    """Get the current authenticated account from its JWT.

    Checks the ``Authorization: Bearer`` header first, then the
    ``access_token`` cookie.
    """
    token = _token_from_request(request)
    payload = decode_access_token(token) if token else None

    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = payload.get("sub")
    email = payload.get("email")
    role = payload.get("role")

    if user_id is None or email is None or role is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    try:
        user_role = UserRole(role)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid role in token",
        )

    return TokenData(user_id=int(user_id), email=email, role=user_role)


def require_role(minimum_role: UserRole):
    """Dependency to require a minimum role level."""

    async def role_checker(
        current_user: Annotated[TokenData, Depends(get_current_user)]
    ) -> TokenData:
        user_level = ROLE_HIERARCHY.get(current_user.role, 0)
        required_level = ROLE_HIERARCHY.get(minimum_role, 0)

        if user_level < required_level:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires role {minimum_role.value} or higher",
            )
        return current_user

    return role_checker


# Common role dependencies
RequireOwner = Annotated[TokenData, Depends(require_role(UserRole.OWNER))]
RequireManager = Annotated[TokenData, Depends(require_role(UserRole.MANAGER))]
RequireStaff = Annotated[TokenData, Depends(require_role(UserRole.STAFF))]
CurrentUser = Annotated[TokenData, Depends(get_current_user)]
