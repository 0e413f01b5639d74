"""Authentication routes."""

import logging
from typing import List

from fastapi import APIRouter, HTTPException, Request, status
from pydantic import BaseModel

from tableside.core.errors import Conflict, NotFound, ValidationFailed
from tableside.core.rate_limit import limiter
from tableside.core.rbac import CurrentUser, RequireOwner, UserRole
from tableside.core.security import create_account_token, get_password_hash, verify_password
from tableside.core.validators import PositiveIntId, is_allowed_email, password_policy_error
from tableside.core.config import settings
from tableside.db.session import DbSession
from tableside.models.user import User
from tableside.schemas.auth import LoginRequest, SignupRequest, Token, UserResponse

logger = logging.getLogger("auth")

router = APIRouter()


class RoleAssignment(BaseModel):
    role: UserRole


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit("5/minute")
def signup(request: Request, signup_request: SignupRequest, db: DbSession):
    """Create an admin account. The first account becomes the owner."""
    client_ip = request.client.host if request.client else "unknown"
    email = signup_request.email.lower()

    if not is_allowed_email(email):
        raise ValidationFailed(f"Only @{settings.allowed_email_domain} addresses can sign up")
    problem = password_policy_error(signup_request.password)
    if problem:
        raise ValidationFailed(problem)
    if db.query(User).filter(User.email == email).first():
        raise Conflict("An account with this email already exists")

    is_first = db.query(User.id).first() is None
    user = User(
        email=email,
        password_hash=get_password_hash(signup_request.password),
        name=signup_request.name,
        role=UserRole.OWNER if is_first else UserRole.STAFF,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info(f"New user registered: {user.email} (ID: {user.id}, role: {user.role.value}) from IP: {client_ip}")
    return user


@router.post("/login", response_model=Token)
@limiter.limit("5/minute")
def login(request: Request, login_request: LoginRequest, db: DbSession):
    """Authenticate user and return JWT token."""
    client_ip = request.client.host if request.client else "unknown"
    user = db.query(User).filter(User.email == login_request.email.lower()).first()

    if not user or not verify_password(login_request.password, user.password_hash):
        logger.warning(f"Failed login attempt for email: {login_request.email} from IP: {client_ip}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    if not user.is_active:
        logger.warning(f"Login attempt for inactive user: {login_request.email} (ID: {user.id}) from IP: {client_ip}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User account is inactive",
        )

    logger.info(f"Successful login: {user.email} (ID: {user.id}, role: {user.role.value}) from IP: {client_ip}")
    token = create_account_token(user.id, user.email, user.role.value)
    return Token(access_token=token)


@router.get("/me", response_model=UserResponse)
def get_current_user_info(current_user: CurrentUser, db: DbSession):
    """Get current authenticated user info."""
    user = db.query(User).filter(User.id == current_user.user_id).first()
    if not user:
        raise NotFound("User", current_user.user_id)
    return user


@router.get("/users", response_model=List[UserResponse])
def list_users(current_user: RequireOwner, db: DbSession):
    return db.query(User).order_by(User.created_at, User.id).all()


@router.put("/users/{user_id}/role", response_model=UserResponse)
def assign_role(user_id: PositiveIntId, assignment: RoleAssignment, current_user: RequireOwner, db: DbSession):
    """Promote or demote an account."""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFound("User", user_id)
    if user.id == current_user.user_id and assignment.role != UserRole.OWNER:
        raise Conflict("Owners cannot demote themselves")
    user.role = assignment.role
    db.commit()
    db.refresh(user)
    logger.info(f"User {user.email} is now {user.role.value} (changed by {current_user.email})")
    return user
