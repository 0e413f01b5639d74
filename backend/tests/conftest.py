"""Pytest configuration and fixtures."""

import os

# Keep the application engine off disk; tests bind their own engine below
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

from datetime import date
from decimal import Decimal
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from tableside.core.rbac import UserRole
from tableside.core.security import create_account_token, get_password_hash
from tableside.db.base import Base
from tableside.db.session import get_db, get_session_factory
from tableside.main import app
# Import all models to ensure they're registered with Base.metadata
from tableside.models import *  # noqa: F401,F403
from tableside.models.menu import MenuCategory, MenuItem
from tableside.models.staff import Permission, Role, StaffMember
from tableside.models.tables import DiningTable
from tableside.models.user import User

# Use in-memory SQLite for tests
TEST_DATABASE_URL = "sqlite:///:memory:"

TABLE_CODE = "22/CS/062"


@pytest.fixture(scope="function")
def db_engine():
    """Create a test database engine."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture(scope="function")
def db_session(session_factory) -> Generator[Session, None, None]:
    """Create a test database session."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_session: Session, session_factory) -> Generator[TestClient, None, None]:
    """Create a test client with database override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    # Disable the rate limiter during tests to avoid flaky failures
    from tableside.core.rate_limit import limiter
    limiter.enabled = False
    # Don't raise server exceptions so we can test error status codes
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    limiter.enabled = True
    app.dependency_overrides.clear()


def _make_user(db_session: Session, email: str, role: UserRole) -> User:
    user = User(
        email=email,
        password_hash=get_password_hash("Secret#123"),
        role=role,
        name=email.split("@")[0],
        is_active=True,
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def _headers_for(user: User) -> dict:
    token = create_account_token(user.id, user.email, user.role.value)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def test_user(db_session: Session) -> User:
    """Create an owner account."""
    return _make_user(db_session, "owner@gmail.com", UserRole.OWNER)


@pytest.fixture
def auth_token(test_user: User) -> str:
    """Get an authentication token for the test user."""
    return create_account_token(test_user.id, test_user.email, test_user.role.value)


@pytest.fixture
def auth_headers(auth_token: str) -> dict:
    """Get authentication headers."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def staff_headers(db_session: Session) -> dict:
    """Headers for an account with the lowest admin role."""
    return _headers_for(_make_user(db_session, "waiter@gmail.com", UserRole.STAFF))


@pytest.fixture
def menu_items(db_session: Session) -> dict:
    """A small menu: two available mains, one sold-out item and one in a hidden category."""
    rows = {
        "burger": MenuItem(name="Burger", price=Decimal("12.99"), category="Mains", is_available=True),
        "fries": MenuItem(name="Fries", price=Decimal("4.50"), category="Sides", is_available=True),
        "soup": MenuItem(name="Soup", price=Decimal("6.00"), category="Mains", is_available=False),
        "cocktail": MenuItem(name="Cocktail", price=Decimal("9.00"), category="Bar", is_available=True),
    }
    db_session.add_all(rows.values())
    db_session.add_all([
        MenuCategory(name="Mains", display_order=1, is_active=True),
        MenuCategory(name="Sides", display_order=2, is_active=True),
        MenuCategory(name="Bar", display_order=3, is_active=False),
    ])
    db_session.commit()
    for row in rows.values():
        db_session.refresh(row)
    return rows


@pytest.fixture
def dining_tables(db_session: Session) -> list:
    tables = [DiningTable(name=f"T{i}", capacity=4) for i in range(1, 4)]
    db_session.add_all(tables)
    db_session.commit()
    for table in tables:
        db_session.refresh(table)
    return tables


@pytest.fixture
def permissions(db_session: Session) -> list:
    rows = [
        Permission(name="view_orders", category="Orders", description="See the order board"),
        Permission(name="edit_menu", category="Menu"),
        Permission(name="cancel_orders", category="Orders"),
    ]
    db_session.add_all(rows)
    db_session.commit()
    for row in rows:
        db_session.refresh(row)
    return rows


@pytest.fixture
def test_role(db_session: Session, permissions) -> Role:
    role = Role(name="Waiter", description="Floor staff", permissions=[permissions[0].id], version=1)
    db_session.add(role)
    db_session.commit()
    db_session.refresh(role)
    return role


@pytest.fixture
def test_staff(db_session: Session) -> StaffMember:
    member = StaffMember(
        name="Asha Rao",
        email="asha@example.com",
        role="Chef",
        status="active",
        join_date=date(2024, 1, 15),
        salary=Decimal("32000"),
        department="Kitchen",
        shift="Morning",
    )
    db_session.add(member)
    db_session.commit()
    db_session.refresh(member)
    return member
