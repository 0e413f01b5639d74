"""Staff records, roles and permissions."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, Integer, JSON, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, validates

from tableside.db.base import Base, TimestampMixin
from tableside.models.validators import non_negative, validate_list


class StaffMember(Base, TimestampMixin):
    """An employee record. ``role`` is a free-text job title."""

    __tablename__ = "staff"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    role: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[str] = mapped_column(String(20), default="active", nullable=False)  # active, inactive
    join_date: Mapped[date] = mapped_column(Date, nullable=False)
    salary: Mapped[Decimal] = mapped_column(Numeric(10, 2), default=Decimal("0"), nullable=False)
    department: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    shift: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    image_url: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    @validates("salary")
    def _validate_salary(self, key, value):
        return non_negative(key, value)


class Role(Base, TimestampMixin):
    """A named bundle of permission ids.

    ``permissions`` is stored as a JSON list but has set semantics.
    ``version`` is the mapper version counter: every UPDATE bumps it and
    only matches the row if nobody else bumped it first, otherwise the
    flush raises ``StaleDataError``.
    """

    __tablename__ = "staff_roles"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    permissions: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1, server_default="1")

    __mapper_args__ = {"version_id_col": version}

    def check_version(self, expected: Optional[int]) -> bool:
        """True if *expected* is None or matches the loaded version."""
        return expected is None or expected == self.version

    @validates("permissions")
    def _validate_permissions(self, key, value):
        return validate_list(key, value)


class Permission(Base, TimestampMixin):
    """A single grantable capability, grouped by ``category`` for display."""

    __tablename__ = "permissions"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
