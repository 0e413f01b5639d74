"""Roles, permissions and the permission toggle.

A role's ``permissions`` column is a JSON list with set semantics. Every
rewrite replaces the whole list and bumps the role's ``version`` so a
client holding a stale copy gets a 409 instead of overwriting a
concurrent change.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from tableside.core.errors import Conflict, NotFound, ValidationFailed
from tableside.models.staff import Permission, Role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PermissionSet:
    ids: FrozenSet[int] = frozenset()

    @classmethod
    def of(cls, ids: Optional[Iterable[int]]) -> "PermissionSet":
        return cls(frozenset(int(i) for i in (ids or [])))

    def toggle(self, permission_id: int) -> "PermissionSet":
        if permission_id in self.ids:
            return PermissionSet(self.ids - {permission_id})
        return PermissionSet(self.ids | {permission_id})

    def __contains__(self, permission_id: int) -> bool:
        return permission_id in self.ids

    def __len__(self) -> int:
        return len(self.ids)

    def to_list(self) -> List[int]:
        return sorted(self.ids)


def group_permissions_by_category(permissions: Iterable[Permission]) -> Dict[str, List[Permission]]:
    """Categories in sorted order, permissions sorted by name within each."""
    grouped: Dict[str, List[Permission]] = {}
    for permission in permissions:
        grouped.setdefault(permission.category, []).append(permission)
    return OrderedDict(
        (category, sorted(grouped[category], key=lambda p: (p.name, p.id)))
        for category in sorted(grouped)
    )


# ---------------------------------------------------------------------------
# Permissions
# ---------------------------------------------------------------------------

def _commit_role_writes(db: Session, what: str) -> None:
    """Commit, turning a lost version race on a role row into Conflict."""
    try:
        db.commit()
    except StaleDataError as e:
        db.rollback()
        logger.warning(f"Stale role write for {what}: {e}")
        raise Conflict(f"Roles changed while saving {what}, reload and try again")


def list_permissions(db: Session) -> List[Permission]:
    return db.query(Permission).order_by(Permission.category, Permission.name).all()


def get_permission(db: Session, permission_id: int) -> Permission:
    permission = db.query(Permission).filter(Permission.id == permission_id).first()
    if not permission:
        raise NotFound("Permission", permission_id)
    return permission


def _ensure_unique_permission_name(db: Session, name: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(Permission).filter(Permission.name == name)
    if exclude_id is not None:
        query = query.filter(Permission.id != exclude_id)
    if query.first():
        raise Conflict(f"Permission '{name}' already exists")


def create_permission(db: Session, data: dict) -> Permission:
    _ensure_unique_permission_name(db, data["name"])
    permission = Permission(**data)
    db.add(permission)
    db.commit()
    db.refresh(permission)
    return permission


def update_permission(db: Session, permission_id: int, data: dict) -> Permission:
    permission = get_permission(db, permission_id)
    if data.get("name") is not None:
        _ensure_unique_permission_name(db, data["name"], exclude_id=permission_id)
    for field, value in data.items():
        setattr(permission, field, value)
    db.commit()
    db.refresh(permission)
    return permission


def delete_permission(db: Session, permission_id: int) -> None:
    """Delete a permission and revoke it from every role that held it."""
    permission = get_permission(db, permission_id)
    for role in db.query(Role).all():
        current = PermissionSet.of(role.permissions)
        if permission_id in current:
            role.permissions = current.toggle(permission_id).to_list()
    db.delete(permission)
    _commit_role_writes(db, f"permission {permission.name}")


# ---------------------------------------------------------------------------
# Roles
# ---------------------------------------------------------------------------

def list_roles(db: Session) -> List[Role]:
    return db.query(Role).order_by(Role.name).all()


def get_role(db: Session, role_id: int) -> Role:
    role = db.query(Role).filter(Role.id == role_id).first()
    if not role:
        raise NotFound("Role", role_id)
    return role


def _ensure_unique_role_name(db: Session, name: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(Role).filter(Role.name == name)
    if exclude_id is not None:
        query = query.filter(Role.id != exclude_id)
    if query.first():
        raise Conflict(f"Role '{name}' already exists")


def _ensure_permissions_exist(db: Session, ids: Iterable[int]) -> None:
    wanted = set(ids)
    if not wanted:
        return
    found = {row[0] for row in db.query(Permission.id).filter(Permission.id.in_(wanted)).all()}
    missing = sorted(wanted - found)
    if missing:
        raise NotFound("Permission", missing[0])


def create_role(db: Session, name: str, description: Optional[str] = None,
                permissions: Optional[Iterable[int]] = None) -> Role:
    _ensure_unique_role_name(db, name)
    permission_set = PermissionSet.of(permissions)
    _ensure_permissions_exist(db, permission_set.ids)
    role = Role(name=name, description=description, permissions=permission_set.to_list())
    db.add(role)
    db.commit()
    db.refresh(role)
    return role


def update_role(db: Session, role_id: int, data: dict, expected_version: Optional[int] = None) -> Role:
    role = get_role(db, role_id)
    if not role.check_version(expected_version):
        raise Conflict(f"Role {role.name} was changed by someone else (version {role.version})")
    if data.get("name") is not None:
        _ensure_unique_role_name(db, data["name"], exclude_id=role_id)
    for field, value in data.items():
        setattr(role, field, value)
    _commit_role_writes(db, f"role {role.name}")
    db.refresh(role)
    return role


def toggle_role_permission(db: Session, role_id: int, permission_id: int,
                           expected_version: Optional[int] = None) -> Role:
    """Grant the permission if the role lacks it, revoke it otherwise."""
    if permission_id is None:
        raise ValidationFailed("permission_id is required")
    role = get_role(db, role_id)
    get_permission(db, permission_id)
    if not role.check_version(expected_version):
        raise Conflict(f"Role {role.name} was changed by someone else (version {role.version})")

    updated = PermissionSet.of(role.permissions).toggle(permission_id)
    role.permissions = updated.to_list()
    _commit_role_writes(db, f"role {role.name}")
    db.refresh(role)
    logger.info(f"Role {role.name}: permission {permission_id} toggled, now {len(updated)} permissions")
    return role


def delete_role(db: Session, role_id: int) -> None:
    role = get_role(db, role_id)
    db.delete(role)
    _commit_role_writes(db, f"role {role.name}")
