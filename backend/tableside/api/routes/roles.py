"""Staff role routes, including the permission toggle."""

import logging
from typing import List, Optional

from fastapi import APIRouter, status

from tableside.core.rbac import RequireManager, RequireStaff
from tableside.core.validators import PositiveIntId
from tableside.db.session import DbSession
from tableside.schemas.staff import PermissionToggle, RoleCreate, RoleResponse, RoleUpdate
from tableside.services import role_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/", response_model=List[RoleResponse])
def list_roles(db: DbSession, current_user: RequireStaff):
    return role_service.list_roles(db)


@router.get("/{role_id}", response_model=RoleResponse)
def get_role(role_id: PositiveIntId, db: DbSession, current_user: RequireStaff):
    return role_service.get_role(db, role_id)


@router.post("/", response_model=RoleResponse, status_code=status.HTTP_201_CREATED)
def create_role(data: RoleCreate, db: DbSession, current_user: RequireManager):
    return role_service.create_role(db, data.name, data.description, data.permissions)


@router.put("/{role_id}", response_model=RoleResponse)
def update_role(role_id: PositiveIntId, data: RoleUpdate, db: DbSession, current_user: RequireManager):
    changes = data.model_dump(exclude_unset=True, exclude={"expected_version"})
    return role_service.update_role(db, role_id, changes, expected_version=data.expected_version)


@router.post("/{role_id}/permissions/{permission_id}/toggle", response_model=RoleResponse)
def toggle_permission(
    role_id: PositiveIntId,
    permission_id: PositiveIntId,
    db: DbSession,
    current_user: RequireManager,
    data: Optional[PermissionToggle] = None,
):
    """Grant the permission if the role lacks it, revoke it otherwise."""
    expected_version = data.expected_version if data else None
    role = role_service.toggle_role_permission(db, role_id, permission_id, expected_version)
    logger.info(f"{current_user.email} toggled permission {permission_id} on role {role.name}")
    return role


@router.delete("/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_role(role_id: PositiveIntId, db: DbSession, current_user: RequireManager):
    role_service.delete_role(db, role_id)
