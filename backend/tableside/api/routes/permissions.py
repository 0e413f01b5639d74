"""Permission catalogue routes."""

from typing import List

from fastapi import APIRouter, status

from tableside.core.rbac import RequireManager, RequireStaff
from tableside.core.validators import PositiveIntId
from tableside.db.session import DbSession
from tableside.schemas.staff import (
    GroupedPermissionsResponse,
    PermissionCreate,
    PermissionResponse,
    PermissionUpdate,
)
from tableside.services import role_service

router = APIRouter()


@router.get("/", response_model=List[PermissionResponse])
def list_permissions(db: DbSession, current_user: RequireStaff):
    return role_service.list_permissions(db)


@router.get("/grouped", response_model=GroupedPermissionsResponse)
def grouped_permissions(db: DbSession, current_user: RequireStaff):
    """Permissions by category, categories and names in alphabetical order."""
    return {"categories": role_service.group_permissions_by_category(role_service.list_permissions(db))}


@router.post("/", response_model=PermissionResponse, status_code=status.HTTP_201_CREATED)
def create_permission(data: PermissionCreate, db: DbSession, current_user: RequireManager):
    return role_service.create_permission(db, data.model_dump())


@router.put("/{permission_id}", response_model=PermissionResponse)
def update_permission(
    permission_id: PositiveIntId, data: PermissionUpdate, db: DbSession, current_user: RequireManager,
):
    return role_service.update_permission(db, permission_id, data.model_dump(exclude_unset=True))


@router.delete("/{permission_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_permission(permission_id: PositiveIntId, db: DbSession, current_user: RequireManager):
    """Delete a permission and revoke it from every role."""
    role_service.delete_permission(db, permission_id)
