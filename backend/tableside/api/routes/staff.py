"""Staff records routes."""

from typing import List, Optional

from fastapi import APIRouter, Query, status

from tableside.core.rbac import RequireManager, RequireStaff
from tableside.core.responses import list_response
from tableside.core.validators import PositiveIntId
from tableside.db.session import DbSession
from tableside.schemas.staff import StaffCreate, StaffResponse, StaffUpdate
from tableside.services import staff_service

router = APIRouter()


@router.get("/", response_model=List[StaffResponse])
def list_staff(
    db: DbSession,
    current_user: RequireStaff,
    department: Optional[str] = None,
    status_filter: Optional[str] = Query(None, alias="status"),
    search: Optional[str] = Query(None, max_length=100),
):
    return staff_service.list_staff(db, department=department, status=status_filter, search=search)


@router.get("/departments")
def list_departments(db: DbSession, current_user: RequireStaff):
    return list_response(staff_service.list_departments(db))


@router.get("/{staff_id}", response_model=StaffResponse)
def get_staff_member(staff_id: PositiveIntId, db: DbSession, current_user: RequireStaff):
    return staff_service.get_staff(db, staff_id)


@router.post("/", response_model=StaffResponse, status_code=status.HTTP_201_CREATED)
def create_staff_member(data: StaffCreate, db: DbSession, current_user: RequireManager):
    return staff_service.create_staff(db, data.model_dump())


@router.put("/{staff_id}", response_model=StaffResponse)
def update_staff_member(staff_id: PositiveIntId, data: StaffUpdate, db: DbSession, current_user: RequireManager):
    return staff_service.update_staff(db, staff_id, data.model_dump(exclude_unset=True))


@router.delete("/{staff_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_staff_member(staff_id: PositiveIntId, db: DbSession, current_user: RequireManager):
    staff_service.delete_staff(db, staff_id)
