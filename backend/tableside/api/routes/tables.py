"""Tables management routes."""

from typing import List, Optional

from fastapi import APIRouter, status

from tableside.core.rbac import CurrentUser, RequireManager, RequireStaff
from tableside.core.validators import PositiveIntId
from tableside.db.session import DbSession
from tableside.schemas.table import OccupancyUpdate, TableCreate, TableResponse, TableUpdate
from tableside.services import booking_service

router = APIRouter()


@router.get("/", response_model=List[TableResponse])
def list_tables(db: DbSession, occupied: Optional[bool] = None):
    """All tables, optionally only free or only occupied ones. Customers pick from this list."""
    return booking_service.list_tables(db, occupied=occupied)


@router.get("/{table_id}", response_model=TableResponse)
def get_table(table_id: PositiveIntId, db: DbSession, current_user: CurrentUser):
    return booking_service.get_table(db, table_id)


@router.post("/", response_model=TableResponse, status_code=status.HTTP_201_CREATED)
def create_table(data: TableCreate, db: DbSession, current_user: RequireManager):
    return booking_service.create_table(db, data.model_dump())


@router.put("/{table_id}", response_model=TableResponse)
def update_table(table_id: PositiveIntId, data: TableUpdate, db: DbSession, current_user: RequireManager):
    return booking_service.update_table(db, table_id, data.model_dump(exclude_unset=True))


@router.put("/{table_id}/occupancy", response_model=TableResponse)
def set_table_occupancy(table_id: PositiveIntId, data: OccupancyUpdate, db: DbSession, current_user: RequireStaff):
    return booking_service.set_table_occupancy(db, table_id, data.is_occupied)


@router.delete("/{table_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_table(table_id: PositiveIntId, db: DbSession, current_user: RequireManager):
    booking_service.delete_table(db, table_id)
