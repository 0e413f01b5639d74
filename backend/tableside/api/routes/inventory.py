"""Inventory routes."""

from typing import List, Optional

from fastapi import APIRouter, Query, status

from tableside.core.rbac import RequireManager, RequireStaff
from tableside.core.responses import list_response
from tableside.core.validators import PositiveIntId
from tableside.db.session import DbSession
from tableside.schemas.inventory import (
    InventoryItemCreate,
    InventoryItemResponse,
    InventoryItemUpdate,
    RestockRequest,
)
from tableside.services import inventory_service

router = APIRouter()


@router.get("/", response_model=List[InventoryItemResponse])
def list_inventory(
    db: DbSession,
    current_user: RequireStaff,
    category: Optional[str] = None,
    low_stock: Optional[bool] = None,
    search: Optional[str] = Query(None, max_length=100),
):
    return inventory_service.list_items(db, category=category, low_stock=low_stock, search=search)


@router.get("/categories")
def list_inventory_categories(db: DbSession, current_user: RequireStaff):
    return list_response(inventory_service.list_categories(db))


@router.get("/{item_id}", response_model=InventoryItemResponse)
def get_inventory_item(item_id: PositiveIntId, db: DbSession, current_user: RequireStaff):
    return inventory_service.get_item(db, item_id)


@router.post("/", response_model=InventoryItemResponse, status_code=status.HTTP_201_CREATED)
def create_inventory_item(data: InventoryItemCreate, db: DbSession, current_user: RequireManager):
    return inventory_service.create_item(db, data.model_dump())


@router.put("/{item_id}", response_model=InventoryItemResponse)
def update_inventory_item(
    item_id: PositiveIntId, data: InventoryItemUpdate, db: DbSession, current_user: RequireManager,
):
    return inventory_service.update_item(db, item_id, data.model_dump(exclude_unset=True))


@router.post("/{item_id}/restock", response_model=InventoryItemResponse)
def restock_inventory_item(
    item_id: PositiveIntId, data: RestockRequest, db: DbSession, current_user: RequireStaff,
):
    return inventory_service.restock(db, item_id, data.amount)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_inventory_item(item_id: PositiveIntId, db: DbSession, current_user: RequireManager):
    inventory_service.delete_item(db, item_id)
