"""Menu routes - items, categories and the customer menu."""

from typing import List, Optional

from fastapi import APIRouter, Query, status

from tableside.core.errors import ValidationFailed
from tableside.core.rbac import CurrentUser, RequireManager
from tableside.core.validators import PositiveIntId, is_valid_table_code
from tableside.db.session import DbSession
from tableside.schemas.menu import (
    CustomerMenuResponse,
    MenuCategoryCreate,
    MenuCategoryResponse,
    MenuCategoryUpdate,
    MenuItemCreate,
    MenuItemResponse,
    MenuItemUpdate,
)
from tableside.services import menu_service

router = APIRouter()


# ==================== CUSTOMER MENU ====================

@router.get("/customer", response_model=CustomerMenuResponse)
def get_customer_menu(db: DbSession, table_code: str = Query(..., description="Decoded table QR code")):
    """Available items in active categories, for a scanned table."""
    if not is_valid_table_code(table_code):
        raise ValidationFailed("Invalid QR code. Please scan a valid table QR code.")
    return menu_service.fetch_customer_menu(db)


# ==================== ITEMS ====================

@router.get("/items", response_model=List[MenuItemResponse])
def list_menu_items(
    db: DbSession,
    current_user: CurrentUser,
    category: Optional[str] = None,
    available: Optional[bool] = None,
    search: Optional[str] = Query(None, max_length=100),
):
    return menu_service.list_items(db, category=category, available=available, search=search)


@router.get("/items/{item_id}", response_model=MenuItemResponse)
def get_menu_item(item_id: PositiveIntId, db: DbSession, current_user: CurrentUser):
    return menu_service.get_item(db, item_id)


@router.post("/items", response_model=MenuItemResponse, status_code=status.HTTP_201_CREATED)
def create_menu_item(data: MenuItemCreate, db: DbSession, current_user: RequireManager):
    return menu_service.create_item(db, data.model_dump())


@router.put("/items/{item_id}", response_model=MenuItemResponse)
def update_menu_item(item_id: PositiveIntId, data: MenuItemUpdate, db: DbSession, current_user: RequireManager):
    return menu_service.update_item(db, item_id, data.model_dump(exclude_unset=True))


@router.patch("/items/{item_id}/availability", response_model=MenuItemResponse)
def set_menu_item_availability(
    item_id: PositiveIntId, db: DbSession, current_user: RequireManager, is_available: bool = Query(...),
):
    return menu_service.update_item(db, item_id, {"is_available": is_available})


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_menu_item(item_id: PositiveIntId, db: DbSession, current_user: RequireManager):
    menu_service.delete_item(db, item_id)


# ==================== CATEGORIES ====================

@router.get("/categories", response_model=List[MenuCategoryResponse])
def list_categories(db: DbSession, current_user: CurrentUser):
    return menu_service.list_categories(db)


@router.post("/categories", response_model=MenuCategoryResponse, status_code=status.HTTP_201_CREATED)
def create_category(data: MenuCategoryCreate, db: DbSession, current_user: RequireManager):
    return menu_service.create_category(db, data.model_dump())


@router.put("/categories/{category_id}", response_model=MenuCategoryResponse)
def update_category(
    category_id: PositiveIntId, data: MenuCategoryUpdate, db: DbSession, current_user: RequireManager,
):
    """Update a category. Renaming relabels the items filed under the old name."""
    return menu_service.update_category(db, category_id, data.model_dump(exclude_unset=True))


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_category(category_id: PositiveIntId, db: DbSession, current_user: RequireManager):
    menu_service.delete_category(db, category_id)
