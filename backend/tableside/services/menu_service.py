"""Menu catalog: items, categories and the customer-facing menu."""

import logging
from collections import OrderedDict
from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy import or_
from sqlalchemy.orm import Session

from tableside.core.errors import Conflict, NotFound, ValidationFailed
from tableside.models.menu import MenuCategory, MenuItem
from tableside.services.pricing import OrderSnapshot

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pure filters
# ---------------------------------------------------------------------------

def only_available(items: Iterable[MenuItem]) -> List[MenuItem]:
    return [item for item in items if item.is_available]


def only_active_categories(items: Iterable[MenuItem], categories: Iterable[MenuCategory]) -> List[MenuItem]:
    """Drop items whose label names an inactive category.

    Labels with no matching category row are kept.
    """
    inactive = {c.name for c in categories if not c.is_active}
    return [item for item in items if item.category not in inactive]


def customer_menu(items: Iterable[MenuItem], categories: Iterable[MenuCategory]) -> List[MenuItem]:
    categories = list(categories)
    return only_active_categories(only_available(items), categories)


# ---------------------------------------------------------------------------
# Menu items
# ---------------------------------------------------------------------------

def list_items(
    db: Session,
    category: Optional[str] = None,
    available: Optional[bool] = None,
    search: Optional[str] = None,
) -> List[MenuItem]:
    query = db.query(MenuItem)
    if category:
        query = query.filter(MenuItem.category == category)
    if available is not None:
        query = query.filter(MenuItem.is_available == available)
    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(MenuItem.name.ilike(pattern), MenuItem.description.ilike(pattern)))
    return query.order_by(MenuItem.category, MenuItem.name, MenuItem.id).all()


def get_item(db: Session, item_id: int) -> MenuItem:
    item = db.query(MenuItem).filter(MenuItem.id == item_id).first()
    if not item:
        raise NotFound("Menu item", item_id)
    return item


def create_item(db: Session, data: Dict[str, Any]) -> MenuItem:
    item = MenuItem(**data)
    db.add(item)
    db.commit()
    db.refresh(item)
    logger.info(f"Created menu item {item.id} ({item.name})")
    return item


def update_item(db: Session, item_id: int, data: Dict[str, Any]) -> MenuItem:
    item = get_item(db, item_id)
    for field, value in data.items():
        setattr(item, field, value)
    db.commit()
    db.refresh(item)
    return item


def delete_item(db: Session, item_id: int) -> None:
    item = get_item(db, item_id)
    db.delete(item)
    db.commit()
    logger.info(f"Deleted menu item {item_id}")


def fetch_customer_menu(db: Session) -> Dict[str, list]:
    categories = list_categories(db)
    items = customer_menu(list_items(db), categories)
    return {
        "categories": [c for c in categories if c.is_active],
        "items": items,
    }


def snapshot_from_cart(db: Session, cart: Sequence[Any]) -> OrderSnapshot:
    """Price a cart of ``{menu_item_id, quantity}`` entries against current menu rows.

    Repeated ids are merged. Every item must exist and be available.
    """
    if not cart:
        raise ValidationFailed("Cart is empty")

    quantities: Dict[int, int] = OrderedDict()
    for entry in cart:
        quantities[entry.menu_item_id] = quantities.get(entry.menu_item_id, 0) + entry.quantity

    rows = db.query(MenuItem).filter(MenuItem.id.in_(list(quantities))).all()
    by_id = {row.id: row for row in rows}
    for item_id in quantities:
        if item_id not in by_id:
            raise NotFound("Menu item", item_id)
        if not by_id[item_id].is_available:
            raise ValidationFailed(f"{by_id[item_id].name} is not available right now")

    return OrderSnapshot.from_menu_items((by_id[item_id], qty) for item_id, qty in quantities.items())


def record_item_orders(db: Session, cart: Sequence[Any]) -> None:
    """Bump ``order_count`` once per order for each distinct item in the cart."""
    item_ids = {entry.menu_item_id for entry in cart}
    for item in db.query(MenuItem).filter(MenuItem.id.in_(item_ids)).all():
        item.order_count = (item.order_count or 0) + 1


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

def list_categories(db: Session) -> List[MenuCategory]:
    return db.query(MenuCategory).order_by(MenuCategory.display_order, MenuCategory.name).all()


def get_category(db: Session, category_id: int) -> MenuCategory:
    category = db.query(MenuCategory).filter(MenuCategory.id == category_id).first()
    if not category:
        raise NotFound("Category", category_id)
    return category


def _ensure_unique_category_name(db: Session, name: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(MenuCategory).filter(MenuCategory.name == name)
    if exclude_id is not None:
        query = query.filter(MenuCategory.id != exclude_id)
    if query.first():
        raise Conflict(f"Category '{name}' already exists")


def create_category(db: Session, data: Dict[str, Any]) -> MenuCategory:
    _ensure_unique_category_name(db, data["name"])
    category = MenuCategory(**data)
    db.add(category)
    db.commit()
    db.refresh(category)
    return category


def update_category(db: Session, category_id: int, data: Dict[str, Any]) -> MenuCategory:
    """Update a category. A rename relabels every item that carried the old name."""
    category = get_category(db, category_id)
    old_name = category.name
    new_name = data.get("name")
    if new_name is not None and new_name != old_name:
        _ensure_unique_category_name(db, new_name, exclude_id=category_id)

    for field, value in data.items():
        setattr(category, field, value)

    if new_name is not None and new_name != old_name:
        items = db.query(MenuItem).filter(MenuItem.category == old_name).all()
        for item in items:
            item.category = new_name
        logger.info(f"Renamed category '{old_name}' to '{new_name}', relabelled {len(items)} items")

    db.commit()
    db.refresh(category)
    return category


def delete_category(db: Session, category_id: int) -> None:
    """Delete a category row. Items keep their label."""
    category = get_category(db, category_id)
    db.delete(category)
    db.commit()
