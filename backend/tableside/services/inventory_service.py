"""Inventory service."""

import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from tableside.core.errors import NotFound, ValidationFailed
from tableside.db.base import utcnow
from tableside.models.inventory import InventoryItem

logger = logging.getLogger(__name__)


def list_items(
    db: Session,
    category: Optional[str] = None,
    low_stock: Optional[bool] = None,
    search: Optional[str] = None,
) -> List[InventoryItem]:
    query = db.query(InventoryItem)
    if category:
        query = query.filter(InventoryItem.category == category)
    if low_stock is not None:
        query = query.filter(InventoryItem.is_low_stock == low_stock)
    if search:
        query = query.filter(InventoryItem.name.ilike(f"%{search}%"))
    return query.order_by(InventoryItem.name, InventoryItem.id).all()


def get_item(db: Session, item_id: int) -> InventoryItem:
    item = db.query(InventoryItem).filter(InventoryItem.id == item_id).first()
    if not item:
        raise NotFound("Inventory item", item_id)
    return item


def create_item(db: Session, data: Dict[str, Any]) -> InventoryItem:
    item = InventoryItem(**data)
    if item.quantity and item.quantity > 0:
        item.last_restocked = utcnow()
    item.refresh_low_stock()
    db.add(item)
    db.commit()
    db.refresh(item)
    return item


def update_item(db: Session, item_id: int, data: Dict[str, Any]) -> InventoryItem:
    item = get_item(db, item_id)
    for field, value in data.items():
        setattr(item, field, value)
    item.refresh_low_stock()
    db.commit()
    db.refresh(item)
    return item


def restock(db: Session, item_id: int, amount: Decimal) -> InventoryItem:
    """Add *amount* to stock and stamp the restock time."""
    if amount is None or Decimal(str(amount)) <= 0:
        raise ValidationFailed("Restock amount must be positive")
    item = get_item(db, item_id)
    item.quantity = Decimal(str(item.quantity or 0)) + Decimal(str(amount))
    item.last_restocked = utcnow()
    item.refresh_low_stock()
    db.commit()
    db.refresh(item)
    logger.info(f"Restocked {item.name} by {amount} {item.unit}")
    return item


def delete_item(db: Session, item_id: int) -> None:
    item = get_item(db, item_id)
    db.delete(item)
    db.commit()


def list_categories(db: Session) -> List[str]:
    rows = db.query(InventoryItem.category).distinct().order_by(InventoryItem.category).all()
    return [row[0] for row in rows]
