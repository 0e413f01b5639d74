"""SQLAlchemy models."""

from tableside.models.user import User
from tableside.models.menu import MenuItem, MenuCategory
from tableside.models.inventory import InventoryItem
from tableside.models.tables import DiningTable
from tableside.models.orders import Order, MealBooking, OrderStatus, BookingStatus
from tableside.models.staff import StaffMember, Role, Permission
from tableside.models.review import Review

__all__ = [
    "User",
    "MenuItem",
    "MenuCategory",
    "InventoryItem",
    "DiningTable",
    "Order",
    "MealBooking",
    "OrderStatus",
    "BookingStatus",
    "StaffMember",
    "Role",
    "Permission",
    "Review",
]
