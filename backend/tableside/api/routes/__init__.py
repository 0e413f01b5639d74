"""API routes."""

from fastapi import APIRouter

from tableside.api.routes import (
    auth, menu, inventory, orders, bookings, tables,
    staff, roles, permissions, reviews, reports, dashboard, support,
)

api_router = APIRouter()

# Core routes
api_router.include_router(auth.router, prefix="/auth", tags=["auth"])

# Catalog
api_router.include_router(menu.router, prefix="/menu", tags=["menu"])
api_router.include_router(inventory.router, prefix="/inventory", tags=["inventory"])

# Ordering
api_router.include_router(orders.router, prefix="/orders", tags=["orders"])
api_router.include_router(bookings.router, prefix="/bookings", tags=["bookings"])
api_router.include_router(tables.router, prefix="/tables", tags=["tables"])

# Staff management
api_router.include_router(staff.router, prefix="/staff", tags=["staff"])
api_router.include_router(roles.router, prefix="/roles", tags=["roles"])
api_router.include_router(permissions.router, prefix="/permissions", tags=["roles"])

# Feedback and analytics
api_router.include_router(reviews.router, prefix="/reviews", tags=["reviews"])
api_router.include_router(reports.router, prefix="/reports", tags=["reports"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
api_router.include_router(support.router, prefix="/support", tags=["support"])
