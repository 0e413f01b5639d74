"""Admin dashboard route."""

from fastapi import APIRouter

from tableside.core.rbac import RequireStaff
from tableside.db.session import DbSession
from tableside.schemas.reports import DashboardResponse
from tableside.services import dashboard_service

router = APIRouter()


@router.get("/", response_model=DashboardResponse)
def get_dashboard(db: DbSession, current_user: RequireStaff):
    return dashboard_service.build_dashboard(db)
