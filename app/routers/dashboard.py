# =============================================================================
# app/routers/dashboard.py - Dashboard KPI Endpoint
# =============================================================================

from fastapi import APIRouter

from app.dependencies import DatabaseDep
from core.models.dashboard import KPISummary
from core.services.dashboard_service import DashboardService

router = APIRouter()


@router.get("/kpis", response_model=KPISummary)
async def get_dashboard_kpis(db: DatabaseDep):
    """
    Headline EMAE, IPC, dollar and country risk values.

    The four are fetched concurrently. If any of them fails every field is
    null; the endpoint itself never fails.
    """
    return await DashboardService(db).get_kpis()
