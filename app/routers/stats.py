# =============================================================================
# app/routers/stats.py - Landing Page Counters
# =============================================================================
# Fixed values shown on the landing page; they are not measured.
# =============================================================================

from fastapi import APIRouter

from core.models.dashboard import ApiStats

router = APIRouter()

API_STATS = ApiStats(
    dataPoints=10_500_000,
    apiUptime=99.5,
    indicatorsCount=11,
    updateTime=5,
)


@router.get("/stats", response_model=ApiStats)
async def get_stats():
    return API_STATS
