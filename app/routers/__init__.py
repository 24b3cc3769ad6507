# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - emae.py, ipc.py, dollar.py, labor_market.py, riesgo_pais.py, poverty.py:
#   Indicator data endpoints
# - calendar.py, events.py: Release calendar and prediction events
# - stats.py, dashboard.py: Landing page counters and KPI summary
# - favorites.py: Per-user favorite indicators
# - user.py: Per-user API key
# - webhooks.py: Clerk user webhook and its admin self-test
# - cron.py, tasks.py: Scheduled refresh triggers and task status
# - health.py: Health check endpoints
# - not_found.py: Responder for unknown /api paths
# - seo.py: robots.txt and sitemap.xml
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import emae
from . import ipc
from . import dollar
from . import labor_market
from . import riesgo_pais
from . import poverty
from . import calendar
from . import events
from . import stats
from . import dashboard
from . import favorites
from . import user
from . import webhooks
from . import cron
from . import tasks
from . import health
from . import not_found
from . import seo

__all__ = [
    "emae",
    "ipc",
    "dollar",
    "labor_market",
    "riesgo_pais",
    "poverty",
    "calendar",
    "events",
    "stats",
    "dashboard",
    "favorites",
    "user",
    "webhooks",
    "cron",
    "tasks",
    "health",
    "not_found",
    "seo",
]
