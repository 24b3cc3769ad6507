# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains framework-agnostic business logic:
# - models/: Pydantic schemas for indicator readings and API payloads
# - services/: Query logic per indicator, calendar, events, users, refresh
#
# Code in this package should NOT import from FastAPI or Celery.
# =============================================================================
