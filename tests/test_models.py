# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for the API schemas:
# - Valid data is accepted and parsed correctly
# - Invalid data raises ValidationError
# - Default values work as expected
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

import pytest
from pydantic import ValidationError

from core.models import (
    DOLLAR_TYPE_MAPPING,
    ClerkEvent,
    DollarType,
    EventCreate,
    FavoriteRequest,
    FavoriteToggleResponse,
    KPISummary,
    Pagination,
    RiskRangeType,
    SectorBreakdown,
    SeriesResponse,
)


class TestPagination:
    """Tests for Pagination.build."""

    def test_exact_pages(self):
        page = Pagination.build(page=1, limit=100, total_items=200)
        assert page.total_pages == 2
        assert page.has_more is True

    def test_last_page(self):
        page = Pagination.build(page=3, limit=100, total_items=250)
        assert page.total_pages == 3
        assert page.has_more is False

    def test_empty(self):
        page = Pagination.build(page=1, limit=100, total_items=0)
        assert page.total_pages == 0
        assert page.has_more is False

    def test_page_must_be_positive(self):
        with pytest.raises(ValidationError):
            Pagination(page=0, limit=10)


class TestEnvelopes:

    def test_series_defaults(self):
        response = SeriesResponse()
        assert response.data == []
        assert response.metadata == {}
        assert response.pagination is None

    def test_empty_kpi_summary(self):
        assert KPISummary().model_dump() == {"emae": None, "ipc": None, "dollar": None, "risk_country": None}

    def test_empty_breakdown(self):
        assert SectorBreakdown().model_dump() == {"date": None, "sectors": {}}


class TestDollarTypes:

    def test_mapping_covers_every_type(self):
        assert set(DOLLAR_TYPE_MAPPING.values()) == set(DollarType)

    def test_upstream_names(self):
        assert DOLLAR_TYPE_MAPPING["contadoconliqui"] is DollarType.CCL
        assert DOLLAR_TYPE_MAPPING["bolsa"] is DollarType.MEP


class TestRequests:

    def test_favorite_request_requires_type(self):
        with pytest.raises(ValidationError):
            FavoriteRequest(indicator_type="")

    def test_favorite_request_id_optional(self):
        assert FavoriteRequest(indicator_type="dollar").indicator_id is None

    def test_toggle_response_defaults(self):
        response = FavoriteToggleResponse(authenticated=False)
        assert response.is_favorite is False
        assert response.indicator_type is None

    def test_event_create_requires_name(self):
        with pytest.raises(ValidationError):
            EventCreate(name="")

    def test_clerk_event_data_defaults(self):
        assert ClerkEvent(type="user.deleted").data == {}

    def test_risk_range_values(self):
        assert RiskRangeType("last_30_days") is RiskRangeType.LAST_30_DAYS
        with pytest.raises(ValueError):
            RiskRangeType("forever")
