# =============================================================================
# tests/test_ipc.py - IPC Service & Route Tests
# =============================================================================

import pytest

from app.exceptions import IndicatorNotFoundError
from core.services.ipc_service import IPC_VIEW, IpcService, months_before, normalize_region


def ipc_row(day: str, monthly: float | None, code: str = "GENERAL", region: str = "Nacional") -> dict:
    return {
        "date": day,
        "component": "Nivel general",
        "component_code": code,
        "component_type": "GENERAL",
        "index_value": 5000.0,
        "region": region,
        "monthly_pct_change": monthly,
        "yearly_pct_change": 280.0,
        "accumulated_pct_change": 70.0,
    }


class TestHelpers:

    @pytest.mark.parametrize("value,expected", [
        (None, "Nacional"),
        ("gba", "GBA"),
        ("GBA", "GBA"),
        ("patagonia", "Patagonia"),
        ("NOROESTE", "Noroeste"),
    ])
    def test_normalize_region(self, value, expected):
        assert normalize_region(value) == expected

    def test_months_before(self):
        assert months_before("2024-03-01", 1) == "2024-02-01"
        assert months_before("2024-01-15", 2) == "2023-11-01"


class TestLatest:
    """Tests for IpcService.get_latest."""

    def test_monthly_change_variation(self, db):
        # Arrange: latest, previous month, month before previous
        db.queue(IPC_VIEW, [ipc_row("2024-03-01", 11.0)])
        db.queue(IPC_VIEW, [ipc_row("2024-02-01", 13.2)])
        db.queue(IPC_VIEW, [ipc_row("2024-01-01", 20.6)])

        # Act
        result = IpcService(db).get_latest()

        # Assert
        assert result.data.monthly_change_variation == pytest.approx(-2.2)
        assert result.metadata == {"region": "Nacional", "component_code": "GENERAL"}
        previous_query = db.queries_for(IPC_VIEW)[1]
        assert ("date", "2024-02-01") in previous_query.called("eq")

    def test_variation_zero_without_two_prior_months(self, db):
        db.queue(IPC_VIEW, [ipc_row("2024-03-01", 11.0)])
        db.queue(IPC_VIEW, [ipc_row("2024-02-01", 13.2)])
        db.queue(IPC_VIEW, [])

        result = IpcService(db).get_latest()

        assert result.data.monthly_change_variation == 0

    def test_category_and_region_are_normalized(self, db):
        db.queue(IPC_VIEW, [ipc_row("2024-03-01", 8.0, code="ALIMENTOS", region="GBA")])

        IpcService(db).get_latest("alimentos", "gba")

        latest_query = db.queries_for(IPC_VIEW)[0]
        assert latest_query.called("eq") == [("component_code", "ALIMENTOS"), ("region", "GBA")]

    def test_not_found(self, db):
        db.queue(IPC_VIEW, [])
        with pytest.raises(IndicatorNotFoundError):
            IpcService(db).get_latest("NOPE")


class TestSeries:

    def test_without_variations(self, db):
        db.queue(IPC_VIEW, [ipc_row("2024-03-01", 11.0)], count=1)

        result = IpcService(db).get_series(include_variations=False)

        assert "monthly_pct_change" not in result.data[0]
        assert result.data[0]["category_code"] == "GENERAL"
        assert result.metadata["include_variations"] is False

    def test_month_year_and_ordering(self, db):
        db.queue(IPC_VIEW, [], count=0)

        IpcService(db).get_series(month=3, year=2024, component_type="rubro")

        query = db.queries_for(IPC_VIEW)[0]
        assert ("month", 3) in query.called("eq")
        assert ("year", 2024) in query.called("eq")
        assert ("component_type", "RUBRO") in query.called("eq")
        assert query.kwargs_of("order") == [{"desc": True}]

    def test_route(self, client, db):
        db.queue(IPC_VIEW, [ipc_row("2024-03-01", 11.0)], count=1)
        body = client.get("/api/ipc", params={"region": "patagonia"}).json()
        assert body["metadata"]["filtered_by"]["region"] == "Patagonia"
        assert body["pagination"]["total_items"] == 1


class TestMetadata:

    def test_components_and_regions(self, db):
        db.queue(IPC_VIEW, [
            {"component": "Nivel general", "component_code": "GENERAL", "component_type": "GENERAL", "region": "Nacional"},
            {"component": "Nivel general", "component_code": "GENERAL", "component_type": "GENERAL", "region": "GBA"},
            {"component": "Alimentos", "component_code": "ALIMENTOS", "component_type": "RUBRO", "region": "GBA"},
        ])

        metadata = IpcService(db).get_metadata()

        assert metadata.regions == ["GBA", "Nacional"]
        assert {"type": "RUBRO", "code": "ALIMENTOS", "name": "Alimentos"} in metadata.components
        assert len(metadata.components) == 2

    def test_categories_empty_region(self, db):
        db.queue(IPC_VIEW, [])
        result = IpcService(db).get_categories("cuyo")
        assert result.data == []
        assert result.metadata["region"] == "Cuyo"
