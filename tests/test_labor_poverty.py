# =============================================================================
# tests/test_labor_poverty.py - Labor Market & Poverty Tests
# =============================================================================

import pytest

from app.exceptions import IndicatorNotFoundError, InvalidQueryError
from core.models.indicators import NATIONAL_REGION, PovertyComparisonType
from core.services.labor_market_service import LABOR_TABLE, LaborMarketService, period_sort_key
from core.services.poverty_service import POVERTY_TABLE, SERIES_SOURCES, PovertyService


class TestLaborMarket:

    def test_latest_defaults_to_national_totals(self, db):
        db.queue(LABOR_TABLE, [{
            "date": "2024-01-01",
            "period": "T1 2024",
            "region": NATIONAL_REGION,
            "age_group": "Total",
            "gender": "Total",
            "unemployment_rate": "7.7",
            "activity_rate": 48.0,
        }])

        result = LaborMarketService(db).get_latest()

        assert db.queries_for(LABOR_TABLE)[0].called("eq") == [
            ("region", NATIONAL_REGION),
            ("age_group", "Total"),
            ("gender", "Total"),
        ]
        assert result.data.unemployment_rate == 7.7
        assert result.data.employment_rate == 0
        assert result.metadata["demographics"] == {"age_group": "Total", "gender": "Total"}

    def test_latest_not_found(self, client, db):
        db.queue(LABOR_TABLE, [])
        response = client.get("/api/labor-market/latest", params={"gender": "Mujeres"})
        assert response.status_code == 404

    def test_series_filters(self, db):
        db.queue(LABOR_TABLE, [], count=0)
        LaborMarketService(db).get_series(region="GBA", gender="Varones")
        assert db.queries_for(LABOR_TABLE)[0].called("eq") == [("region", "GBA"), ("gender", "Varones")]

    def test_period_sort_key(self):
        periods = ["T1 2024", "T4 2023", "T2 2023", "Anual 2020"]
        assert sorted(periods, key=period_sort_key) == ["Anual 2020", "T2 2023", "T4 2023", "T1 2024"]

    def test_metadata(self, client, db):
        db.queue(LABOR_TABLE, [
            {"date": "2024-01-01", "period": "T1 2024", "region": NATIONAL_REGION, "age_group": "Total",
             "gender": "Total", "unemployment_rate": 7.7, "updated_at": "2024-06-20T10:00:00"},
            {"date": "2023-10-01", "period": "T4 2023", "region": "GBA", "age_group": "14-29",
             "gender": "Mujeres", "unemployment_rate": 5.9, "updated_at": "2024-03-21T10:00:00"},
            {"date": "2023-10-01", "period": "T4 2023", "region": "GBA", "age_group": "Total",
             "gender": None, "unemployment_rate": None, "updated_at": None},
        ])

        response = client.get("/api/labor-market/metadata")

        assert response.status_code == 200
        assert "max-age=21600" in response.headers["cache-control"]
        body = response.json()
        assert body["regions"] == ["GBA", NATIONAL_REGION]
        assert body["age_groups"] == ["14-29", "Total"]
        assert body["genders"] == ["Mujeres", "Total"]
        assert "unemployment_rate" in body["indicators"]
        assert body["date_range"]["first_date"] == "2023-10-01"
        assert body["date_range"]["last_date"] == "2024-01-01"
        assert body["period_range"] == {"first": "T4 2023", "last": "T1 2024"}
        assert body["metadata"]["total_records"] == 2
        assert body["metadata"]["last_updated"] == "2024-06-20T10:00:00"

    def test_metadata_empty_table(self, db):
        db.queue(LABOR_TABLE, [])
        with pytest.raises(IndicatorNotFoundError):
            LaborMarketService(db).get_metadata()


class TestPoverty:

    def test_latest_national_with_regional(self, db):
        db.queue(POVERTY_TABLE, [{"date": "2024-01-01", "period": "S1 2024", "region": NATIONAL_REGION}])
        db.queue(POVERTY_TABLE, [{"region": "GBA"}, {"region": "Noreste"}])

        result = PovertyService(db).get_latest()

        assert result.data["national"]["region"] == NATIONAL_REGION
        assert len(result.data["regional"]) == 2
        assert result.metadata["regions_count"] == 2
        assert db.queries_for(POVERTY_TABLE)[1].called("neq") == [("region", NATIONAL_REGION)]

    def test_latest_single_region(self, db):
        db.queue(POVERTY_TABLE, [{"date": "2024-01-01", "region": "GBA"}])
        result = PovertyService(db).get_latest("GBA")
        assert result.metadata["region"] == "GBA"

    def test_latest_not_found(self, db):
        db.queue(POVERTY_TABLE, [])
        with pytest.raises(IndicatorNotFoundError):
            PovertyService(db).get_latest()

    def test_series_single_indicator(self, db):
        db.queue(POVERTY_TABLE, [
            {"date": "2023-01-01", "period": "S1 2023", "poverty_rate_persons": 40.1},
            {"date": "2023-07-01", "period": "S2 2023", "poverty_rate_persons": None},
        ])

        result = PovertyService(db).get_series(indicator="poverty_rate_persons")

        assert [row["value"] for row in result.data] == [40.1]
        assert result.metadata["date_range"] == {"start": "2023-01-01", "end": "2023-07-01"}
        assert db.queries_for(POVERTY_TABLE)[0].called("in_") == [("cuadro_source", SERIES_SOURCES)]

    def test_series_invalid_indicator_is_400(self, client):
        response = client.get("/api/poverty/series", params={"indicator": "gini"})
        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_QUERY"

    def test_series_invalid_indicator_service(self, db):
        with pytest.raises(InvalidQueryError):
            PovertyService(db).get_series(indicator="gini")


class TestPovertyComparison:

    def test_regional_uses_latest_period_and_ranks(self, db):
        db.queue(POVERTY_TABLE, [{"period": "S2 2023"}])
        db.queue(POVERTY_TABLE, [
            {"region": "Noreste", "period": "S2 2023", "date": "2023-12-31", "poverty_rate_persons": 48.4},
            {"region": NATIONAL_REGION, "period": "S2 2023", "date": "2023-12-31", "poverty_rate_persons": 41.7},
            {"region": "Patagonia", "period": "S2 2023", "date": "2023-12-31", "poverty_rate_persons": 36.0},
        ])

        result = PovertyService(db).compare()

        latest_query, comparison_query = db.queries_for(POVERTY_TABLE)
        assert latest_query.called("order") == [("date",)]
        assert comparison_query.called("eq") == [("period", "S2 2023")]
        assert comparison_query.called("order") == [("poverty_rate_persons",)]
        assert [row["poverty_rank"] for row in result.data] == [1, 2, 3]
        assert [row["above_national"] for row in result.data] == [True, False, False]
        assert result.metadata["national_average"] == 41.7
        assert result.metadata["regions_count"] == 3

    def test_regional_with_explicit_period(self, db):
        db.queue(POVERTY_TABLE, [])

        result = PovertyService(db).compare(period="S1 2023")

        assert len(db.queries_for(POVERTY_TABLE)) == 1
        assert result.data == []
        assert result.metadata["national_average"] is None

    def test_temporal_groups_by_region(self, db):
        db.queue(POVERTY_TABLE, [
            {"region": "GBA", "date": "2023-06-30"},
            {"region": NATIONAL_REGION, "date": "2023-06-30"},
            {"region": "GBA", "date": "2023-12-31"},
        ])

        result = PovertyService(db).compare(PovertyComparisonType.TEMPORAL, regions=f"GBA,{NATIONAL_REGION}")

        assert db.queries_for(POVERTY_TABLE)[0].called("in_") == [
            ("region", ["GBA", NATIONAL_REGION]),
            ("cuadro_source", SERIES_SOURCES),
        ]
        assert [row["date"] for row in result.data["GBA"]] == ["2023-06-30", "2023-12-31"]
        assert len(result.data[NATIONAL_REGION]) == 1
        assert result.metadata["date_range"] == {"start": "2023-06-30", "end": "2023-12-31"}

    def test_temporal_route_defaults_to_national(self, client, db):
        db.queue(POVERTY_TABLE, [])

        body = client.get("/api/poverty/comparison", params={"type": "temporal"}).json()

        assert body["data"] == {NATIONAL_REGION: []}
        assert body["metadata"]["regions"] == [NATIONAL_REGION]

    def test_unknown_type_is_422(self, client):
        response = client.get("/api/poverty/comparison", params={"type": "yearly"})
        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"
