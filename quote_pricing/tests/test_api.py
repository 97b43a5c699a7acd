"""
Tests: HTTP surface of the pricing engine.

Run with:
    pytest quote_pricing/tests/test_api.py -v
"""

import pytest
from fastapi.testclient import TestClient

from quote_pricing.api import create_app


@pytest.fixture
def client():
    return TestClient(create_app())


def _quote_payload() -> dict:
    return {
        "mode": "phased",
        "phases": [{"duration_months": 12, "items": [
            {"sku": "SKU-A", "list_price": 100.0, "quantity": 50, "term_months": 12},
        ]}],
        "snapshot": {
            "ladders": {"SKU-A": {"steps": [
                {"threshold": 1, "discount_pct": 0},
                {"threshold": 50, "discount_pct": 10},
            ]}},
            "term_table": {"anchors": [
                {"term_months": 1, "discount_pct": 0},
                {"term_months": 12, "discount_pct": 10},
            ]},
            "environments": {"factors": {"production": 1.0}},
        },
    }


class TestHealth:
    def test_health(self, client):
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"


class TestQuote:
    def test_phased_quote(self, client):
        resp = client.post("/api/pricing/quote", json=_quote_payload())
        assert resp.status_code == 200
        body = resp.json()
        item = body["phases"][0]["line_items"][0]
        assert item["unit_price"] == 80.0
        assert item["monthly_total"] == 4000.0
        assert item["annual_total"] == 48000.0
        assert body["subtotal_annual"] == 48000.0

    def test_time_series_quote(self, client):
        resp = client.post("/api/pricing/quote", json={
            "mode": "time_series",
            "usage": [10, 20, 30, 40, 50],
            "pricing_model": {"kind": "fixed_commitment", "unit_rate": 1.0, "anchor": "peak"},
        })
        assert resp.status_code == 200
        assert resp.json()["billed_monthly"] == 50.0

    def test_unknown_environment_is_configuration_error(self, client):
        payload = _quote_payload()
        payload["phases"][0]["items"][0]["environment"] = "sandbox"
        resp = client.post("/api/pricing/quote", json=payload)
        assert resp.status_code == 422
        assert resp.json()["error"] == "configuration_error"

    def test_non_positive_quantity_is_invalid_input(self, client):
        payload = _quote_payload()
        payload["phases"][0]["items"][0]["quantity"] = 0
        resp = client.post("/api/pricing/quote", json=payload)
        assert resp.status_code == 400
        assert resp.json()["error"] == "invalid_input"

    def test_unknown_mode(self, client):
        resp = client.post("/api/pricing/quote", json={"mode": "barter"})
        assert resp.status_code == 422
        assert resp.json()["error"] == "validation_error"


class TestStatisticsAndModels:
    def test_statistics(self, client):
        resp = client.post("/api/pricing/statistics", json={"usage": [10, 20, 30, 40, 50]})
        assert resp.status_code == 200
        body = resp.json()
        assert body["peak"] == 50
        assert body["p90"] == pytest.approx(46.0)

    def test_empty_usage(self, client):
        resp = client.post("/api/pricing/statistics", json={"usage": []})
        assert resp.status_code == 400
        assert "empty" in resp.json()["detail"]

    def test_compare_models(self, client):
        resp = client.post("/api/pricing/compare-models", json={
            "usage": [10, 20, 30, 40, 50], "unit_rate": 2.0, "anchor": "average",
        })
        assert resp.status_code == 200
        assert resp.json()["savings"] == pytest.approx(0.0)

    def test_perpetual_offer_uses_configured_defaults(self, client):
        resp = client.post("/api/pricing/perpetual-offer", json={"recurring_monthly": 100.0})
        assert resp.status_code == 200
        assert resp.json()["total_upfront"] == pytest.approx(5880.0)

    def test_compare_models_custom_percentile(self, client):
        resp = client.post("/api/pricing/compare-models", json={
            "usage": [10, 20, 30, 40, 50], "unit_rate": 2.0, "anchor": "custom", "percentile": 25,
        })
        assert resp.status_code == 200
        assert resp.json()["fixed_commitment"]["committed_quantity"] == pytest.approx(20.0)


class TestLadderBuilder:
    def test_per_double_ladder(self, client):
        resp = client.post("/api/pricing/ladder", json={
            "base_quantity": 1, "max_quantity": 8, "steps": 4, "per_double_discount_pct": 10,
        })
        assert resp.status_code == 200
        steps = resp.json()["steps"]
        assert [s["threshold"] for s in steps] == pytest.approx([1, 2, 4, 8])
        assert [s["discount_pct"] for s in steps] == pytest.approx([0, 10, 19, 27.1])

    def test_built_ladder_prices_a_quote(self, client):
        ladder = client.post("/api/pricing/ladder", json={
            "base_quantity": 1, "max_quantity": 100, "steps": 3, "per_double_discount_pct": 5,
        }).json()
        payload = _quote_payload()
        payload["snapshot"]["ladders"]["SKU-A"] = ladder
        resp = client.post("/api/pricing/quote", json=payload)
        assert resp.status_code == 200
        # 50 units sit on the 10-unit rung
        assert resp.json()["phases"][0]["line_items"][0]["volume_discount_pct"] > 0

    def test_bad_parameters(self, client):
        resp = client.post("/api/pricing/ladder", json={
            "base_quantity": 10, "max_quantity": 5, "steps": 3, "per_double_discount_pct": 5,
        })
        assert resp.status_code == 422
        assert resp.json()["error"] == "configuration_error"
