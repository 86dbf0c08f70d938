"""Integration tests for POST /shipping/quotes via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from shared.errors import register_error_handlers
from shipping.api import shipping_router
from shipping.geo import set_geo


@pytest.fixture()
def client(geo):
    set_geo(geo)
    app = FastAPI()
    app.include_router(shipping_router)
    register_error_handlers(app)
    return TestClient(app)


class TestQuoteEndpoint:
    def test_quote(self, client):
        response = client.post(
            "/shipping/quotes",
            json={
                "destination_city": "Colombo",
                "lines": [
                    {"origin_city": "Jaffna", "product_id": "p-1", "seller_email": "a@farm.lk"},
                    {"origin_city": "Negombo", "product_id": "p-2", "seller_email": "b@farm.lk"},
                    {"origin_city": "negombo", "product_id": "p-3", "seller_email": "c@farm.lk"},
                ],
            },
        )
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1550.0
        assert data["currency"] == "LKR"
        assert len(data["quotes"]) == 2

    def test_missing_destination_is_400(self, client):
        response = client.post("/shipping/quotes", json={"lines": [{"origin_city": "Kandy"}]})
        assert response.status_code == 400
        assert response.json()["error"]["type"] == "invalid_shipping_input"

    def test_geo_failure_is_502_with_retry_after(self, client, geo):
        geo.fail_city("Kandy")
        response = client.post(
            "/shipping/quotes",
            json={"destination_city": "Colombo", "lines": [{"origin_city": "Kandy"}]},
        )
        assert response.status_code == 502
        assert response.headers["Retry-After"] == "30"
        error = response.json()["error"]
        assert error["type"] == "shipping_computation_failed"
        assert error["retry_after_seconds"] == 30
