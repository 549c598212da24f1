import pytest
from fastapi.testclient import TestClient

from leadquote.api.dependencies import get_provider
from leadquote.main import app
from leadquote.services.distance_service import StaticDistanceProvider


@pytest.fixture
def client():
    app.dependency_overrides[get_provider] = lambda: StaticDistanceProvider(25, 40)
    yield TestClient(app)
    app.dependency_overrides.clear()


def body(calculator, form_data, **extra):
    return {"formData": form_data, "calculator": calculator, **extra}


def test_estimate_applies_min_charge(client, fence_calculator):
    res = client.post(
        "/api/v1/quotes/estimate",
        json=body(fence_calculator, {"service": "Wood Fence Installation", "linearFeet": 10}),
    )
    assert res.status_code == 200
    data = res.json()
    assert data["result"]["basePrice"] == 250
    assert data["result"]["finalPrice"] == 500
    assert data["result"]["breakdown"]["finalPrice"] == 500
    assert data["result"]["breakdown"]["minChargeApplied"] is True
    assert data["display"] == {"format": "fixed", "text": "$500", "amount": 500, "min": None, "max": None}


def test_estimate_without_service_is_empty(client, fence_calculator):
    res = client.post("/api/v1/quotes/estimate", json=body(fence_calculator, {"linearFeet": 40}))
    assert res.status_code == 200
    result = res.json()["result"]
    assert result["finalPrice"] == 0
    assert result["modifiers"] == []
    assert result["breakdown"]["baseUnit"] == ""


def test_calculate_includes_drive_time(client, fence_calculator):
    calculator = {
        **fence_calculator,
        "driveTime": {
            "enabled": True,
            "yardAddress": "100 Yard Rd",
            "addressField": "address",
            "pricing": {"type": "perMile", "rate": 2, "freeRadius": 10},
        },
        "display": {"format": "range", "rangeMultiplier": 1.3},
    }
    res = client.post(
        "/api/v1/quotes/calculate",
        json=body(calculator, {"service": "Wood Fence Installation", "linearFeet": 30, "address": "9 Elm St"}),
    )
    assert res.status_code == 200
    data = res.json()
    assert data["result"]["finalPrice"] == 780
    assert data["result"]["modifiers"][-1]["id"] == "drive_time"
    assert data["driveTime"]["cost"] == 30
    assert data["driveTime"]["withinFreeRadius"] is False
    assert data["driveTimeLabel"] == "$30"
    assert data["display"]["min"] == 780
    assert data["display"]["max"] == 1014
    assert data["display"]["text"] == "$780 - $1,014"


@pytest.mark.parametrize("feet", [1e30, "1e999999"])
def test_estimate_with_oversized_quantity_still_prices(client, fence_calculator, feet):
    calculator = {**fence_calculator, "display": {"format": "range"}}
    res = client.post(
        "/api/v1/quotes/estimate",
        json=body(calculator, {"service": "Wood Fence Installation", "linearFeet": feet}),
    )
    assert res.status_code == 200
    data = res.json()
    assert data["result"]["basePrice"] == 0
    assert data["result"]["finalPrice"] == 500
    assert data["display"]["text"] == "$500 - $600"


def test_display_format_override(client, fence_calculator):
    res = client.post(
        "/api/v1/quotes/estimate",
        json=body(fence_calculator, {"service": "Wood Fence Installation", "linearFeet": 30}, displayFormat="minimum"),
    )
    assert res.status_code == 200
    assert res.json()["display"]["text"] == "Starting at $750"


def test_unknown_display_format_is_rejected(client, fence_calculator):
    res = client.post(
        "/api/v1/quotes/estimate",
        json=body(fence_calculator, {"service": "Wood Fence Installation"}, displayFormat="ballpark"),
    )
    assert res.status_code == 422
    detail = res.json()["detail"]
    assert detail["message"] == "Unknown display format"
    assert "display_format" in detail["field_errors"]


def test_missing_calculator_is_validation_error(client):
    res = client.post("/api/v1/quotes/estimate", json={"formData": {"service": "x"}})
    assert res.status_code == 422
    assert any(err["loc"][-1] == "calculator" for err in res.json()["detail"])


def test_distance_endpoint(client):
    res = client.get("/api/v1/distance", params={"origin": "100 Yard Rd", "destination": "9 Elm St"})
    assert res.status_code == 200
    assert res.json() == {"distanceMiles": 25, "durationMinutes": 40, "status": "OK"}


def test_healthz(client):
    assert client.get("/healthz").json() == {"status": "ok"}
