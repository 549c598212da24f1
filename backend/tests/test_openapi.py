from fastapi.testclient import TestClient
from main import app

client = TestClient(app)


def test_openapi_contains_quote_routes():
    spec = client.get("/openapi.json")
    assert spec.status_code == 200
    body = spec.json()
    assert body["info"]["title"] == "Lead Quote Pricing API"
    paths = body.get("paths", {})
    assert "/api/v1/quotes/estimate" in paths
    assert "/api/v1/quotes/calculate" in paths
    assert "/api/v1/distance" in paths


def test_quote_out_schema_exposes_drive_time_label():
    spec = client.get("/openapi.json")
    props = spec.json()["components"]["schemas"]["QuoteOut"]["properties"]
    assert "driveTimeLabel" in props
    assert "driveTime" in props
