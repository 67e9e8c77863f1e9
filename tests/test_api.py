from __future__ import annotations

from typing import Iterable

import pytest
from fastapi.testclient import TestClient


@pytest.fixture(scope="module")
def api_client() -> Iterable[TestClient]:
    from suncalc_api import app

    with TestClient(app) as client:
        yield client


def test_health_endpoint(api_client: TestClient) -> None:
    response = api_client.get("/health")
    assert response.status_code == 200
    payload = response.json()
    assert payload["ok"] is True
    assert payload["version"]


def test_sun_times_endpoint(api_client: TestClient) -> None:
    response = api_client.get(
        "/sun/times",
        params={"lat": 51.5, "lon": -0.1, "datetime": "2005-06-01T12:00:00Z"},
    )
    assert response.status_code == 200
    times = response.json()["times"]
    assert times["sunrise"].startswith("2005-06-01T03:50:12")
    assert times["sunrise"].endswith("Z")
    assert times["sunset"].startswith("2005-06-01T20:09:15")
    assert times["night"] is None
    assert times["solarNoon"] is not None


def test_sun_times_with_offset(api_client: TestClient) -> None:
    response = api_client.get(
        "/sun/times",
        params={"lat": 51.5, "lon": -0.1, "datetime": "2005-06-01T12:00:00Z", "offset_hours": 1},
    )
    assert response.status_code == 200
    assert response.json()["times"]["sunrise"].startswith("2005-06-01T04:50:12")


def test_sun_position_endpoint(api_client: TestClient) -> None:
    response = api_client.get(
        "/sun/position",
        params={"lat": 51.5, "lon": -0.1, "datetime": "2005-06-01T12:00:00"},
    )
    assert response.status_code == 200
    payload = response.json()
    assert payload["altitude_deg"] == pytest.approx(60.593709, abs=1e-4)


def test_moon_endpoints(api_client: TestClient) -> None:
    params = {"lat": 50.5, "lon": 30.5, "datetime": "2013-03-04T00:00:00Z"}
    position = api_client.get("/moon/position", params=params)
    assert position.status_code == 200
    assert position.json()["distance_km"] > 350000

    times = api_client.get("/moon/times", params={**params, "utc": True})
    assert times.status_code == 200
    payload = times.json()
    assert payload["rise"].startswith("2013-03-04T23:")
    assert payload["always_up"] is False

    illumination = api_client.get("/moon/illumination", params={"datetime": "2013-03-05T00:00:00Z"})
    assert illumination.status_code == 200
    assert illumination.json()["fraction"] == pytest.approx(0.4848, abs=1e-3)


def test_validation_error(api_client: TestClient) -> None:
    response = api_client.get(
        "/sun/times",
        params={"lat": 95, "lon": 0, "datetime": "2025-10-21T00:00:00Z"},
    )
    assert response.status_code == 422
    payload = response.json()
    assert payload["code"] == "validation_error"
    assert payload["ok"] is False


def test_offset_out_of_range(api_client: TestClient) -> None:
    response = api_client.get(
        "/sun/times",
        params={"lat": 10, "lon": 0, "datetime": "2025-10-21T00:00:00Z", "offset_hours": 30},
    )
    assert response.status_code == 422


@pytest.mark.parametrize("offset", [24, -24])
def test_offset_at_full_day_rejected(api_client: TestClient, offset: int) -> None:
    response = api_client.get(
        "/sun/times",
        params={"lat": 51.5, "lon": -0.1, "datetime": "2005-06-01T12:00:00Z", "offset_hours": offset},
    )
    assert response.status_code == 422
    assert response.json()["code"] == "validation_error"


def test_library_argument_error_returns_400(api_client: TestClient) -> None:
    response = api_client.get(
        "/sun/times",
        params={"lat": 51.5, "lon": -0.1, "datetime": "2005-06-01T12:00:00Z", "height": "inf"},
    )
    assert response.status_code == 400
    payload = response.json()
    assert payload["ok"] is False
    assert payload["code"] == "http_400"
    assert "height" in payload["error"]
