import copy

import httpx
import pytest


CURRENT_PAYLOAD = {
    "latitude": -23.5,
    "longitude": -46.625,
    "timezone": "America/Sao_Paulo",
    "current": {
        "time": "2025-10-30T14:00",
        "interval": 900,
        "temperature_2m": 24.5,
        "relative_humidity_2m": 68,
        "precipitation": 0.0,
        "rain": 0.0,
        "weather_code": 2,
        "wind_speed_10m": 11.4,
        "wind_direction_10m": 140,
    },
}

FORECAST_PAYLOAD = {
    "latitude": -23.5,
    "longitude": -46.625,
    "timezone": "America/Sao_Paulo",
    "daily": {
        "time": ["2025-10-30", "2025-10-31", "2025-11-01", "2025-11-02", "2025-11-03"],
        "temperature_2m_max": [27.3, 25.5, 22.1, 23.0, 26.8],
        "temperature_2m_min": [17.2, 16.9, 15.4, 15.0, 16.1],
        "precipitation_sum": [0.0, 0.4, 12.6, 3.1, 0.0],
        "precipitation_probability_max": [10, 35, 80, 60, 5],
        "weather_code": [2, 3, 63, 61, 1],
    },
}


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def current_payload():
    return copy.deepcopy(CURRENT_PAYLOAD)


@pytest.fixture
def forecast_payload():
    return copy.deepcopy(FORECAST_PAYLOAD)


@pytest.fixture
def stub_open_meteo(monkeypatch, current_payload, forecast_payload):
    """
    Replace httpx.AsyncClient.get with a fake that answers both Open-Meteo calls.

    Returns a dict that tests can edit to change status codes / bodies, and
    which records every request made.
    """
    stub = {
        "current_status": 200,
        "current_body": current_payload,
        "forecast_status": 200,
        "forecast_body": forecast_payload,
        "calls": [],
    }

    async def fake_get(self, url, params=None, headers=None, **kwargs):
        params = params or {}
        stub["calls"].append(params)
        request = httpx.Request("GET", url, params=params)
        if "daily" in params:
            status, body = stub["forecast_status"], stub["forecast_body"]
        else:
            status, body = stub["current_status"], stub["current_body"]
        if isinstance(body, (bytes, str)):
            return httpx.Response(status, content=body, request=request)
        return httpx.Response(status, json=body, request=request)

    monkeypatch.setattr(httpx.AsyncClient, "get", fake_get)
    return stub
