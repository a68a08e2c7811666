# ABOUTME: Shared test fixtures for the weather dashboard test suite.
# ABOUTME: Provides sample upstream payloads, test settings and mock HTTP client factories.

from unittest.mock import AsyncMock

import httpx
import pytest

from weather_dashboard.config import Settings
from weather_dashboard.deps import WeatherDeps


def make_response(json_data, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code=status_code, json=json_data, request=httpx.Request("GET", "https://test"))


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(api_key="test-key", static_dir=tmp_path)


@pytest.fixture
def mock_client():
    """Factory for an AsyncMock httpx client answering every GET with the given JSON."""

    def _mock_client(json_data, status_code: int = 200) -> httpx.AsyncClient:
        mock = AsyncMock(spec=httpx.AsyncClient)
        mock.get.return_value = make_response(json_data, status_code)
        return mock

    return _mock_client


@pytest.fixture
def make_deps(settings, mock_client):
    def _make_deps(json_data, status_code: int = 200) -> WeatherDeps:
        return WeatherDeps(settings=settings, http_client=mock_client(json_data, status_code))

    return _make_deps


@pytest.fixture
def current_payload() -> dict:
    """Upstream /weather response for London."""
    return {
        "coord": {"lon": -0.1257, "lat": 51.5085},
        "weather": [{"id": 803, "main": "Clouds", "description": "broken clouds", "icon": "04d"}],
        "base": "stations",
        "main": {
            "temp": 15.2,
            "feels_like": 14.6,
            "temp_min": 13.9,
            "temp_max": 16.4,
            "pressure": 1012,
            "humidity": 72,
        },
        "visibility": 10000,
        "wind": {"speed": 4.63, "deg": 240},
        "clouds": {"all": 75},
        "dt": 1697716800,
        "sys": {"type": 2, "id": 2075535, "country": "GB", "sunrise": 1697697050, "sunset": 1697734612},
        "timezone": 3600,
        "id": 2643743,
        "name": "London",
        "cod": 200,
    }


@pytest.fixture
def forecast_payload() -> dict:
    """Upstream /forecast response with two timesteps, only the first with rain."""
    return {
        "cod": "200",
        "message": 0,
        "cnt": 2,
        "list": [
            {
                "dt": 1697727600,
                "main": {
                    "temp": 14.1,
                    "feels_like": 13.5,
                    "temp_min": 13.2,
                    "temp_max": 14.1,
                    "pressure": 1011,
                    "humidity": 80,
                },
                "weather": [{"id": 500, "main": "Rain", "description": "light rain", "icon": "10d"}],
                "clouds": {"all": 90},
                "wind": {"speed": 5.1, "deg": 230, "gust": 9.8},
                "visibility": 10000,
                "pop": 0.62,
                "rain": {"3h": 0.54},
                "dt_txt": "2023-10-19 15:00:00",
            },
            {
                "dt": 1697738400,
                "main": {
                    "temp": 12,
                    "feels_like": 11.3,
                    "temp_min": 12,
                    "temp_max": 12,
                    "pressure": 1012,
                    "humidity": 85,
                },
                "weather": [{"id": 804, "main": "Clouds", "description": "overcast clouds", "icon": "04n"}],
                "clouds": {"all": 100},
                "wind": {"speed": 3.9, "deg": 220},
                "visibility": 10000,
                "pop": 0,
                "dt_txt": "2023-10-19 18:00:00",
            },
        ],
        "city": {
            "id": 2643743,
            "name": "London",
            "coord": {"lat": 51.5085, "lon": -0.1257},
            "country": "GB",
            "timezone": 3600,
            "sunrise": 1697697050,
            "sunset": 1697734612,
        },
    }


@pytest.fixture
def geo_payload() -> list:
    """Upstream direct geocoding response: two places named London."""
    return [
        {
            "name": "London",
            "local_names": {"en": "London", "fr": "Londres"},
            "lat": 51.5073219,
            "lon": -0.1276474,
            "country": "GB",
            "state": "England",
        },
        {"name": "London", "lat": 42.9832406, "lon": -81.243372, "country": "CA", "state": "Ontario"},
    ]


@pytest.fixture
def air_payload() -> dict:
    return {
        "coord": {"lon": -0.1257, "lat": 51.5085},
        "list": [
            {
                "main": {"aqi": 2},
                "components": {
                    "co": 201.94,
                    "no": 0.02,
                    "no2": 0.77,
                    "o3": 68.66,
                    "so2": 0.64,
                    "pm2_5": 0.5,
                    "pm10": 0.54,
                    "nh3": 0.12,
                },
                "dt": 1697716800,
            }
        ],
    }
