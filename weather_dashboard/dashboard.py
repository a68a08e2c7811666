# ABOUTME: Dashboard data pipeline that consumes the /api/weather endpoints.
# ABOUTME: Chains current weather -> forecast -> air pollution and stops at the first failure.

import logging
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from weather_dashboard.models import ForecastBundle, GeoMatch, RawPayload, WeatherSnapshot
from weather_dashboard.params import MIN_SEARCH_LENGTH

logger = logging.getLogger(__name__)

DASHBOARD_FORECAST_COUNT = 8  # one day of 3-hour steps

AQI_LABELS = ("Good", "Fair", "Moderate", "Poor", "Very Poor")


class DashboardFetchError(Exception):
    """One step of the dashboard pipeline failed."""

    def __init__(self, step: str, message: str):
        super().__init__(message)
        self.step = step
        self.message = message


class DashboardState(BaseModel):
    """Everything the dashboard renders for one city.

    Either all three payloads are set, or none are and `error` explains why.
    """

    city: str
    current: WeatherSnapshot | None = None
    forecast: ForecastBundle | None = None
    air_pollution: RawPayload | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def create_dashboard_client(
    base_url: str,
    timeout: float = 10.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Create an httpx client pointed at a dashboard backend.

    Pass an `httpx.ASGITransport` to talk to an in-process app instead of the network.
    """
    return httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)


async def load_dashboard(client: httpx.AsyncClient, city: str) -> DashboardState:
    """Fetch the three dashboard payloads for a city, in dependency order.

    Air pollution needs the coordinates returned by the current-weather call, so
    the steps run sequentially. The first failing step short-circuits the rest
    and no partial data is returned.
    """
    try:
        current = await _fetch_model(client, "/api/weather/current", {"city": city}, "current weather", WeatherSnapshot)
        forecast = await _fetch_model(
            client,
            "/api/weather/forecast",
            {"city": city, "cnt": DASHBOARD_FORECAST_COUNT},
            "forecast",
            ForecastBundle,
        )
        air_pollution = await _fetch(
            client,
            "/api/weather/air-pollution",
            {"lat": current.location.lat, "lon": current.location.lon},
            "air pollution",
        )
    except DashboardFetchError as e:
        logger.warning("Dashboard load for %r stopped at %s: %s", city, e.step, e.message)
        return DashboardState(city=city, error=e.message)

    return DashboardState(city=city, current=current, forecast=forecast, air_pollution=air_pollution)


async def search_cities(client: httpx.AsyncClient, query: str) -> list[GeoMatch]:
    """Look up candidate cities for the search box.

    Queries shorter than the backend's minimum are answered locally with no
    request. A failed search yields no results rather than an error state.
    """
    if len(query.strip()) < MIN_SEARCH_LENGTH:
        return []
    try:
        data = await _fetch(client, "/api/weather/search", {"q": query.strip()}, "search")
        return [GeoMatch.model_validate(item) for item in data]
    except (DashboardFetchError, ValidationError, TypeError) as e:
        logger.warning("City search for %r failed: %s", query, e)
        return []


def aqi_label(aqi: int | None) -> str:
    """Map an OpenWeatherMap AQI index (1-5) to its label."""
    if isinstance(aqi, int) and 1 <= aqi <= len(AQI_LABELS):
        return AQI_LABELS[aqi - 1]
    return "Unknown"


async def _fetch_model(client: httpx.AsyncClient, path: str, params: dict, step: str, model: type[BaseModel]):
    data = await _fetch(client, path, params, step)
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise DashboardFetchError(step, f"Failed to fetch {step}") from e


async def _fetch(client: httpx.AsyncClient, path: str, params: dict, step: str) -> Any:
    fallback = f"Failed to fetch {step}"
    try:
        resp = await client.get(path, params=params)
    except httpx.HTTPError as e:
        raise DashboardFetchError(step, fallback) from e

    if resp.is_error:
        message = fallback
        try:
            body = resp.json()
            if isinstance(body, dict) and body.get("error"):
                message = str(body["error"])
        except ValueError:
            pass
        raise DashboardFetchError(step, message)

    try:
        return resp.json()
    except ValueError as e:
        raise DashboardFetchError(step, fallback) from e
