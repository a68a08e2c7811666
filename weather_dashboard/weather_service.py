# ABOUTME: Service layer for OpenWeatherMap API calls and response reshaping.
# ABOUTME: Handles current weather, forecast, One Call, geocoding and air pollution retrieval.

import logging
from typing import Any, Callable, TypeVar

import httpx
from pydantic import ValidationError

from weather_dashboard.deps import WeatherDeps
from weather_dashboard.errors import UpstreamFailure
from weather_dashboard.models import (
    CurrentConditions,
    ForecastBundle,
    ForecastLocation,
    ForecastPoint,
    GeoMatch,
    Location,
    RawPayload,
    WeatherCondition,
    WeatherSnapshot,
    Wind,
)
from weather_dashboard.params import Coordinates, LocationQuery

logger = logging.getLogger(__name__)

T = TypeVar("T")

CURRENT_FALLBACK = "Failed to fetch weather data"
FORECAST_FALLBACK = "Failed to fetch forecast data"
ONECALL_FALLBACK = "Failed to fetch One Call data"
SEARCH_FALLBACK = "Failed to search cities"
REVERSE_FALLBACK = "Failed to reverse geocode"
AIR_POLLUTION_FALLBACK = "Failed to fetch air pollution data"


async def get_current_weather(deps: WeatherDeps, location: LocationQuery, units: str = "metric") -> WeatherSnapshot:
    """Fetch current conditions for a city or coordinate pair."""
    data = await _get_json(
        deps,
        f"{deps.settings.weather_base_url}/weather",
        {**location.upstream_params(), "units": units},
        operation="current weather",
        fallback=CURRENT_FALLBACK,
    )
    return _reshape(parse_current_weather, data, operation="current weather", fallback=CURRENT_FALLBACK)


async def get_forecast(
    deps: WeatherDeps,
    location: LocationQuery,
    units: str = "metric",
    count: int | None = None,
) -> ForecastBundle:
    """Fetch the 5 day / 3 hour forecast, optionally limited to `count` timesteps."""
    params: dict[str, Any] = {**location.upstream_params(), "units": units}
    if count is not None:
        params["cnt"] = count
    data = await _get_json(
        deps,
        f"{deps.settings.weather_base_url}/forecast",
        params,
        operation="forecast",
        fallback=FORECAST_FALLBACK,
    )
    return _reshape(parse_forecast, data, operation="forecast", fallback=FORECAST_FALLBACK)


async def get_one_call(
    deps: WeatherDeps,
    coordinates: Coordinates,
    units: str = "metric",
    exclude: str | None = None,
) -> RawPayload:
    """Fetch the One Call payload unmodified. `exclude` is forwarded as-is."""
    params: dict[str, Any] = {"lat": coordinates.lat, "lon": coordinates.lon, "units": units}
    if exclude:
        params["exclude"] = exclude
    return await _get_json(
        deps,
        f"{deps.settings.weather_base_url}/onecall",
        params,
        operation="one call",
        fallback=ONECALL_FALLBACK,
    )


async def search_locations(deps: WeatherDeps, query: str, limit: int) -> list[GeoMatch]:
    """Direct geocoding: candidate places for a name, in upstream relevance order."""
    data = await _get_json(
        deps,
        f"{deps.settings.geo_base_url}/direct",
        {"q": query, "limit": limit},
        operation="city search",
        fallback=SEARCH_FALLBACK,
    )
    return _reshape(parse_geo_matches, data, operation="city search", fallback=SEARCH_FALLBACK)


async def reverse_geocode(deps: WeatherDeps, coordinates: Coordinates, limit: int) -> list[GeoMatch]:
    data = await _get_json(
        deps,
        f"{deps.settings.geo_base_url}/reverse",
        {"lat": coordinates.lat, "lon": coordinates.lon, "limit": limit},
        operation="reverse geocode",
        fallback=REVERSE_FALLBACK,
    )
    return _reshape(parse_geo_matches, data, operation="reverse geocode", fallback=REVERSE_FALLBACK)


async def get_air_pollution(deps: WeatherDeps, coordinates: Coordinates) -> RawPayload:
    """Fetch air quality readings unmodified."""
    return await _get_json(
        deps,
        f"{deps.settings.weather_base_url}/air_pollution",
        {"lat": coordinates.lat, "lon": coordinates.lon},
        operation="air pollution",
        fallback=AIR_POLLUTION_FALLBACK,
    )


def parse_current_weather(data: dict) -> WeatherSnapshot:
    """Reshape an upstream /weather payload into a WeatherSnapshot."""
    main = data["main"]
    sys = data.get("sys", {})
    return WeatherSnapshot(
        location=Location(
            name=data.get("name"),
            country=sys.get("country"),
            lat=data["coord"]["lat"],
            lon=data["coord"]["lon"],
            timezone=data.get("timezone"),
        ),
        current=CurrentConditions(
            temp=main.get("temp"),
            feels_like=main.get("feels_like"),
            temp_min=main.get("temp_min"),
            temp_max=main.get("temp_max"),
            pressure=main.get("pressure"),
            humidity=main.get("humidity"),
            weather=_first_condition(data),
            wind=parse_wind(data.get("wind")),
            clouds=(data.get("clouds") or {}).get("all"),
            visibility=data.get("visibility"),
            dt=data.get("dt"),
            sunrise=sys.get("sunrise"),
            sunset=sys.get("sunset"),
        ),
    )


def parse_forecast(data: dict) -> ForecastBundle:
    """Reshape an upstream /forecast payload, keeping the upstream point order."""
    city = data["city"]
    return ForecastBundle(
        location=ForecastLocation(
            name=city.get("name"),
            country=city.get("country"),
            lat=city["coord"]["lat"],
            lon=city["coord"]["lon"],
            timezone=city.get("timezone"),
            sunrise=city.get("sunrise"),
            sunset=city.get("sunset"),
        ),
        forecast=[parse_forecast_point(item) for item in data.get("list", [])],
    )


def parse_forecast_point(item: dict) -> ForecastPoint:
    main = item["main"]
    return ForecastPoint(
        dt=item["dt"],
        dt_txt=item.get("dt_txt"),
        temp=main.get("temp"),
        feels_like=main.get("feels_like"),
        temp_min=main.get("temp_min"),
        temp_max=main.get("temp_max"),
        pressure=main.get("pressure"),
        humidity=main.get("humidity"),
        weather=_first_condition(item),
        wind=parse_wind(item.get("wind")),
        clouds=(item.get("clouds") or {}).get("all"),
        visibility=item.get("visibility"),
        pop=item.get("pop"),
        rain=item.get("rain"),
        snow=item.get("snow"),
    )


def parse_geo_matches(data: list) -> list[GeoMatch]:
    """Reshape an upstream geocoding array, preserving its relevance order."""
    if not isinstance(data, list):
        raise TypeError(f"expected a list of locations, got {type(data).__name__}")
    return [
        GeoMatch(
            name=loc["name"],
            local_names=loc.get("local_names"),
            lat=loc["lat"],
            lon=loc["lon"],
            country=loc.get("country"),
            state=loc.get("state"),
        )
        for loc in data
    ]


def parse_wind(raw: dict | None) -> Wind:
    """Copy wind speed, direction and gust. A missing gust stays None, never 0."""
    raw = raw or {}
    return Wind(speed=raw.get("speed"), deg=raw.get("deg"), gust=raw.get("gust"))


def _first_condition(data: dict) -> WeatherCondition | None:
    conditions = data.get("weather") or []
    if not conditions:
        return None
    return WeatherCondition(**conditions[0])


async def _get_json(deps: WeatherDeps, url: str, params: dict, operation: str, fallback: str) -> Any:
    """Perform one upstream GET and decode its JSON body.

    Every failure becomes an UpstreamFailure carrying the upstream status (or
    500) and the upstream message (or `fallback`). Nothing is retried.
    """
    try:
        resp = await deps.http_client.get(url, params={**params, "appid": deps.settings.api_key})
        resp.raise_for_status()
        return resp.json()
    except httpx.HTTPStatusError as e:
        status = e.response.status_code
        message = _upstream_message(e.response) or fallback
        logger.warning("Upstream %s failed: status=%s message=%s", operation, status, message)
        raise UpstreamFailure(message, status) from e
    except httpx.HTTPError as e:
        logger.warning("Upstream %s request error: %s: %s", operation, type(e).__name__, e)
        raise UpstreamFailure(fallback) from e
    except ValueError as e:
        logger.warning("Upstream %s returned a non-JSON body: %s", operation, e)
        raise UpstreamFailure(fallback) from e


def _reshape(parser: Callable[[Any], T], data: Any, operation: str, fallback: str) -> T:
    try:
        return parser(data)
    except (KeyError, IndexError, TypeError, AttributeError, ValidationError) as e:
        logger.warning("Upstream %s payload could not be reshaped: %s: %s", operation, type(e).__name__, e)
        raise UpstreamFailure(fallback) from e


def _upstream_message(response: httpx.Response) -> str | None:
    """Extract the `message` field from an upstream error body, if there is one."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return None
