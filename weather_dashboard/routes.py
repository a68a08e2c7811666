# ABOUTME: FastAPI routes for the /api/weather endpoints.
# ABOUTME: Each handler validates its query parameters, makes one upstream call and returns the reshaped result.

from fastapi import APIRouter, Depends

from weather_dashboard import weather_service
from weather_dashboard.deps import WeatherDeps, get_deps
from weather_dashboard.models import ErrorBody, ForecastBundle, GeoMatch, WeatherSnapshot
from weather_dashboard.params import (
    MAX_FORECAST_COUNT,
    MAX_GEO_LIMIT,
    clamp_count,
    parse_coordinates,
    resolve_location,
    validate_search_query,
)

router = APIRouter(
    prefix="/api/weather",
    responses={
        400: {"model": ErrorBody, "description": "Missing or malformed query parameters"},
        500: {"model": ErrorBody, "description": "Upstream failure without a usable status"},
    },
)


@router.get("/current", response_model=WeatherSnapshot)
async def current_weather(
    city: str | None = None,
    lat: str | None = None,
    lon: str | None = None,
    units: str = "metric",
    deps: WeatherDeps = Depends(get_deps),
):
    """Current conditions by city name or coordinates."""
    location = resolve_location(city, lat, lon)
    return await weather_service.get_current_weather(deps, location, units)


@router.get("/forecast", response_model=ForecastBundle)
async def forecast(
    city: str | None = None,
    lat: str | None = None,
    lon: str | None = None,
    units: str = "metric",
    cnt: str | None = None,
    deps: WeatherDeps = Depends(get_deps),
):
    """5 day / 3 hour forecast; `cnt` is capped at 40 timesteps."""
    location = resolve_location(city, lat, lon)
    count = clamp_count(cnt, "cnt", MAX_FORECAST_COUNT)
    return await weather_service.get_forecast(deps, location, units, count)


@router.get("/onecall")
async def one_call(
    lat: str | None = None,
    lon: str | None = None,
    units: str = "metric",
    exclude: str | None = None,
    deps: WeatherDeps = Depends(get_deps),
):
    """One Call payload, passed through unmodified."""
    coordinates = parse_coordinates(lat, lon)
    return await weather_service.get_one_call(deps, coordinates, units, exclude)


@router.get("/search", response_model=list[GeoMatch])
async def search(
    q: str | None = None,
    limit: str | None = None,
    deps: WeatherDeps = Depends(get_deps),
):
    query = validate_search_query(q)
    return await weather_service.search_locations(deps, query, clamp_count(limit, "limit", MAX_GEO_LIMIT, default=5))


@router.get("/reverse", response_model=list[GeoMatch])
async def reverse(
    lat: str | None = None,
    lon: str | None = None,
    limit: str | None = None,
    deps: WeatherDeps = Depends(get_deps),
):
    coordinates = parse_coordinates(lat, lon)
    return await weather_service.reverse_geocode(deps, coordinates, clamp_count(limit, "limit", MAX_GEO_LIMIT, default=1))


@router.get("/air-pollution")
async def air_pollution(
    lat: str | None = None,
    lon: str | None = None,
    deps: WeatherDeps = Depends(get_deps),
):
    coordinates = parse_coordinates(lat, lon)
    return await weather_service.get_air_pollution(deps, coordinates)

