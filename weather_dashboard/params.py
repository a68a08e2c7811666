# ABOUTME: Query parameter validation for the router endpoints.
# ABOUTME: Resolves city-or-coordinates lookups and clamps numeric limits to the upstream ceilings.

import math
import re

from pydantic import BaseModel

from weather_dashboard.errors import InvalidInput

LOCATION_REQUIRED = "Please provide either a city name or latitude/longitude coordinates"
COORDINATES_REQUIRED = "Please provide latitude and longitude coordinates"
SEARCH_QUERY_TOO_SHORT = "Please provide a search query with at least 2 characters"

MIN_SEARCH_LENGTH = 2
MAX_FORECAST_COUNT = 40  # 5 days * 8 three-hour steps
MAX_GEO_LIMIT = 5

# Plain decimal notation only: no exponents, underscores, nan or inf
DECIMAL_PATTERN = re.compile(r"-?\d+(\.\d+)?", re.ASCII)
INTEGER_PATTERN = re.compile(r"-?\d+", re.ASCII)


class Coordinates(BaseModel):
    lat: float
    lon: float


class LocationQuery(BaseModel):
    """Either a city name or a coordinate pair; never both."""

    city: str | None = None
    coordinates: Coordinates | None = None

    def upstream_params(self) -> dict:
        if self.coordinates is not None:
            return {"lat": self.coordinates.lat, "lon": self.coordinates.lon}
        return {"q": self.city}


def _present(value: str | None) -> bool:
    return value is not None and value.strip() != ""


def parse_coordinates(lat: str | None, lon: str | None) -> Coordinates:
    """Parse a required lat/lon pair, rejecting missing or non-numeric values."""
    if not (_present(lat) and _present(lon)):
        raise InvalidInput(COORDINATES_REQUIRED)
    return Coordinates(lat=_parse_decimal(lat, COORDINATES_REQUIRED), lon=_parse_decimal(lon, COORDINATES_REQUIRED))


def resolve_location(city: str | None, lat: str | None, lon: str | None) -> LocationQuery:
    """Build a LocationQuery from a city or a full coordinate pair.

    A complete coordinate pair wins over a city name when both are supplied.
    """
    if _present(lat) and _present(lon):
        return LocationQuery(
            coordinates=Coordinates(lat=_parse_decimal(lat, LOCATION_REQUIRED), lon=_parse_decimal(lon, LOCATION_REQUIRED))
        )
    if _present(city):
        return LocationQuery(city=city.strip())
    raise InvalidInput(LOCATION_REQUIRED)


def clamp_count(raw: str | None, name: str, maximum: int, default: int | None = None) -> int | None:
    """Parse an optional integer parameter and clamp it to [1, maximum].

    Returns default when the parameter is absent. Non-numeric input is an
    InvalidInput rather than being silently ignored.
    """
    if not _present(raw):
        return default
    raw = raw.strip()
    if not INTEGER_PATTERN.fullmatch(raw):
        raise InvalidInput(f"{name} must be an integer")
    value = int(raw)
    return max(1, min(value, maximum))


def validate_search_query(q: str | None) -> str:
    if q is None or len(q.strip()) < MIN_SEARCH_LENGTH:
        raise InvalidInput(SEARCH_QUERY_TOO_SHORT)
    return q.strip()


def _parse_decimal(raw: str, message: str) -> float:
    raw = raw.strip()
    if not DECIMAL_PATTERN.fullmatch(raw):
        raise InvalidInput(message)
    value = float(raw)
    if not math.isfinite(value):
        raise InvalidInput(message)
    return value
