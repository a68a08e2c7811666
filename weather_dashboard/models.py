# ABOUTME: Pydantic BaseModels for the client-facing weather, forecast and geocoding shapes.
# ABOUTME: Numeric fields accept int or float so upstream values pass through unchanged.

from typing import Any

from pydantic import BaseModel, ConfigDict

# Smart-mode union keeps ints as ints and floats as floats.
Number = int | float


class WeatherCondition(BaseModel):
    """First entry of the upstream `weather` array (condition code, label, icon)."""

    model_config = ConfigDict(extra="allow")

    id: int | None = None
    main: str | None = None
    description: str | None = None
    icon: str | None = None


class Wind(BaseModel):
    speed: Number | None = None
    deg: Number | None = None
    gust: Number | None = None


class Location(BaseModel):
    """Place a current-weather observation refers to."""

    name: str | None = None
    country: str | None = None
    lat: Number
    lon: Number
    timezone: int | None = None


class ForecastLocation(Location):
    """Forecast city block, which also carries the day's sunrise and sunset."""

    sunrise: int | None = None
    sunset: int | None = None


class CurrentConditions(BaseModel):
    temp: Number | None = None
    feels_like: Number | None = None
    temp_min: Number | None = None
    temp_max: Number | None = None
    pressure: Number | None = None
    humidity: Number | None = None
    weather: WeatherCondition | None = None
    wind: Wind
    clouds: Number | None = None
    visibility: Number | None = None
    dt: int | None = None
    sunrise: int | None = None
    sunset: int | None = None


class WeatherSnapshot(BaseModel):
    """Reshaped current-conditions response."""

    location: Location
    current: CurrentConditions


class ForecastPoint(BaseModel):
    """One forecast timestep. rain and snow stay None when the upstream omits them."""

    dt: int
    dt_txt: str | None = None
    temp: Number | None = None
    feels_like: Number | None = None
    temp_min: Number | None = None
    temp_max: Number | None = None
    pressure: Number | None = None
    humidity: Number | None = None
    weather: WeatherCondition | None = None
    wind: Wind
    clouds: Number | None = None
    visibility: Number | None = None
    pop: Number | None = None
    rain: dict[str, Number] | None = None
    snow: dict[str, Number] | None = None


class ForecastBundle(BaseModel):
    """Reshaped forecast: location plus points in upstream order."""

    location: ForecastLocation
    forecast: list[ForecastPoint] = []


class GeoMatch(BaseModel):
    """One candidate place from direct or reverse geocoding."""

    name: str
    local_names: dict[str, str] | None = None
    lat: Number
    lon: Number
    country: str | None = None
    state: str | None = None


class HealthStatus(BaseModel):
    status: str = "ok"
    timestamp: str


class ErrorBody(BaseModel):
    error: str


# Air pollution and One Call payloads are passed through unmodified.
RawPayload = dict[str, Any]
