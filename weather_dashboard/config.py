# ABOUTME: Process-wide configuration for the weather dashboard backend.
# ABOUTME: Builds a frozen Settings object once at startup from the environment and .env file.

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict

from weather_dashboard.errors import ConfigurationError

WEATHER_API_BASE_URL = "https://api.openweathermap.org/data/2.5"
GEO_API_BASE_URL = "https://api.openweathermap.org/geo/1.0"

DEFAULT_STATIC_DIR = Path(__file__).parent / "static"


class Settings(BaseModel):
    """Configuration shared by the router, the upstream client and the server."""

    model_config = ConfigDict(frozen=True)

    api_key: str
    weather_base_url: str = WEATHER_API_BASE_URL
    geo_base_url: str = GEO_API_BASE_URL
    timeout_seconds: float = 10.0
    host: str = "0.0.0.0"
    port: int = 3001
    log_level: str = "INFO"
    static_dir: Path = DEFAULT_STATIC_DIR
    cors_origins: list[str] = ["*"]


def load_settings() -> Settings:
    """Read settings from the environment, loading a .env file first if one exists.

    Raises ConfigurationError when WEATHER_API_KEY is unset so a misconfigured
    deployment fails at startup instead of on its first upstream call.
    """
    load_dotenv()

    api_key = os.environ.get("WEATHER_API_KEY", "").strip()
    if not api_key:
        raise ConfigurationError("WEATHER_API_KEY is not set")

    cors = os.environ.get("CORS_ORIGINS")
    return Settings(
        api_key=api_key,
        weather_base_url=os.environ.get("WEATHER_API_BASE_URL", WEATHER_API_BASE_URL),
        geo_base_url=os.environ.get("GEO_API_BASE_URL", GEO_API_BASE_URL),
        timeout_seconds=float(os.environ.get("UPSTREAM_TIMEOUT", "10")),
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "3001")),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        static_dir=Path(os.environ.get("STATIC_DIR", str(DEFAULT_STATIC_DIR))),
        cors_origins=[o.strip() for o in cors.split(",") if o.strip()] if cors else ["*"],
    )
