# ABOUTME: Process entry point: `python -m weather_dashboard`.
# ABOUTME: Loads settings, configures logging and serves the app with uvicorn.

import logging

import uvicorn

from weather_dashboard.config import load_settings
from weather_dashboard.web import configure_logging, create_app

logger = logging.getLogger("weather_dashboard")

ENDPOINTS = (
    "GET /health - Health check",
    "GET /api/weather/current?city=London - Get current weather",
    "GET /api/weather/forecast?city=London - Get 5-day forecast",
    "GET /api/weather/onecall?lat=51.5074&lon=-0.1278 - Get One Call data",
    "GET /api/weather/search?q=London - Search for cities",
    "GET /api/weather/reverse?lat=51.5074&lon=-0.1278 - Reverse geocode",
    "GET /api/weather/air-pollution?lat=51.5074&lon=-0.1278 - Get air quality",
)


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)

    logger.info("Weather API server running on http://%s:%s", settings.host, settings.port)
    for endpoint in ENDPOINTS:
        logger.info("  %s", endpoint)

    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
