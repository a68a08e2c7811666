# ABOUTME: Dependency container for the router using Pydantic BaseModel.
# ABOUTME: Holds the settings and the shared httpx.AsyncClient used to call the upstream API.

import httpx
from fastapi import Request
from pydantic import BaseModel, ConfigDict

from weather_dashboard.config import Settings


class WeatherDeps(BaseModel):
    """Dependencies injected into route handlers via app.state."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    settings: Settings
    http_client: httpx.AsyncClient


def create_http_client(settings: Settings) -> httpx.AsyncClient:
    """Create the upstream httpx client.

    Failures are not retried: each client-visible error corresponds to exactly
    one upstream attempt.
    """
    return httpx.AsyncClient(timeout=httpx.Timeout(settings.timeout_seconds))


def get_deps(request: Request) -> WeatherDeps:
    return request.app.state.deps
