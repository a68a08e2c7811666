# ABOUTME: ASGI web entry point for the weather dashboard backend.
# ABOUTME: Builds the FastAPI app with request logging, error mapping, /health and the static UI shell.

import logging
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Callable

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from weather_dashboard.config import Settings
from weather_dashboard.deps import WeatherDeps, create_http_client
from weather_dashboard.errors import WeatherDashboardError
from weather_dashboard.models import HealthStatus
from weather_dashboard.routes import router as weather_router

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

INTERNAL_ERROR = "Internal server error"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_app(settings: Settings, http_client: httpx.AsyncClient | None = None) -> FastAPI:
    """Build the dashboard app.

    The upstream client is created here unless one is passed in (tests pass a
    mock) and is closed when the app shuts down.
    """
    deps = WeatherDeps(settings=settings, http_client=http_client or create_http_client(settings))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await deps.http_client.aclose()

    app = FastAPI(title="Weather Dashboard", lifespan=lifespan)
    app.state.deps = deps

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next: Callable):
        req_id = request.headers.get("x-request-id", str(uuid.uuid4()))
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            # Unhandled exceptions become a generic 500 body
            logger.exception("req=%s %s %s EXC %s", req_id, request.method, request.url.path, type(e).__name__)
            response = JSONResponse(status_code=500, content={"error": INTERNAL_ERROR})

        elapsed = time.perf_counter() - start
        logger.info(
            "req=%s %s %s -> %s t=%.3fs", req_id, request.method, request.url.path, response.status_code, elapsed
        )
        response.headers["x-request-id"] = req_id
        return response

    @app.exception_handler(WeatherDashboardError)
    async def handle_dashboard_error(request: Request, exc: WeatherDashboardError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.get("/health", response_model=HealthStatus)
    async def health_check():
        timestamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
        return HealthStatus(status="ok", timestamp=timestamp)

    app.include_router(weather_router)

    @app.get("/{full_path:path}", include_in_schema=False)
    async def ui_shell(full_path: str):
        """Serve static assets, falling back to index.html for client-side routes."""
        if full_path == "api" or full_path.startswith("api/"):
            return JSONResponse(status_code=404, content={"error": "Not found"})

        static_dir = settings.static_dir.resolve()
        candidate = (static_dir / full_path).resolve()
        if full_path and candidate.is_relative_to(static_dir) and candidate.is_file():
            return FileResponse(candidate)

        index = static_dir / "index.html"
        if index.is_file():
            return FileResponse(index)
        return JSONResponse(status_code=404, content={"error": "Not found"})

    return app
