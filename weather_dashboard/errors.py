# ABOUTME: Error taxonomy for the weather dashboard router.
# ABOUTME: InvalidInput is a local 400; UpstreamFailure mirrors the upstream status or falls back to 500.


class ConfigurationError(Exception):
    """Raised at startup when required configuration is missing."""


class WeatherDashboardError(Exception):
    """Base class for errors that map onto a client-facing {"error": ...} response."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class InvalidInput(WeatherDashboardError):
    """The caller omitted or malformed a required query parameter."""

    status_code = 400


class UpstreamFailure(WeatherDashboardError):
    """Contacting or parsing the upstream weather API failed."""
