# ABOUTME: Tests for the dashboard data pipeline and city search.
# ABOUTME: Mocks the backend with AsyncMock httpx responses to check ordering and short-circuiting.

from unittest.mock import AsyncMock

import httpx
import pytest

from conftest import make_response
from weather_dashboard.dashboard import aqi_label, create_dashboard_client, load_dashboard, search_cities
from weather_dashboard.weather_service import parse_current_weather, parse_forecast
from weather_dashboard.web import create_app


def _backend(*responses) -> httpx.AsyncClient:
    mock = AsyncMock(spec=httpx.AsyncClient)
    mock.get.side_effect = list(responses)
    return mock


@pytest.fixture
def snapshot(current_payload) -> dict:
    return parse_current_weather(current_payload).model_dump(mode="json")


@pytest.fixture
def bundle(forecast_payload) -> dict:
    return parse_forecast(forecast_payload).model_dump(mode="json")


class TestLoadDashboard:
    @pytest.mark.asyncio
    async def test_fetches_three_steps_in_order(self, snapshot, bundle, air_payload):
        """Current weather, forecast and air pollution are fetched in dependency order.

        Implementation: Inspects the mock's call list after a successful load.
        Passing implies: Air pollution uses the coordinates returned by the current-weather step.
        """
        client = _backend(make_response(snapshot), make_response(bundle), make_response(air_payload))

        state = await load_dashboard(client, "London")

        assert state.ok
        assert state.current.current.temp == 15.2
        assert len(state.forecast.forecast) == 2
        assert state.air_pollution == air_payload

        calls = client.get.call_args_list
        assert [c.args[0] for c in calls] == [
            "/api/weather/current",
            "/api/weather/forecast",
            "/api/weather/air-pollution",
        ]
        assert calls[1].kwargs["params"] == {"city": "London", "cnt": 8}
        assert calls[2].kwargs["params"] == {"lat": 51.5085, "lon": -0.1257}

    @pytest.mark.asyncio
    async def test_current_failure_skips_remaining_steps(self):
        """A failed current-weather step stops the pipeline with the backend's message.

        Implementation: The first response is a 404 error body.
        Passing implies: Forecast and air pollution are never requested.
        """
        client = _backend(make_response({"error": "city not found"}, status_code=404))

        state = await load_dashboard(client, "Xyzzyville")

        assert not state.ok
        assert state.error == "city not found"
        assert state.current is None
        assert client.get.call_count == 1

    @pytest.mark.asyncio
    async def test_later_failure_discards_partial_data(self, snapshot):
        """A failure in the forecast step leaves no partial data behind.

        Implementation: Current succeeds, forecast fails at the transport level.
        Passing implies: The dashboard is all-or-nothing.
        """
        client = _backend(make_response(snapshot), httpx.ConnectError("refused"))

        state = await load_dashboard(client, "London")

        assert state.error == "Failed to fetch forecast"
        assert state.current is None
        assert state.forecast is None
        assert client.get.call_count == 2

    @pytest.mark.asyncio
    async def test_unexpected_shape_is_an_error(self):
        client = _backend(make_response({"location": "nowhere"}))

        state = await load_dashboard(client, "London")

        assert state.error == "Failed to fetch current weather"


class TestDashboardAgainstApp:
    @pytest.mark.asyncio
    async def test_pipeline_runs_through_the_router(self, settings, current_payload, forecast_payload, air_payload):
        """The dashboard client drives the real router end to end.

        Implementation: create_dashboard_client talks to the app over httpx.ASGITransport;
        only the upstream OpenWeatherMap client is mocked.
        Passing implies: The pipeline and the router agree on paths, params and response shapes.
        """
        upstream = AsyncMock(spec=httpx.AsyncClient)
        upstream.get.side_effect = [
            make_response(current_payload),
            make_response(forecast_payload),
            make_response(air_payload),
        ]
        app = create_app(settings, http_client=upstream)

        async with create_dashboard_client("http://dashboard.test", transport=httpx.ASGITransport(app=app)) as client:
            state = await load_dashboard(client, "London")

        assert state.ok
        assert state.current.current.temp == 15.2
        assert state.forecast.forecast[1].rain is None
        assert state.air_pollution == air_payload
        assert upstream.get.call_args_list[1].kwargs["params"]["cnt"] == 8
        assert upstream.get.call_args_list[2].kwargs["params"]["lat"] == 51.5085

    @pytest.mark.asyncio
    async def test_upstream_error_message_reaches_dashboard(self, settings):
        upstream = AsyncMock(spec=httpx.AsyncClient)
        upstream.get.return_value = make_response({"cod": "404", "message": "city not found"}, status_code=404)
        app = create_app(settings, http_client=upstream)

        async with create_dashboard_client("http://dashboard.test", transport=httpx.ASGITransport(app=app)) as client:
            state = await load_dashboard(client, "Xyzzyville")

        assert state.error == "city not found"
        assert upstream.get.call_count == 1

    def test_client_uses_base_url_and_timeout(self):
        client = create_dashboard_client("http://localhost:3001", timeout=2.5)

        assert (client.base_url.host, client.base_url.port) == ("localhost", 3001)
        assert client.timeout.read == 2.5


class TestSearchCities:
    @pytest.mark.asyncio
    async def test_short_query_makes_no_request(self):
        client = _backend()
        assert await search_cities(client, "L") == []
        client.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_returns_matches(self, geo_payload):
        client = _backend(make_response(geo_payload))

        matches = await search_cities(client, "London")

        assert [m.state for m in matches] == ["England", "Ontario"]
        assert client.get.call_args.kwargs["params"] == {"q": "London"}

    @pytest.mark.asyncio
    async def test_failed_search_yields_no_results(self):
        client = _backend(make_response({"error": "Failed to search cities"}, status_code=500))
        assert await search_cities(client, "London") == []


class TestAqiLabel:
    @pytest.mark.parametrize(
        "aqi,label",
        [(1, "Good"), (2, "Fair"), (3, "Moderate"), (4, "Poor"), (5, "Very Poor"), (0, "Unknown"), (6, "Unknown"), (None, "Unknown")],
    )
    def test_labels(self, aqi, label):
        assert aqi_label(aqi) == label
