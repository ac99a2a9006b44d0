"""Tests for the OpenWeatherMap client."""

from unittest.mock import MagicMock, patch

import httpx
import pytest

from fleet_monitor import config
from fleet_monitor.exceptions import WeatherProviderError
from fleet_monitor.services import weather_provider
from telemetry_simulator.solar_generator import WeatherObservation

PAYLOAD = {
    "main": {"temp": 18.4, "humidity": 77},
    "weather": [{"main": "Rain", "description": "light rain"}],
}


@pytest.fixture
def api_key():
    with patch.object(config, "OPENWEATHER_API_KEY", "test-key"):
        yield


@pytest.fixture
def mock_get():
    with patch("fleet_monitor.services.weather_provider.httpx.get") as mock:
        yield mock


def response(status=200, json_data=None):
    request = httpx.Request("GET", config.OPENWEATHER_URL)
    return httpx.Response(status, json=json_data if json_data is not None else {}, request=request)


def test_fetch_success(api_key, mock_get):
    mock_get.return_value = response(json_data=PAYLOAD)

    obs = weather_provider.fetch(35.1, 126.9)

    assert obs == WeatherObservation(temperature=18.4, humidity=77.0, weather="Rain", description="light rain")
    params = mock_get.call_args.kwargs["params"]
    assert params["lat"] == 35.1
    assert params["lon"] == 126.9
    assert params["appid"] == "test-key"
    assert params["units"] == "metric"


def test_http_error_falls_back(api_key, mock_get):
    mock_get.return_value = response(status=503)
    assert weather_provider.fetch(0, 0) == WeatherObservation.fallback()


def test_network_error_falls_back(api_key, mock_get):
    mock_get.side_effect = httpx.ConnectTimeout("timed out")
    assert weather_provider.fetch(0, 0) == WeatherObservation.fallback()


def test_malformed_payload_falls_back(api_key, mock_get):
    mock_get.return_value = response(json_data={"main": {}})
    assert weather_provider.fetch(0, 0) == WeatherObservation.fallback()


def test_missing_api_key_skips_request(mock_get):
    with patch.object(config, "OPENWEATHER_API_KEY", None):
        assert weather_provider.fetch_city("Seoul") == WeatherObservation.fallback()
    mock_get.assert_not_called()


def test_fetch_city_uses_injected_client(api_key):
    client = MagicMock()
    client.get.return_value = response(json_data=PAYLOAD)

    obs = weather_provider.fetch_city("Busan", client=client)

    assert obs.weather == "Rain"
    assert client.get.call_args.kwargs["params"]["q"] == "Busan"


def test_parse_observation_rejects_empty_weather_list():
    with pytest.raises(WeatherProviderError):
        weather_provider.parse_observation({"main": {"temp": 1, "humidity": 2}, "weather": []})


def test_description_is_optional(api_key, mock_get):
    mock_get.return_value = response(json_data={"main": {"temp": 5, "humidity": 90}, "weather": [{"main": "Snow"}]})
    obs = weather_provider.fetch(0, 0)
    assert obs.weather == "Snow"
    assert obs.description is None
