"""
Current weather from OpenWeatherMap.

``fetch`` never raises: any failure (no API key, HTTP error, timeout, odd
payload) is logged and the fixed fallback observation is returned instead.
"""
import logging
from typing import Optional

import httpx

from fleet_monitor import config
from fleet_monitor.exceptions import WeatherProviderError
from telemetry_simulator.solar_generator import WeatherObservation

logger = logging.getLogger(__name__)


def _request(params: dict, api_key: str, client: Optional[httpx.Client] = None) -> dict:
    params = {**params, "appid": api_key, "units": "metric"}
    try:
        if client is not None:
            response = client.get(config.OPENWEATHER_URL, params=params)
        else:
            response = httpx.get(config.OPENWEATHER_URL, params=params, timeout=config.WEATHER_TIMEOUT_SECONDS)
        response.raise_for_status()
        return response.json()
    except httpx.HTTPStatusError as e:
        raise WeatherProviderError(f"weather API returned {e.response.status_code}") from e
    except httpx.HTTPError as e:
        raise WeatherProviderError(f"weather API request failed: {e}") from e
    except ValueError as e:
        raise WeatherProviderError("weather API returned invalid JSON") from e


def parse_observation(data: dict) -> WeatherObservation:
    try:
        main = data["main"]
        return WeatherObservation(
            temperature=float(main["temp"]),
            humidity=float(main["humidity"]),
            weather=str(data["weather"][0]["main"]),
            description=data["weather"][0].get("description"),
        )
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise WeatherProviderError(f"unexpected weather payload: {e}") from e


def _fetch(params: dict, client: Optional[httpx.Client] = None) -> WeatherObservation:
    api_key = config.OPENWEATHER_API_KEY
    if not api_key:
        logger.warning("OPENWEATHER_API_KEY not set, using fallback weather")
        return WeatherObservation.fallback()
    try:
        return parse_observation(_request(params, api_key, client))
    except WeatherProviderError as e:
        logger.warning("Weather lookup failed (%s), using fallback weather", e)
        return WeatherObservation.fallback()


def fetch(lat: float, lon: float, client: Optional[httpx.Client] = None) -> WeatherObservation:
    """Current weather at a coordinate."""
    return _fetch({"lat": lat, "lon": lon}, client)


def fetch_city(city: Optional[str] = None, client: Optional[httpx.Client] = None) -> WeatherObservation:
    """Current weather for a named city (the dashboard header widget)."""
    return _fetch({"q": city or config.WEATHER_CITY}, client)
