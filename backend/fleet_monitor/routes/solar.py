import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.orm import Session

from fleet_monitor import config
from fleet_monitor.database import get_db
from fleet_monitor.exceptions import TelemetryStoreError
from fleet_monitor.services import retention, weather_provider
from fleet_monitor.services.cache import SNAPSHOT_CACHE_KEY, get_cache, invalidate_cache, set_cache
from fleet_monitor.services.dashboard import build_snapshot
from fleet_monitor.services.telemetry_store import record_observation
from telemetry_simulator.solar_generator import WeatherObservation
from telemetry_simulator.utils import utcnow

logger = logging.getLogger(__name__)

router = APIRouter()


class WeatherHistoryIn(BaseModel):
    site_id: int
    temp: float
    humidity: float
    weather: str


@router.get("/solar")
def get_solar_snapshot(db: Session = Depends(get_db)):
    """Sites with derived metrics, fleet stats, revenue, inverters, market and schedule."""
    data = get_cache(SNAPSHOT_CACHE_KEY)
    if data is not None:
        return data
    try:
        out = build_snapshot(db)
    except TelemetryStoreError as e:
        logger.error("Snapshot failed: %s", e)
        return JSONResponse(status_code=500, content={"error": "Database Error"})
    set_cache(SNAPSHOT_CACHE_KEY, out, ex=config.SNAPSHOT_CACHE_SECONDS)
    return out


@router.get("/solar/cleanup")
def cleanup_solar_logs(db: Session = Depends(get_db)):
    """Drop raw telemetry older than the retention window. Meant for a daily cron."""
    try:
        deleted = retention.purge(db)
    except TelemetryStoreError as e:
        logger.error("Cleanup failed: %s", e)
        return JSONResponse(status_code=500, content={"error": "Cleanup Failed"})
    invalidate_cache(SNAPSHOT_CACHE_KEY)
    return {"deleted": deleted}


@router.post("/solar/weather-history")
def save_weather_history(payload: WeatherHistoryIn, db: Session = Depends(get_db)):
    observation = WeatherObservation(
        temperature=payload.temp,
        humidity=payload.humidity,
        weather=payload.weather,
    )
    try:
        record_observation(db, payload.site_id, observation, utcnow())
    except TelemetryStoreError as e:
        logger.error("Weather history save failed: %s", e)
        return JSONResponse(status_code=500, content={"error": "Save Failed"})
    return {"success": True}


@router.get("/weather")
def current_weather():
    """Header widget weather. Falls back to fixed values when the provider is down."""
    observation = weather_provider.fetch_city()
    return {
        "temp": observation.temperature,
        "humidity": observation.humidity,
        "weather": observation.weather,
        "description": observation.description,
    }
