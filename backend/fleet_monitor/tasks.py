import logging
from celery import Celery
from celery.schedules import crontab

from fleet_monitor import config
from fleet_monitor.database import SessionLocal
from fleet_monitor import models  # noqa: F401  registers tables
from fleet_monitor.models.site import Site
from fleet_monitor.services import retention, weather_provider
from fleet_monitor.services.cache import SNAPSHOT_CACHE_KEY, invalidate_cache
from fleet_monitor.services.telemetry_store import insert_reading, latest_observations, record_observation
from telemetry_simulator.solar_generator import TelemetrySimulator
from telemetry_simulator.utils import utcnow

logger = logging.getLogger(__name__)

# Celery Configuration
celery_app = Celery('tasks', broker=config.REDIS_URL)
celery_app.conf.update(
    task_serializer='json',
    accept_content=['json'],
    result_serializer='json',
    timezone='UTC',
    enable_utc=True,
)

celery_app.conf.beat_schedule = {
    'simulate-telemetry': {
        'task': 'fleet_monitor.tasks.simulate_telemetry',
        'schedule': crontab(minute=f'*/{config.SIMULATION_INTERVAL_MINUTES}'),
    },
    'refresh-weather': {
        'task': 'fleet_monitor.tasks.refresh_weather',
        'schedule': crontab(minute=f'*/{config.WEATHER_REFRESH_MINUTES}'),
    },
    'purge-telemetry-daily': {
        'task': 'fleet_monitor.tasks.purge_telemetry',
        'schedule': crontab(minute=0, hour=3),
    },
}


def run_simulation(db, simulator: TelemetrySimulator) -> int:
    """One tick per site using each site's latest stored weather. Returns rows written."""
    sites = db.query(Site).order_by(Site.id).all()
    weather_by_site = latest_observations(db)
    now = utcnow()
    written = 0
    for site in sites:
        try:
            reading = simulator.tick(site, weather_by_site.get(site.id), now=now)
            insert_reading(db, reading)
            written += 1
        except Exception:
            logger.exception("Error simulating site %s", site.id)
            continue
    return written


def run_weather_refresh(db, fetch=weather_provider.fetch) -> int:
    sites = db.query(Site).order_by(Site.id).all()
    now = utcnow()
    stored = 0
    for site in sites:
        try:
            record_observation(db, site.id, fetch(site.lat, site.lng), now)
            stored += 1
        except Exception:
            logger.exception("Error recording weather for site %s", site.id)
            continue
    return stored


@celery_app.task(bind=True, max_retries=3)
def simulate_telemetry(self):
    """Generate and store one telemetry reading for every site"""
    logger.info("Simulation task started")
    db = SessionLocal()
    try:
        written = run_simulation(db, TelemetrySimulator())
        invalidate_cache(SNAPSHOT_CACHE_KEY)
        logger.info("Simulation task stored %d readings", written)
        return written
    except Exception as e:
        logger.error("Simulation task error: %s", e)
        raise self.retry(exc=e, countdown=60)  # Retry after 60 seconds
    finally:
        db.close()


@celery_app.task(bind=True, max_retries=3)
def refresh_weather(self):
    db = SessionLocal()
    try:
        return run_weather_refresh(db)
    except Exception as e:
        logger.error("Weather refresh error: %s", e)
        raise self.retry(exc=e, countdown=60)
    finally:
        db.close()


@celery_app.task(bind=True, max_retries=3)
def purge_telemetry(self):
    db = SessionLocal()
    try:
        deleted = retention.purge(db)
        invalidate_cache(SNAPSHOT_CACHE_KEY)
        return deleted
    except Exception as e:
        logger.error("Purge task error: %s", e)
        raise self.retry(exc=e, countdown=60)
    finally:
        db.close()
