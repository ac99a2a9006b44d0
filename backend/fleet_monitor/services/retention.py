import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from fleet_monitor import config
from fleet_monitor.services.telemetry_store import purge_older_than
from telemetry_simulator.utils import utcnow

logger = logging.getLogger(__name__)


def retention_cutoff(now: datetime, hours: Optional[int] = None) -> datetime:
    return now - timedelta(hours=config.RETENTION_HOURS if hours is None else hours)


def purge(db: Session, now: Optional[datetime] = None) -> int:
    """Delete raw telemetry older than the retention window. Returns rows removed."""
    cutoff = retention_cutoff(now or utcnow())
    deleted = purge_older_than(db, cutoff)
    logger.info("Purged %d telemetry rows recorded before %s", deleted, cutoff.isoformat())
    return deleted
