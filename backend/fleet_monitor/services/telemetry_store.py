"""Raw telemetry and weather history persistence."""
import logging
from datetime import datetime
from typing import Dict, Iterable, List

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fleet_monitor.exceptions import TelemetryStoreError
from fleet_monitor.models.telemetry import TelemetryLog, WeatherHistory
from telemetry_simulator.solar_generator import SimulatedReading, WeatherObservation

logger = logging.getLogger(__name__)


def _to_row(reading: SimulatedReading) -> TelemetryLog:
    return TelemetryLog(
        site_id=reading.site_id,
        recorded_at=reading.recorded_at,
        gen=reading.generation,
        cons=reading.consumption,
        voltage=reading.voltage,
        current=reading.current,
        temp=reading.temperature,
        humidity=reading.humidity,
        weather=reading.weather,
        is_error=reading.is_error,
        predicted_failure_at=reading.predicted_failure_at,
        chart_labels=reading.chart_labels,
        chart_values=reading.chart_values,
    )


def insert_readings(db: Session, readings: Iterable[SimulatedReading]) -> int:
    """Append readings in one transaction. Returns the number written."""
    rows = [_to_row(r) for r in readings]
    try:
        db.add_all(rows)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise TelemetryStoreError(f"could not store telemetry: {e}") from e
    return len(rows)


def insert_reading(db: Session, reading: SimulatedReading) -> None:
    insert_readings(db, [reading])


def latest_readings(db: Session) -> Dict[int, TelemetryLog]:
    """Most recent log row per site, keyed by site id."""
    subq = (
        db.query(
            TelemetryLog.site_id.label("site_id"),
            func.max(TelemetryLog.recorded_at).label("max_ts"),
        )
        .group_by(TelemetryLog.site_id)
        .subquery()
    )
    try:
        rows = (
            db.query(TelemetryLog)
            .join(subq, (TelemetryLog.site_id == subq.c.site_id) & (TelemetryLog.recorded_at == subq.c.max_ts))
            .order_by(TelemetryLog.id)
            .all()
        )
    except SQLAlchemyError as e:
        raise TelemetryStoreError(f"could not read telemetry: {e}") from e
    # Two rows can share a timestamp; keep the later insert.
    return {row.site_id: row for row in rows}


def purge_older_than(db: Session, cutoff: datetime) -> int:
    try:
        deleted = (
            db.query(TelemetryLog)
            .filter(TelemetryLog.recorded_at < cutoff)
            .delete(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise TelemetryStoreError(f"could not purge telemetry: {e}") from e
    return deleted or 0


def count_readings(db: Session) -> int:
    return db.query(func.count(TelemetryLog.id)).scalar() or 0


def record_observation(db: Session, site_id: int, observation: WeatherObservation, recorded_at: datetime) -> WeatherHistory:
    row = WeatherHistory(
        site_id=site_id,
        temp=observation.temperature,
        humidity=observation.humidity,
        weather=observation.weather,
        recorded_at=recorded_at,
    )
    try:
        db.add(row)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise TelemetryStoreError(f"could not store weather history: {e}") from e
    return row


def latest_observations(db: Session) -> Dict[int, WeatherObservation]:
    """Most recent stored weather per site."""
    subq = (
        db.query(
            WeatherHistory.site_id.label("site_id"),
            func.max(WeatherHistory.recorded_at).label("max_ts"),
        )
        .group_by(WeatherHistory.site_id)
        .subquery()
    )
    try:
        rows: List[WeatherHistory] = (
            db.query(WeatherHistory)
            .join(subq, (WeatherHistory.site_id == subq.c.site_id) & (WeatherHistory.recorded_at == subq.c.max_ts))
            .order_by(WeatherHistory.id)
            .all()
        )
    except SQLAlchemyError as e:
        raise TelemetryStoreError(f"could not read weather history: {e}") from e
    fallback = WeatherObservation.fallback()
    return {
        row.site_id: WeatherObservation(
            temperature=row.temp if row.temp is not None else fallback.temperature,
            humidity=row.humidity if row.humidity is not None else fallback.humidity,
            weather=row.weather or fallback.weather,
        )
        for row in rows
    }
