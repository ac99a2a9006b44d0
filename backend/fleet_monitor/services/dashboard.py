import logging
import math
from typing import Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from fleet_monitor import config
from fleet_monitor.exceptions import TelemetryStoreError
from fleet_monitor.models.reference import InverterStatus, MaintenanceSchedule, MarketPrice, RevenueEntry
from fleet_monitor.models.site import Site
from fleet_monitor.services.data_aggregation import FleetStats, aggregate
from fleet_monitor.services.metrics import DANGER, DerivedMetrics, as_number, derive
from fleet_monitor.services.telemetry_store import latest_readings

logger = logging.getLogger(__name__)

DEFAULT_CHART_VALUES = [0, 0, 0, 0, 0, 0]
DEFAULT_CHART_LABELS = ["-", "-", "-", "-", "-", "-"]


def _reported(value):
    """Weather readings stay None when absent; unusable numbers become None too."""
    if value is None:
        return None
    number = as_number(value)
    return number if number or value == 0 else None


def site_entry(site: Site, reading, metrics: DerivedMetrics, actions: List[str]) -> Dict:
    entry = site.to_dict()
    entry.update({
        "capacity": metrics.capacity,
        "gen": metrics.generation,
        "cons": as_number(getattr(reading, "cons", None)),
        "is_error": bool(getattr(reading, "is_error", False)),
        "weather": getattr(reading, "weather", None),
        "temp": _reported(getattr(reading, "temp", None)),
        "humidity": _reported(getattr(reading, "humidity", None)),
        "recorded_at": reading.recorded_at.isoformat() if getattr(reading, "recorded_at", None) else None,
        "predicted_failure_at": (
            reading.predicted_failure_at.isoformat() if getattr(reading, "predicted_failure_at", None) else None
        ),
        "actions": actions,
        "chartData": getattr(reading, "chart_values", None) or list(DEFAULT_CHART_VALUES),
        "chartLabels": getattr(reading, "chart_labels", None) or list(DEFAULT_CHART_LABELS),
    })
    entry.update(metrics.to_dict())
    return entry


def no_data_entry(site: Site, smp_price: float):
    """A site whose data could not be read shows as if it had reported all zeros."""
    metrics = derive(site, None, smp_price)
    return site_entry(site, None, metrics, []), metrics


def project_revenue(revenue: List[Dict], stats: FleetStats) -> List[Dict]:
    """Overwrite the current (last) month with a projection from total sales."""
    if revenue:
        revenue[-1]["amount"] = math.floor(stats.total_sales * config.REVENUE_PROJECTION_FACTOR)
    return revenue


def mirror_inverters(inverters: List[Dict], derived: List[DerivedMetrics]) -> List[Dict]:
    """Inverter rows follow sites positionally; 'danger' is shown as 'critical'."""
    for inverter, metrics in zip(inverters, derived):
        inverter["efficiency"] = metrics.efficiency
        inverter["status"] = "critical" if metrics.status == DANGER else metrics.status
    return inverters


def smp_price_from(market: Dict[str, Dict]) -> float:
    price: Optional[float] = (market.get("SMP") or {}).get("price")
    return float(price) if price else config.SMP_PRICE


def build_snapshot(db: Session) -> Dict:
    """
    Everything the dashboard shows, computed from the latest reading per site.

    A failure for one site degrades that site to a no-data entry. Failure to
    reach the store at all raises TelemetryStoreError.
    """
    try:
        sites = db.query(Site).order_by(Site.id).all()
        market = {row.type: row.to_dict() for row in db.query(MarketPrice).all()}
    except SQLAlchemyError as e:
        raise TelemetryStoreError(f"could not read sites: {e}") from e
    latest = latest_readings(db)
    smp_price = smp_price_from(market)

    entries, derived = [], []
    for site in sites:
        reading = latest.get(site.id)
        try:
            metrics = derive(site, reading, smp_price)
            actions = [a.action_text for a in site.actions]
            entry = site_entry(site, reading, metrics, actions)
        except Exception:
            logger.exception("Could not build metrics for site %s, reporting no data", site.id)
            entry, metrics = no_data_entry(site, smp_price)
        entries.append(entry)
        derived.append(metrics)

    stats = aggregate(sites, derived)

    try:
        revenue = [r.to_dict() for r in db.query(RevenueEntry).order_by(RevenueEntry.id).all()]
        inverters = [i.to_dict() for i in db.query(InverterStatus).order_by(InverterStatus.id).all()]
        schedule = [s.to_dict() for s in db.query(MaintenanceSchedule).order_by(MaintenanceSchedule.id).all()]
    except SQLAlchemyError as e:
        raise TelemetryStoreError(f"could not read reference tables: {e}") from e

    return {
        "sites": entries,
        "revenue": project_revenue(revenue, stats),
        "inverters": mirror_inverters(inverters, derived),
        "stats": stats.to_dict(),
        "market": market,
        "schedule": schedule,
    }
