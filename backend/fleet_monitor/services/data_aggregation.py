from dataclasses import dataclass, field, replace
from functools import reduce
from typing import Dict, Optional, Sequence

from fleet_monitor import config
from fleet_monitor.services.metrics import DANGER, NORMAL, WARNING, DerivedMetrics, round_half_up

SUNLIGHT_DIVISOR = 13


@dataclass(frozen=True)
class FleetStats:
    total_generation: float = 0.0
    total_capacity: float = 0.0
    total_sales: float = 0.0
    mean_efficiency: float = 0.0
    sunlight_hours: float = 0.0
    carbon_reduction: float = 0.0
    operation_rate: float = 0.0
    health_score: int = 60
    site_count: int = 0
    status_counts: Dict[str, int] = field(default_factory=dict)

    def to_dict(self):
        return {
            "total_generation": round(self.total_generation, 2),
            "total_capacity": round(self.total_capacity, 2),
            "total_sales": round(self.total_sales, 2),
            "avg_efficiency": self.mean_efficiency,
            "sunlight_hours": self.sunlight_hours,
            "carbon_reduction": self.carbon_reduction,
            "operation_rate": self.operation_rate,
            "health_score": self.health_score,
            "site_count": self.site_count,
            "status_counts": dict(self.status_counts),
        }


@dataclass(frozen=True)
class _Totals:
    generation: float = 0.0
    capacity: float = 0.0
    sales: float = 0.0
    efficiency_sum: float = 0.0
    rated_sites: int = 0
    sites: int = 0
    normal: int = 0
    warning: int = 0
    danger: int = 0


def _fold(totals: _Totals, item) -> _Totals:
    _, metrics = item
    capacity = metrics.capacity
    rated = capacity > 0
    return replace(
        totals,
        generation=totals.generation + (metrics.generation or 0.0),
        capacity=totals.capacity + capacity,
        sales=totals.sales + (metrics.sales or 0.0),
        efficiency_sum=totals.efficiency_sum + (metrics.efficiency if rated else 0.0),
        rated_sites=totals.rated_sites + (1 if rated else 0),
        sites=totals.sites + 1,
        normal=totals.normal + (metrics.status == NORMAL),
        warning=totals.warning + (metrics.status == WARNING),
        danger=totals.danger + (metrics.status == DANGER),
    )


def health_score(mean_efficiency: float) -> int:
    if mean_efficiency > 90:
        return 98
    if mean_efficiency > 70:
        return 85
    return 60


def aggregate(
    sites: Sequence,
    derived_per_site: Sequence[DerivedMetrics],
    carbon_multiplier: Optional[float] = None,
) -> FleetStats:
    """
    Fold per-site metrics into fleet statistics for the current snapshot.

    ``sites`` and ``derived_per_site`` are paired positionally. Nothing is
    carried over from previous calls.
    """
    if len(sites) != len(derived_per_site):
        raise ValueError("sites and derived metrics must be the same length")
    if carbon_multiplier is None:
        carbon_multiplier = config.CARBON_MULTIPLIER

    totals = reduce(_fold, tuple(zip(sites, derived_per_site)), _Totals())

    mean_efficiency = round_half_up(totals.efficiency_sum / totals.rated_sites) if totals.rated_sites else 0.0
    sunlight = round_half_up(mean_efficiency / SUNLIGHT_DIVISOR) if mean_efficiency > 0 else 0.0
    carbon = (
        round_half_up(totals.generation * config.CARBON_FACTOR_KG_PER_KWH / 1000 * carbon_multiplier, 2)
        if totals.generation > 0 else 0.0
    )
    operation_rate = round_half_up(totals.generation / totals.capacity * 100) if totals.capacity > 0 else 0.0

    return FleetStats(
        total_generation=totals.generation,
        total_capacity=totals.capacity,
        total_sales=totals.sales,
        mean_efficiency=mean_efficiency,
        sunlight_hours=sunlight,
        carbon_reduction=carbon,
        operation_rate=operation_rate,
        health_score=health_score(mean_efficiency),
        site_count=totals.sites,
        status_counts={NORMAL: totals.normal, WARNING: totals.warning, DANGER: totals.danger},
    )
