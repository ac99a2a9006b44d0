"""
Per-site derived metrics: sales, efficiency, status, loss estimate and a
diagnostic message, computed from a site's latest raw reading.

Nothing here raises on incomplete telemetry. Missing numbers are zero and
missing weather is 'unknown'; all of that defaulting happens in
``normalize_reading`` so the rest of the module works on clean values.
"""
import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from fleet_monitor import config
from telemetry_simulator.weather import classify

NORMAL = "normal"
WARNING = "warning"
DANGER = "danger"

MAX_EFFICIENCY = 99.9
LOW_EFFICIENCY = 10.0

WEATHER_CAUSES = {
    "snow": "heavy snow",
    "rain": "rainfall",
    "fog": "fog/haze",
    "cloudy": "overcast",
}

MSG_LOW_EFFICIENCY = "efficiency sharply degraded — inspection recommended"
MSG_FAULT = "equipment fault — urgent inspection required"
MSG_OK = "no anomalies — operating at optimal efficiency"


@dataclass(frozen=True)
class NormalizedReading:
    generation: float = 0.0
    consumption: float = 0.0
    is_error: bool = False
    weather: str = ""


@dataclass(frozen=True)
class DerivedMetrics:
    site_id: Optional[int]
    generation: float
    capacity: float
    sales: float
    efficiency: float
    status: str
    loss_estimate: int
    diagnostic_message: str
    weather_category: str

    @property
    def loss_amount(self) -> str:
        return f"{self.loss_estimate:,}"

    def to_dict(self):
        return {
            "sales": self.sales,
            "eff": self.efficiency,
            "status": self.status,
            "loss_estimate": self.loss_estimate,
            "loss_amt": self.loss_amount,
            "ai_msg": self.diagnostic_message,
            "weather_category": self.weather_category,
        }


def as_number(value) -> float:
    if value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def round_half_up(value: float, places: int = 1) -> float:
    """Round halves away from zero, the way the dashboard always displayed them."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def normalize_reading(reading) -> NormalizedReading:
    """Turn a stored row, a simulated reading or ``None`` into clean values."""
    if reading is None:
        return NormalizedReading()
    return NormalizedReading(
        generation=as_number(getattr(reading, "generation", None)),
        consumption=as_number(getattr(reading, "consumption", None)),
        is_error=bool(getattr(reading, "is_error", False)),
        weather=getattr(reading, "weather", None) or "",
    )


def compute_sales(generation: float, consumption: float) -> float:
    return max(0.0, generation - consumption)


def compute_efficiency(generation: float, capacity: float) -> float:
    if capacity <= 0:
        return 0.0
    raw = generation / capacity * 100
    if raw > 100:
        return MAX_EFFICIENCY
    return min(MAX_EFFICIENCY, max(0.0, round_half_up(raw)))


def classify_status(is_error: bool, efficiency: float, weather_category: str):
    """
    Returns ``(status, message)``; message is None when the default applies.
    An error flag always wins. Adverse weather explains low output, so it
    suppresses the low-efficiency warning.
    """
    if is_error:
        return DANGER, None
    if weather_category in WEATHER_CAUSES and efficiency < LOW_EFFICIENCY:
        return NORMAL, f"{WEATHER_CAUSES[weather_category]} reduced output (equipment normal)"
    if 0 < efficiency < LOW_EFFICIENCY:
        return WARNING, MSG_LOW_EFFICIENCY
    return NORMAL, None


def estimate_loss(status: str, capacity: float, smp_price: float) -> int:
    capacity = max(0.0, capacity)
    if status == DANGER:
        return math.floor(capacity * smp_price)
    if status == WARNING:
        return math.floor(capacity * config.WARNING_LOSS_RATIO * smp_price)
    return 0


def derive(site, reading, smp_price: Optional[float] = None) -> DerivedMetrics:
    """Derived metrics for one site and its latest reading (which may be None)."""
    if smp_price is None:
        smp_price = config.SMP_PRICE
    values = normalize_reading(reading)
    capacity = as_number(getattr(site, "capacity", None))

    sales = compute_sales(values.generation, values.consumption)
    efficiency = compute_efficiency(values.generation, capacity)
    category = classify(values.weather).category
    status, message = classify_status(values.is_error, efficiency, category)
    if message is None:
        message = MSG_FAULT if values.is_error else MSG_OK

    return DerivedMetrics(
        site_id=getattr(site, "id", None),
        generation=values.generation,
        capacity=capacity,
        sales=sales,
        efficiency=efficiency,
        status=status,
        loss_estimate=estimate_loss(status, capacity, smp_price),
        diagnostic_message=message,
        weather_category=category,
    )
