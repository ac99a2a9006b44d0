# solar_generator.py
import random
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional

from .constants import FALLBACK_WEATHER, POWER_JITTER, VOLTAGE_RANGE
from .utils import current_from_power, utcnow
from .weather import classify


@dataclass(frozen=True)
class WeatherObservation:
    temperature: float = FALLBACK_WEATHER['temperature']
    humidity: float = FALLBACK_WEATHER['humidity']
    weather: str = FALLBACK_WEATHER['weather']
    description: Optional[str] = None

    @classmethod
    def fallback(cls) -> 'WeatherObservation':
        return cls()


@dataclass
class SimulatedReading:
    site_id: int
    generation: float
    consumption: float
    voltage: float
    current: float
    temperature: float
    humidity: float
    weather: str
    recorded_at: datetime
    is_error: bool = False
    predicted_failure_at: Optional[datetime] = None
    chart_labels: Optional[List[str]] = None
    chart_values: Optional[List[float]] = None
    impact_factor: float = field(default=1.0, compare=False)

    def to_dict(self) -> Dict:
        data = asdict(self)
        data['recorded_at'] = self.recorded_at.isoformat()
        if self.predicted_failure_at:
            data['predicted_failure_at'] = self.predicted_failure_at.isoformat()
        return data


class TelemetrySimulator:
    """
    Stand-in for real inverter hardware: turns a site's rated capacity and the
    weather outside into a plausible (voltage, current, power) reading.

    All randomness comes from ``self.rng``; pass ``seed`` (or an ``rng``) for
    reproducible runs.
    """
    def __init__(self, seed=None, rng: Optional[random.Random] = None):
        self.rng = rng if rng is not None else random.Random(seed)

    def target_power(self, capacity_kw: float, impact: float) -> float:
        return max(0.0, capacity_kw or 0.0) * impact

    def apply_jitter(self, power_kw: float) -> float:
        return power_kw * self.rng.uniform(*POWER_JITTER)

    def pick_voltage(self) -> float:
        return self.rng.uniform(*VOLTAGE_RANGE)

    def tick(
        self,
        site,
        current_weather: Optional[WeatherObservation] = None,
        now: Optional[datetime] = None,
    ) -> SimulatedReading:
        """
        Produce one reading for ``site`` (anything with ``id`` and ``capacity``).
        Consumption is not simulated and is always 0.
        """
        observation = current_weather or WeatherObservation.fallback()
        # 1. Weather impact (clear skies jitter)
        weather = classify(observation.weather, rng=self.rng)
        # 2. Weather-adjusted target
        target = self.target_power(site.capacity, weather.impact_factor)
        # 3. ±2% noise
        final_power = self.apply_jitter(target)
        # 4. Electrical split
        voltage = self.pick_voltage()
        current = current_from_power(final_power, voltage)
        return SimulatedReading(
            site_id=site.id,
            generation=round(final_power, 2),
            consumption=0.0,
            voltage=round(voltage, 1),
            current=round(current, 2),
            temperature=observation.temperature,
            humidity=observation.humidity,
            weather=observation.weather,
            recorded_at=now or utcnow(),
            impact_factor=weather.impact_factor,
        )

    def tick_fleet(
        self,
        sites: Iterable,
        weather_by_site: Optional[Dict[int, WeatherObservation]] = None,
        now: Optional[datetime] = None,
    ) -> List[SimulatedReading]:
        """
        One reading per site, all stamped with the same time.
        Sites without an observation use the fallback weather.
        """
        weather_by_site = weather_by_site or {}
        now = now or utcnow()
        return [self.tick(site, weather_by_site.get(site.id), now=now) for site in sites]
