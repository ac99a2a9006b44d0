# Import all models so they are registered on Base.metadata
from .site import Site
from .telemetry import TelemetryLog, WeatherHistory
from .reference import (
    InverterStatus,
    MaintenanceSchedule,
    MarketPrice,
    RevenueEntry,
    SiteAction,
)

__all__ = [
    'Site', 'TelemetryLog', 'WeatherHistory', 'InverterStatus',
    'MaintenanceSchedule', 'MarketPrice', 'RevenueEntry', 'SiteAction',
]
