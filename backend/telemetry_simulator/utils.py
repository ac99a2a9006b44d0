# utility functions for telemetry simulation

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current time as a naive UTC datetime (the store keeps naive UTC)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def current_from_power(power_kw: float, voltage: float) -> float:
    """
    Line current (A) for a power draw (kW) at a given voltage (V).
    Returns 0 for a non-positive voltage.
    """
    if voltage <= 0:
        return 0.0
    return power_kw * 1000 / voltage
