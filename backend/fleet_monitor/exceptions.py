class FleetMonitorError(Exception):
    """Base class for fleet monitor errors."""


class TelemetryStoreError(FleetMonitorError):
    """The telemetry store could not be read or written."""


class WeatherProviderError(FleetMonitorError):
    """The weather provider returned no usable observation."""
