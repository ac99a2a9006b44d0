from sqlalchemy import Boolean, Column, Float, String, DateTime, Integer, ForeignKey, JSON
from sqlalchemy.orm import relationship
from fleet_monitor.database import Base


class TelemetryLog(Base):
    """Raw, append-only telemetry. One row per site per simulation tick."""
    __tablename__ = "solar_logs"

    id = Column(Integer, primary_key=True, index=True)
    site_id = Column(Integer, ForeignKey("solar_sites.id"), nullable=False, index=True)
    recorded_at = Column(DateTime, nullable=False, index=True)
    gen = Column(Float)  # kW
    cons = Column(Float)  # kW
    voltage = Column(Float)
    current = Column(Float)
    temp = Column(Float)
    humidity = Column(Float)
    weather = Column(String(100))  # provider text, e.g. "Clear", "light rain"
    is_error = Column(Boolean, nullable=False, default=False)
    predicted_failure_at = Column(DateTime)
    chart_labels = Column(JSON)
    chart_values = Column(JSON)

    site = relationship("Site", back_populates="logs")

    # Reading-shaped accessors used by the metrics deriver
    @property
    def generation(self):
        return self.gen

    @property
    def consumption(self):
        return self.cons

    @property
    def temperature(self):
        return self.temp

    def to_dict(self):
        return {
            "id": self.id,
            "site_id": self.site_id,
            "recorded_at": self.recorded_at.isoformat() if self.recorded_at else None,
            "gen": self.gen,
            "cons": self.cons,
            "voltage": self.voltage,
            "current": self.current,
            "temp": self.temp,
            "humidity": self.humidity,
            "weather": self.weather,
            "is_error": bool(self.is_error),
            "predicted_failure_at": self.predicted_failure_at.isoformat() if self.predicted_failure_at else None,
        }


class WeatherHistory(Base):
    """Weather observations per site, recorded at a coarse cadence."""
    __tablename__ = "solar_weather_history"

    id = Column(Integer, primary_key=True, index=True)
    site_id = Column(Integer, ForeignKey("solar_sites.id"), nullable=False, index=True)
    temp = Column(Float)
    humidity = Column(Float)
    weather = Column(String(100))
    recorded_at = Column(DateTime, nullable=False, index=True)

    def to_dict(self):
        return {
            "id": self.id,
            "site_id": self.site_id,
            "temp": self.temp,
            "humidity": self.humidity,
            "weather": self.weather,
            "recorded_at": self.recorded_at.isoformat() if self.recorded_at else None,
        }
