from sqlalchemy import Column, Integer, String, Float
from sqlalchemy.orm import relationship
from fleet_monitor.database import Base


class Site(Base):
    __tablename__ = "solar_sites"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), index=True, nullable=False)
    lat = Column(Float, nullable=False)
    lng = Column(Float, nullable=False)
    capacity = Column(Float, nullable=False, default=0.0)  # rated kW

    # Relationships
    logs = relationship("TelemetryLog", back_populates="site")
    actions = relationship("SiteAction", back_populates="site", order_by="SiteAction.id")

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "lat": self.lat,
            "lng": self.lng,
            "capacity": self.capacity,
        }
