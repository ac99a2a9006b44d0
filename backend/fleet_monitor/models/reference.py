"""Auxiliary tables the dashboard shows largely as-is."""
from sqlalchemy import Column, Float, String, Integer, ForeignKey, Date
from sqlalchemy.orm import relationship
from fleet_monitor.database import Base


class SiteAction(Base):
    __tablename__ = "solar_actions"

    id = Column(Integer, primary_key=True, index=True)
    site_id = Column(Integer, ForeignKey("solar_sites.id"), nullable=False, index=True)
    action_text = Column(String(255), nullable=False)

    site = relationship("Site", back_populates="actions")


class RevenueEntry(Base):
    __tablename__ = "solar_revenue"

    id = Column(Integer, primary_key=True, index=True)
    month = Column(String(20), nullable=False)
    amount = Column(Float, nullable=False, default=0)

    def to_dict(self):
        return {"id": self.id, "month": self.month, "amount": self.amount}


class InverterStatus(Base):
    __tablename__ = "solar_inverter_status"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    efficiency = Column(Float, default=0)
    status = Column(String(20), default="normal")
    temperature = Column(Float)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "efficiency": self.efficiency,
            "status": self.status,
            "temperature": self.temperature,
        }


class MarketPrice(Base):
    __tablename__ = "solar_market"

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String(20), unique=True, nullable=False)  # "SMP", "REC"
    price = Column(Float, nullable=False)
    change_val = Column(Float, default=0)

    def to_dict(self):
        return {"id": self.id, "type": self.type, "price": self.price, "change_val": self.change_val}


class MaintenanceSchedule(Base):
    __tablename__ = "solar_schedule"

    id = Column(Integer, primary_key=True, index=True)
    site_id = Column(Integer, ForeignKey("solar_sites.id"), index=True)
    task = Column(String(255), nullable=False)
    scheduled_on = Column(Date)
    status = Column(String(20), default="scheduled")

    def to_dict(self):
        return {
            "id": self.id,
            "site_id": self.site_id,
            "task": self.task,
            "scheduled_on": self.scheduled_on.isoformat() if self.scheduled_on else None,
            "status": self.status,
        }
