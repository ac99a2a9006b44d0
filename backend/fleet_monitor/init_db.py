import logging
from datetime import date, timedelta

from fleet_monitor.database import SessionLocal, Base, engine

# Import all models to ensure they are registered with SQLAlchemy
from fleet_monitor.models import (
    InverterStatus,
    MaintenanceSchedule,
    MarketPrice,
    RevenueEntry,
    Site,
    SiteAction,
)

logger = logging.getLogger(__name__)

SAMPLE_SITES = [
    {"name": "Yeongam Solar Park", "lat": 34.80, "lng": 126.46, "capacity": 1000.0},
    {"name": "Haenam Solar Farm", "lat": 34.57, "lng": 126.60, "capacity": 500.0},
    {"name": "Sinan Rooftop Array", "lat": 34.83, "lng": 126.10, "capacity": 100.0},
]


def seed(db) -> bool:
    """Add demo sites and reference rows. Returns False if sites already exist."""
    if db.query(Site).first() is not None:
        return False

    sites = [Site(**data) for data in SAMPLE_SITES]
    db.add_all(sites)
    db.flush()

    today = date.today()
    for site in sites:
        db.add(SiteAction(site_id=site.id, action_text="Clean panel surfaces"))
        db.add(SiteAction(site_id=site.id, action_text="Check inverter fan"))
        db.add(InverterStatus(name=f"INV-{site.id:02d}", efficiency=0, status="normal"))
        db.add(MaintenanceSchedule(
            site_id=site.id,
            task="Quarterly inspection",
            scheduled_on=today + timedelta(days=7 * site.id),
        ))

    for offset in range(5, -1, -1):
        year, month = divmod(today.year * 12 + today.month - 1 - offset, 12)
        db.add(RevenueEntry(month=f"{year}-{month + 1:02d}", amount=0))

    db.add(MarketPrice(type="SMP", price=150.0, change_val=0))
    db.add(MarketPrice(type="REC", price=70000.0, change_val=0))
    db.commit()
    return True


def init_db():
    # Create all tables
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        if seed(db):
            logger.info("Sample sites created")
        else:
            logger.info("Database already contains sites. Skipping initialization.")
    except Exception as e:
        logger.error("Error initializing database: %s", e)
        db.rollback()
        raise
    finally:
        db.close()

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
