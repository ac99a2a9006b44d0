from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy import create_engine

from fleet_monitor.config import DATABASE_URL

# Initialize Base class for declarative models
Base = declarative_base()

connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

# Create engine instance
engine = create_engine(DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)

# Create sessionmaker
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)

# Export these for use in other modules
__all__ = ['Base', 'SessionLocal', 'engine']

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
