# Initialize the fleet_monitor package
from .database import Base, SessionLocal, engine

# Export commonly used classes
__all__ = ['Base', 'SessionLocal', 'engine']
