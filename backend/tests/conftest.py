"""Pytest configuration and fixtures."""

import os
from datetime import datetime
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Keep the app away from any real database while it is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")

from fleet_monitor.database import Base, get_db
from fleet_monitor import models  # noqa: F401
from fleet_monitor.models import Site, TelemetryLog

TEST_DATABASE_URL = "sqlite://"

NOW = datetime(2026, 6, 1, 12, 0, 0)


@pytest.fixture(scope="function")
def test_engine():
    engine = create_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db(test_engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_site(db):
    def _make(name="Site", capacity=1000.0, lat=35.0, lng=127.0):
        site = Site(name=name, capacity=capacity, lat=lat, lng=lng)
        db.add(site)
        db.commit()
        return site
    return _make


@pytest.fixture
def add_log(db):
    def _add(site, recorded_at=NOW, gen=0.0, cons=0.0, weather="Clear", is_error=False, **kwargs):
        row = TelemetryLog(
            site_id=site.id,
            recorded_at=recorded_at,
            gen=gen,
            cons=cons,
            weather=weather,
            is_error=is_error,
            **kwargs,
        )
        db.add(row)
        db.commit()
        return row
    return _add


@pytest.fixture
def client(db):
    """Test client with the database dependency overridden and Redis bypassed."""
    from fleet_monitor.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with patch("fleet_monitor.routes.solar.get_cache", return_value=None), \
            patch("fleet_monitor.routes.solar.set_cache"), \
            patch("fleet_monitor.routes.solar.invalidate_cache"):
        with TestClient(app) as test_client:
            yield test_client
    app.dependency_overrides.clear()
