"""Tests for the telemetry simulator."""

from datetime import datetime
from types import SimpleNamespace

import pytest

from telemetry_simulator.solar_generator import TelemetrySimulator, WeatherObservation

NOW = datetime(2026, 6, 1, 12, 0, 0)


def site(id=1, capacity=1000.0):
    return SimpleNamespace(id=id, capacity=capacity)


class TestTick:
    def test_same_seed_same_reading(self):
        a = TelemetrySimulator(seed=42).tick(site(), WeatherObservation(weather="Clear"), now=NOW)
        b = TelemetrySimulator(seed=42).tick(site(), WeatherObservation(weather="Clear"), now=NOW)
        assert a == b

    def test_different_seeds_differ(self):
        a = TelemetrySimulator(seed=1).tick(site(), now=NOW)
        b = TelemetrySimulator(seed=2).tick(site(), now=NOW)
        assert a.generation != b.generation

    @pytest.mark.parametrize("weather, factor", [
        ("Clouds", 0.5),
        ("Rain", 0.25),
        ("Snow", 0.15),
        ("Mist", 0.4),
    ])
    def test_power_follows_weather(self, weather, factor):
        sim = TelemetrySimulator(seed=3)
        for _ in range(50):
            r = sim.tick(site(capacity=1000.0), WeatherObservation(weather=weather), now=NOW)
            assert 1000 * factor * 0.98 - 0.01 <= r.generation <= 1000 * factor * 1.02 + 0.01
            assert r.impact_factor == factor

    def test_clear_sky_range(self):
        sim = TelemetrySimulator(seed=5)
        for _ in range(100):
            r = sim.tick(site(capacity=100.0), WeatherObservation(weather="clear sky"), now=NOW)
            assert 0.85 <= r.impact_factor <= 0.95
            assert 100 * 0.85 * 0.98 - 0.01 <= r.generation <= 100 * 0.95 * 1.02 + 0.01

    def test_electrical_values(self):
        r = TelemetrySimulator(seed=9).tick(site(), now=NOW)
        assert 220 <= r.voltage <= 240
        assert r.current == pytest.approx(r.generation * 1000 / r.voltage, rel=1e-3)

    def test_reading_fields(self):
        obs = WeatherObservation(temperature=28.5, humidity=70, weather="Rain")
        r = TelemetrySimulator(seed=0).tick(site(id=7), obs, now=NOW)
        assert r.site_id == 7
        assert r.consumption == 0
        assert r.is_error is False
        assert r.temperature == 28.5
        assert r.humidity == 70
        assert r.weather == "Rain"
        assert r.recorded_at == NOW

    def test_missing_weather_uses_fallback(self):
        r = TelemetrySimulator(seed=0).tick(site(), None, now=NOW)
        assert r.weather == "clear"
        assert r.temperature == 20.0
        assert r.humidity == 50.0

    def test_unrated_site_generates_nothing(self):
        r = TelemetrySimulator(seed=0).tick(site(capacity=0), now=NOW)
        assert r.generation == 0
        assert r.current == 0


def test_tick_fleet_uses_per_site_weather():
    sites = [site(1), site(2)]
    readings = TelemetrySimulator(seed=11).tick_fleet(
        sites, {2: WeatherObservation(weather="Snow")}, now=NOW
    )
    assert [r.site_id for r in readings] == [1, 2]
    assert readings[0].weather == "clear"
    assert readings[1].weather == "Snow"
    assert all(r.recorded_at == NOW for r in readings)


def test_to_dict_serializes_timestamp():
    data = TelemetrySimulator(seed=0).tick(site(), now=NOW).to_dict()
    assert data["recorded_at"] == NOW.isoformat()
    assert data["site_id"] == 1
