"""Tests for weather classification."""

import random

import pytest

from telemetry_simulator.weather import classify, impact_factor, match_category


class TestMatchCategory:
    """Keyword matching and precedence."""

    @pytest.mark.parametrize("text, expected", [
        ("Clear", "clear"),
        ("sunny intervals", "clear"),
        ("Clouds", "cloudy"),
        ("OVERCAST", "cloudy"),
        ("light rain", "rain"),
        ("Drizzle", "rain"),
        ("Thunderstorm", "rain"),
        ("Snow", "snow"),
        ("Mist", "fog"),
        ("Haze", "fog"),
        ("fog", "fog"),
    ])
    def test_keywords(self, text, expected):
        assert match_category(text) == expected

    def test_most_severe_wins(self):
        assert match_category("rain and snow") == "snow"
        assert match_category("thunder with fog") == "rain"
        assert match_category("fog, cloudy") == "fog"
        assert match_category("clear then cloudy") == "cloudy"

    def test_empty_and_unrecognised_text(self):
        assert match_category(None) == "unknown"
        assert match_category("   ") == "unknown"
        assert match_category("Tornado") == "unknown"


class TestImpactFactor:
    """Generation multipliers."""

    def test_fixed_factors(self):
        assert impact_factor("cloudy") == 0.5
        assert impact_factor("rain") == 0.25
        assert impact_factor("snow") == 0.15
        assert impact_factor("fog") == 0.4

    def test_clear_without_rng_is_deterministic(self):
        assert impact_factor("clear") == 0.9
        assert impact_factor("unknown") == 0.9

    def test_clear_jitter_stays_in_range(self):
        rng = random.Random(7)
        for _ in range(200):
            assert 0.85 <= impact_factor("clear", rng) <= 0.95

    def test_adverse_factors_ignore_rng(self):
        assert impact_factor("rain", random.Random(1)) == 0.25


def test_classify_reports_adverse_weather():
    assert classify("Rain").is_adverse
    assert classify("Clouds").is_adverse
    assert not classify("Clear").is_adverse
    assert not classify("").is_adverse
