# weather.py
"""
Weather classification shared by the simulator and the metrics deriver.

Provider text such as "light rain", "Clouds" or "Thunderstorm" is reduced to a
discrete category plus a generation multiplier.
"""
import random
from dataclasses import dataclass
from typing import Optional

from .constants import (
    ADVERSE_CATEGORIES,
    CLEAR_SKY_JITTER,
    WEATHER_IMPACT,
    WEATHER_RULES,
)

CLEAR_LIKE = ('clear', 'unknown')


@dataclass(frozen=True)
class WeatherClass:
    category: str
    impact_factor: float

    @property
    def is_adverse(self) -> bool:
        return self.category in ADVERSE_CATEGORIES


def match_category(description: Optional[str]) -> str:
    """
    Return the most severe category whose keywords appear in the description.
    Empty or unrecognised text is 'unknown'.
    """
    text = (description or '').strip().lower()
    if not text:
        return 'unknown'
    for category, keywords in WEATHER_RULES:
        if any(keyword in text for keyword in keywords):
            return category
    return 'unknown'


def impact_factor(category: str, rng: Optional[random.Random] = None) -> float:
    """
    Generation multiplier for a category, in [0, 1].
    Clear-like skies get a small jitter when a random source is supplied.
    """
    if category in CLEAR_LIKE and rng is not None:
        return rng.uniform(*CLEAR_SKY_JITTER)
    return WEATHER_IMPACT.get(category, WEATHER_IMPACT['unknown'])


def classify(description: Optional[str], rng: Optional[random.Random] = None) -> WeatherClass:
    category = match_category(description)
    return WeatherClass(category=category, impact_factor=impact_factor(category, rng))
