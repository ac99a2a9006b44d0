# Constants for simulating solar site telemetry

# Generation multiplier per weather category (fraction of rated capacity)
WEATHER_IMPACT = {
    'clear': 0.9,
    'unknown': 0.9,
    'cloudy': 0.5,
    'rain': 0.25,
    'snow': 0.15,
    'fog': 0.4,
}

# Clear skies are never quite the same twice: 0.85 - 0.95
CLEAR_SKY_JITTER = (0.85, 0.95)

# Categories under which low output is blamed on the weather, not the equipment
ADVERSE_CATEGORIES = frozenset({'cloudy', 'rain', 'snow', 'fog'})

# Keyword rules, most severe first. The first rule with a matching keyword wins.
WEATHER_RULES = (
    ('snow', ('snow',)),
    ('rain', ('rain', 'drizzle', 'thunder')),
    ('fog', ('mist', 'haze', 'fog')),
    ('cloudy', ('cloud', 'overcast')),
    ('clear', ('clear', 'sun')),
)

# Output noise around the weather-adjusted target (±2%)
POWER_JITTER = (0.98, 1.02)

# Grid supply voltage range (V)
VOLTAGE_RANGE = (220.0, 240.0)

# Used when the weather provider cannot be reached
FALLBACK_WEATHER = {
    'temperature': 20.0,
    'humidity': 50.0,
    'weather': 'clear',
}
