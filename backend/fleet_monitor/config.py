import os

# Database / cache
DATABASE_URL = os.environ.get("DATABASE_URL", "sqlite:///./solar.db")
REDIS_URL = os.environ.get("REDIS_URL", "redis://localhost:6379/0")

# Weather provider (OpenWeatherMap)
OPENWEATHER_API_KEY = os.environ.get("OPENWEATHER_API_KEY")
OPENWEATHER_URL = os.environ.get("OPENWEATHER_URL", "https://api.openweathermap.org/data/2.5/weather")
WEATHER_CITY = os.environ.get("WEATHER_CITY", "Seoul")
WEATHER_TIMEOUT_SECONDS = float(os.environ.get("WEATHER_TIMEOUT_SECONDS", "10"))

# Pricing and reporting policy
SMP_PRICE = float(os.environ.get("SMP_PRICE", "150.0"))  # reference price per kWh
WARNING_LOSS_RATIO = 0.2
CARBON_FACTOR_KG_PER_KWH = 0.424
CARBON_MULTIPLIER = float(os.environ.get("CARBON_MULTIPLIER", "10"))
REVENUE_PROJECTION_FACTOR = float(os.environ.get("REVENUE_PROJECTION_FACTOR", "0.55"))

# Scheduling
RETENTION_HOURS = int(os.environ.get("RETENTION_HOURS", "24"))
SIMULATION_INTERVAL_MINUTES = int(os.environ.get("SIMULATION_INTERVAL_MINUTES", "10"))
WEATHER_REFRESH_MINUTES = int(os.environ.get("WEATHER_REFRESH_MINUTES", "30"))
SNAPSHOT_CACHE_SECONDS = int(os.environ.get("SNAPSHOT_CACHE_SECONDS", "30"))

# HTTP
CORS_ORIGINS = [o.strip() for o in os.environ.get(
    "CORS_ORIGINS", "http://localhost,http://localhost:3000,http://localhost:5173"
).split(",") if o.strip()]

# Server
HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "8000"))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
