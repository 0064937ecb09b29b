# config.py
"""
Fixed settings for the São Paulo rain dashboard.

Everything here is a constant: one location, one upstream API, one polling
interval. Nothing is read from the environment.
"""

# ---------------------------- Location --------------------------------

CITY_LABEL = "São Paulo, Brasil"
LATITUDE = -23.5505
LONGITUDE = -46.6333
TIMEZONE = "America/Sao_Paulo"

# ---------------------------- Upstream --------------------------------

OPEN_METEO = "https://api.open-meteo.com/v1/forecast"
USER_AGENT = {"User-Agent": "SP-RainDashboard/1.0"}
HTTP_TIMEOUT_SECS = 10.0
FORECAST_DAYS = 5

CURRENT_FIELDS = (
    "temperature_2m",
    "relative_humidity_2m",
    "precipitation",
    "rain",
    "weather_code",
    "wind_speed_10m",
    "wind_direction_10m",
)
DAILY_FIELDS = (
    "temperature_2m_max",
    "temperature_2m_min",
    "precipitation_sum",
    "precipitation_probability_max",
    "weather_code",
)

# ---------------------------- Behaviour -------------------------------

REFRESH_INTERVAL_SECS = 600  # 10 minutes
RAIN_PROBABILITY_THRESHOLD = 50  # percent, strictly greater-than

# ---------------------------- Server ----------------------------------

DEFAULT_PORT = 8080
