"""
Pure helpers that turn fetched weather data into what the page shows.

Nothing in here performs I/O; "today" is taken from the São Paulo clock
unless a date is passed in.
"""

import math
from datetime import date as _date, datetime, timedelta
from typing import Any, Dict, List, NamedTuple, Optional, Union
from zoneinfo import ZoneInfo

from .config import RAIN_PROBABILITY_THRESHOLD, TIMEZONE
from .models import CurrentConditions, DailyForecast


class WeatherBand(NamedTuple):
    upper_bound: int
    icon: str
    description: str


# WMO code bands, checked in order; the first band with code <= upper_bound wins.
WEATHER_BANDS = (
    WeatherBand(0, "☀️", "Céu limpo"),
    WeatherBand(3, "⛅", "Parcialmente nublado"),
    WeatherBand(48, "🌫️", "Neblina"),
    WeatherBand(67, "🌧️", "Chuva"),
    WeatherBand(77, "🌨️", "Neve"),
    WeatherBand(82, "🌧️", "Chuva forte"),
    WeatherBand(86, "🌨️", "Neve forte"),
    WeatherBand(99, "⛈️", "Tempestade"),
)
UNKNOWN_BAND = WeatherBand(-1, "🌤️", "Indefinido")

DAY_NAMES = ("Dom", "Seg", "Ter", "Qua", "Qui", "Sex", "Sáb")  # 0 = Sunday
TODAY_LABEL = "Hoje"
TOMORROW_LABEL = "Amanhã"
RAINING_NOW_MESSAGE = "🌧️ Está chovendo agora!"


def local_today() -> _date:
    return datetime.now(ZoneInfo(TIMEZONE)).date()


def weather_band(code: Optional[int]) -> WeatherBand:
    if code is None or code < 0:
        return UNKNOWN_BAND
    for band in WEATHER_BANDS:
        if code <= band.upper_bound:
            return band
    return UNKNOWN_BAND


def weather_icon(code: Optional[int]) -> str:
    return weather_band(code).icon


def weather_description(code: Optional[int]) -> str:
    return weather_band(code).description


def day_name(day: Union[_date, str]) -> str:
    """3-letter Portuguese weekday for a date or an ISO 'YYYY-MM-DD' string."""
    if isinstance(day, str):
        day = _date.fromisoformat(day)
    return DAY_NAMES[day.isoweekday() % 7]


def _raining_now(current: CurrentConditions) -> bool:
    return current.rain is not None and current.rain > 0


def _rain_likely(probability: Optional[int]) -> bool:
    return probability is not None and probability > RAIN_PROBABILITY_THRESHOLD


def will_rain_soon(
    current: Optional[CurrentConditions], forecast: Optional[DailyForecast]
) -> bool:
    """True if it is raining now or today's rain probability is above the threshold."""
    if current is None or not forecast:
        return False
    if _raining_now(current):
        return True
    return _rain_likely(forecast[0].precipitation_probability_max)


def next_rain_day(
    forecast: Optional[DailyForecast], today: Optional[_date] = None
) -> Optional[str]:
    """
    Label of the first forecast day whose rain probability exceeds the threshold.

    Returns "Hoje" / "Amanhã" relative to ``today``, otherwise the weekday
    abbreviation. Returns None if no day qualifies.
    """
    if not forecast:
        return None
    today = today or local_today()
    for day in forecast:
        if not _rain_likely(day.precipitation_probability_max):
            continue
        if day.date == today:
            return TODAY_LABEL
        if day.date == today + timedelta(days=1):
            return TOMORROW_LABEL
        return day_name(day.date)
    return None


def rain_alert_message(
    current: Optional[CurrentConditions],
    forecast: Optional[DailyForecast],
    today: Optional[_date] = None,
) -> Optional[str]:
    if not will_rain_soon(current, forecast):
        return None
    if _raining_now(current):
        return RAINING_NOW_MESSAGE
    return f"Previsão de chuva para {next_rain_day(forecast, today)}"


def round_half_up(value: Optional[float]) -> Optional[int]:
    """Round .5 towards +inf, the way the browser's Math.round does."""
    if value is None:
        return None
    return int(math.floor(value + 0.5))


def _current_card(current: CurrentConditions) -> Dict[str, Any]:
    return {
        "temperature": round_half_up(current.temperature),
        "description": weather_description(current.weather_code),
        "icon": weather_icon(current.weather_code),
        "precipitation": current.precipitation,
        "rain": current.rain,
        "humidity": current.relative_humidity,
        "wind_speed": round_half_up(current.wind_speed),
        "wind_direction": current.wind_direction,
    }


def _forecast_cards(forecast: DailyForecast) -> List[Dict[str, Any]]:
    cards = []
    for index, day in enumerate(forecast):
        cards.append({
            "date": day.date.isoformat(),
            "label": TODAY_LABEL if index == 0 else day_name(day.date),
            "icon": weather_icon(day.weather_code),
            "temp_max": round_half_up(day.temp_max),
            "temp_min": round_half_up(day.temp_min),
            "rain_probability": day.precipitation_probability_max,
            "precipitation_sum": day.precipitation_sum,
        })
    return cards


def build_dashboard(snapshot, today: Optional[_date] = None) -> Dict[str, Any]:
    """
    View model for one DashboardSnapshot, shared by the HTML page and the JSON API.
    """
    view: Dict[str, Any] = {
        "status": snapshot.status,
        "error": snapshot.error,
        "rain_alert": None,
        "current": None,
        "forecast": [],
        "last_updated": None,
    }
    if snapshot.status != "ready":
        return view

    view["rain_alert"] = rain_alert_message(snapshot.current, snapshot.forecast, today)
    view["current"] = _current_card(snapshot.current)
    view["forecast"] = _forecast_cards(snapshot.forecast)
    if snapshot.updated_at is not None:
        view["last_updated"] = snapshot.updated_at.astimezone(ZoneInfo(TIMEZONE)).strftime("%H:%M:%S")
    return view
