from datetime import date as _date
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


def _block(payload: Any, key: str) -> Dict[str, Any]:
    """Return payload[key] as a dict, or raise ValueError if the shape is wrong."""
    if not isinstance(payload, dict):
        raise ValueError(f"expected a JSON object, got {type(payload).__name__}")
    block = payload.get(key)
    if not isinstance(block, dict):
        raise ValueError(f"'{key}' block is missing or not an object")
    return block


class CurrentConditions(BaseModel):
    """
    Instantaneous snapshot from the Open-Meteo ``current`` block.

    Every key must be present; upstream may send null for a value.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    temperature: Optional[float] = Field(..., alias="temperature_2m")
    relative_humidity: Optional[int] = Field(..., alias="relative_humidity_2m")
    precipitation: Optional[float]
    rain: Optional[float]
    weather_code: Optional[int]
    wind_speed: Optional[float] = Field(..., alias="wind_speed_10m")
    wind_direction: Optional[int] = Field(..., alias="wind_direction_10m")

    @classmethod
    def from_open_meteo(cls, payload: Any) -> "CurrentConditions":
        return cls.model_validate(_block(payload, "current"))


class ForecastDay(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: _date
    temp_max: Optional[float] = None
    temp_min: Optional[float] = None
    precipitation_sum: Optional[float] = None
    precipitation_probability_max: Optional[int] = Field(None, ge=0, le=100)
    weather_code: Optional[int] = None


# Index 0 is today.
DailyForecast = Tuple[ForecastDay, ...]

# ForecastDay field -> Open-Meteo daily column
_DAILY_COLUMNS = {
    "date": "time",
    "temp_max": "temperature_2m_max",
    "temp_min": "temperature_2m_min",
    "precipitation_sum": "precipitation_sum",
    "precipitation_probability_max": "precipitation_probability_max",
    "weather_code": "weather_code",
}


def parse_daily_forecast(payload: Any) -> DailyForecast:
    """
    Turn the column-oriented ``daily`` block into one ForecastDay per date.

    Raises ValueError if the block or a column is missing, a column is not a
    list, or the columns disagree in length.
    """
    daily = _block(payload, "daily")
    columns = {}
    for field, key in _DAILY_COLUMNS.items():
        if key not in daily:
            raise ValueError(f"daily block is missing '{key}'")
        values = daily[key]
        if not isinstance(values, list):
            raise ValueError(f"daily column '{key}' is not a list")
        columns[field] = values

    lengths = {len(values) for values in columns.values()}
    if len(lengths) != 1:
        raise ValueError(f"daily columns have mismatched lengths: {sorted(lengths)}")

    count = lengths.pop()
    return tuple(
        ForecastDay.model_validate({field: values[i] for field, values in columns.items()})
        for i in range(count)
    )
