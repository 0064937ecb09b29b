import asyncio
import logging
from typing import Tuple

import httpx

from .config import (
    CURRENT_FIELDS,
    DAILY_FIELDS,
    FORECAST_DAYS,
    HTTP_TIMEOUT_SECS,
    LATITUDE,
    LONGITUDE,
    OPEN_METEO,
    TIMEZONE,
    USER_AGENT,
)
from .errors import FetchError
from .models import CurrentConditions, DailyForecast, parse_daily_forecast


logger = logging.getLogger(__name__)


def current_params() -> dict:
    return {
        "latitude": LATITUDE,
        "longitude": LONGITUDE,
        "current": ",".join(CURRENT_FIELDS),
        "timezone": TIMEZONE,
    }


def forecast_params() -> dict:
    return {
        "latitude": LATITUDE,
        "longitude": LONGITUDE,
        "daily": ",".join(DAILY_FIELDS),
        "timezone": TIMEZONE,
        "forecast_days": FORECAST_DAYS,
    }


async def fetch_current_conditions(client: httpx.AsyncClient) -> CurrentConditions:
    """Fetch the current conditions block for the fixed location."""
    r = await client.get(OPEN_METEO, params=current_params(), headers=USER_AGENT)
    r.raise_for_status()
    return CurrentConditions.from_open_meteo(r.json())


async def fetch_daily_forecast(client: httpx.AsyncClient) -> DailyForecast:
    """Fetch the 5-day daily forecast for the fixed location."""
    r = await client.get(OPEN_METEO, params=forecast_params(), headers=USER_AGENT)
    r.raise_for_status()
    return parse_daily_forecast(r.json())


async def fetch_weather() -> Tuple[CurrentConditions, DailyForecast]:
    """
    Run both requests concurrently and return (current, forecast).

    The pair is all-or-nothing: if either request fails for any reason
    (non-2xx status, network error, bad JSON, unexpected shape) a FetchError
    with a generic message is raised and neither dataset is returned.
    """
    try:
        async with httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECS) as client:
            current, forecast = await asyncio.gather(
                fetch_current_conditions(client),
                fetch_daily_forecast(client),
            )
    except httpx.HTTPStatusError as e:
        logger.warning(f"Open-Meteo HTTP error {e.response.status_code} for {e.request.url}")
        raise FetchError() from e
    except httpx.HTTPError as e:
        logger.warning(f"Open-Meteo request failed: {e!r}")
        raise FetchError() from e
    except ValueError as e:
        # json.JSONDecodeError and pydantic.ValidationError are both ValueErrors
        logger.warning(f"Open-Meteo payload rejected: {e}")
        raise FetchError() from e

    return current, forecast
