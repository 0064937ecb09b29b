"""
Dashboard state ownership.

DashboardStore holds the one snapshot the page is rendered from and only
changes it through three transitions (start_loading, mark_ready,
mark_error). WeatherPoller is the single writer: it runs fetch cycles one
at a time and drops results that arrive after it has been closed.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from .errors import FETCH_ERROR_MESSAGE, FetchError
from .models import CurrentConditions, DailyForecast
from .services import fetch_weather


logger = logging.getLogger(__name__)

Fetcher = Callable[[], Awaitable[Tuple[CurrentConditions, DailyForecast]]]


class DashboardSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    loading: bool = True
    error: Optional[str] = None
    current: Optional[CurrentConditions] = None
    forecast: Optional[DailyForecast] = None
    updated_at: Optional[datetime] = None

    @property
    def status(self) -> str:
        if self.loading:
            return "loading"
        if self.error:
            return "error"
        return "ready"


class DashboardStore:
    def __init__(self):
        self._snapshot = DashboardSnapshot()

    @property
    def snapshot(self) -> DashboardSnapshot:
        return self._snapshot

    def start_loading(self) -> DashboardSnapshot:
        self._snapshot = self._snapshot.model_copy(update={"loading": True, "error": None})
        return self._snapshot

    def mark_ready(self, current: CurrentConditions, forecast: DailyForecast) -> DashboardSnapshot:
        self._snapshot = DashboardSnapshot(
            loading=False,
            error=None,
            current=current,
            forecast=forecast,
            updated_at=datetime.now(timezone.utc),
        )
        return self._snapshot

    def mark_error(self, message: str) -> DashboardSnapshot:
        # current and forecast are dropped together
        self._snapshot = DashboardSnapshot(
            loading=False,
            error=message,
            updated_at=self._snapshot.updated_at,
        )
        return self._snapshot


class WeatherPoller:
    """Runs fetch cycles against a DashboardStore, at most one at a time."""

    def __init__(self, store: Optional[DashboardStore] = None, fetcher: Fetcher = fetch_weather):
        self.store = store or DashboardStore()
        self._fetcher = fetcher
        self._lock = asyncio.Lock()
        self._closed = False

    @property
    def in_flight(self) -> bool:
        return self._lock.locked()

    @property
    def closed(self) -> bool:
        return self._closed

    def start(self) -> None:
        self._closed = False

    def close(self) -> None:
        self._closed = True

    async def refresh(self) -> bool:
        """
        Run one fetch cycle.

        Returns True if the cycle ran and its outcome (data or error) was
        recorded, False if it was skipped (another cycle in flight, or the
        poller is closed) or finished after close(). A FetchError is
        recorded in the store, not raised. Any other exception still moves
        the store out of loading before it propagates.
        """
        if self._closed:
            return False
        if self._lock.locked():
            logger.warning("Weather refresh skipped: previous cycle still in flight")
            return False

        async with self._lock:
            self.store.start_loading()
            try:
                current, forecast = await self._fetcher()
            except FetchError as e:
                if self._closed:
                    return False
                logger.warning(f"Weather refresh failed: {e}")
                self.store.mark_error(str(e))
                return True
            except Exception:
                # leave loading even on a bug; the scheduler logs the traceback
                if not self._closed:
                    self.store.mark_error(FETCH_ERROR_MESSAGE)
                raise

            if self._closed:
                logger.info("Discarding weather data received after shutdown")
                return False
            self.store.mark_ready(current, forecast)
            logger.info(
                f"Weather refreshed: {current.temperature}°C, code {current.weather_code}, "
                f"{len(forecast)} forecast days"
            )
            return True
