import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from .config import CITY_LABEL, DEFAULT_PORT, REFRESH_INTERVAL_SECS
from .presentation import build_dashboard
from .state import WeatherPoller


logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
REFRESH_JOB_ID = "weather-refresh"
LOADING_RELOAD_SECS = 5

# ---------------------------- Scheduler -------------------------------

scheduler = AsyncIOScheduler(timezone=timezone.utc)

# ---------------------------- State -----------------------------------

poller = WeatherPoller()


def schedule_refresh() -> None:
    """Register the recurring refresh; the first run fires immediately."""
    scheduler.add_job(
        poller.refresh,
        trigger=IntervalTrigger(seconds=REFRESH_INTERVAL_SECS, timezone=timezone.utc),
        id=REFRESH_JOB_ID,
        next_run_time=datetime.now(timezone.utc),
        max_instances=1,
        coalesce=True,
        replace_existing=True,
    )


# --------------------------- Lifespan ---------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    poller.start()
    if not scheduler.running:
        scheduler.start()
    schedule_refresh()
    logger.info(f"Weather refresh scheduled every {REFRESH_INTERVAL_SECS}s")
    try:
        yield
    finally:
        # Shutdown: cancel the timer, ignore any response still in flight
        if scheduler.get_job(REFRESH_JOB_ID):
            scheduler.remove_job(REFRESH_JOB_ID)
        if scheduler.running:
            scheduler.shutdown(wait=False)
        poller.close()
        logger.info("Weather refresh stopped")


# ---------------------------- App -------------------------------------

app = FastAPI(title="São Paulo Rain Dashboard", lifespan=lifespan)
app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))


# --------------------------- Endpoints --------------------------------

@app.get("/", response_class=HTMLResponse)
async def index(request: Request):
    view = build_dashboard(poller.store.snapshot)
    reload_after = LOADING_RELOAD_SECS if view["status"] == "loading" else REFRESH_INTERVAL_SECS
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        {"view": view, "city": CITY_LABEL, "reload_after": reload_after},
    )


@app.get("/api/weather")
async def api_weather():
    return build_dashboard(poller.store.snapshot)


@app.post("/api/refresh")
async def api_refresh():
    """Run one fetch cycle now, outside the timer."""
    ran = await poller.refresh()
    if not ran:
        return {"status": "skipped"}
    snapshot = poller.store.snapshot
    if snapshot.status == "error":
        return {"status": "error", "error": snapshot.error}
    return {"status": "refreshed"}


@app.get("/healthz")
async def healthz():
    return {"status": "ok"}


def main():
    """Main entry point."""
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    port = DEFAULT_PORT
    if len(sys.argv) > 1:
        try:
            port = int(sys.argv[1])
        except ValueError:
            logger.error(f"Invalid port: {sys.argv[1]}")
            sys.exit(1)

    logger.info(f"Starting rain dashboard on port {port}")
    uvicorn.run(app, host="0.0.0.0", port=port, log_level="info")


if __name__ == "__main__":
    main()
