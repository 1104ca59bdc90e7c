import logging
from contextlib import asynccontextmanager
from datetime import date, datetime, timezone
from typing import AsyncGenerator

import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from quickdrop.config import settings
from quickdrop.dashboard.poller import TransferLogPoller
from quickdrop.dashboard.render import RECENT_ROWS, refresh_seconds, render_dashboard
from quickdrop.services.aggregator import performance

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    async with httpx.AsyncClient(base_url=settings.API_URL, timeout=10.0) as client:
        poller = TransferLogPoller(client, interval=settings.POLL_INTERVAL)
        app.state.poller = poller
        poller.start()
        yield
        await poller.stop()


app = FastAPI(
    title=f"{settings.APP_NAME} Dashboard",
    version=settings.VERSION,
    lifespan=lifespan,
)


def get_poller(request: Request) -> TransferLogPoller:
    return request.app.state.poller


def get_today() -> date:
    return datetime.now(timezone.utc).date()


@app.get("/", response_class=HTMLResponse)
async def dashboard(request: Request, today: date = Depends(get_today)) -> HTMLResponse:
    poller = get_poller(request)
    return HTMLResponse(
        render_dashboard(poller.state, today, refresh_seconds(poller.interval))
    )


@app.get("/api/dashboard")
async def dashboard_snapshot(request: Request, today: date = Depends(get_today)) -> dict:
    state = get_poller(request).state
    overview = state.overview.model_dump(mode="json", by_alias=True)
    # Today rolls over between polls, so this part is never taken from the batch.
    overview["performance"] = performance(state.events, today).model_dump(
        mode="json", by_alias=True
    )
    return {
        "loading": state.loading,
        "error": state.error,
        "updatedAt": state.updated_at.isoformat() if state.updated_at else None,
        "recent": [
            event.model_dump(mode="json", by_alias=True)
            for event in state.events[:RECENT_ROWS]
        ],
        "overview": overview,
    }


@app.post("/retry")
async def retry(request: Request) -> RedirectResponse:
    logger.info("Manual retry requested")
    await get_poller(request).retry()
    return RedirectResponse("/", status_code=303)
