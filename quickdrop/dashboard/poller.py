import asyncio
import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

import httpx
from pydantic import TypeAdapter

from quickdrop.schemas.dashboard import DashboardOverview
from quickdrop.schemas.transfer_event import TransferEvent
from quickdrop.services.aggregator import build_overview

logger = logging.getLogger(__name__)

CONNECTION_ERROR = "Error fetching logs. Please check your server connection."

events_adapter = TypeAdapter(list[TransferEvent])


class NetworkError(Exception):
    """The Query API could not be reached or returned an unusable response."""


@dataclass(frozen=True)
class DashboardState:
    events: list[TransferEvent] = field(default_factory=list)
    overview: DashboardOverview = field(default_factory=lambda: build_overview([]))
    loading: bool = True
    error: str | None = None
    updated_at: datetime | None = None


class TransferLogPoller:
    """Owns the dashboard state and the task that keeps it fresh.

    Every ``interval`` seconds a fetch is scheduled without waiting for the
    previous one; whichever response lands last wins. A failed fetch puts
    the state into its error form but does not stop the loop, and
    :meth:`retry` fetches immediately on demand.
    """

    def __init__(self, client: httpx.AsyncClient, interval: float = 5.0) -> None:
        self.client = client
        self.interval = interval
        self.state = DashboardState()
        self._task: asyncio.Task | None = None
        self._inflight: set[asyncio.Task] = set()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def fetch_events(self) -> list[TransferEvent]:
        try:
            response = await self.client.get("/api/logs")
            response.raise_for_status()
            return events_adapter.validate_python(response.json())
        except (httpx.HTTPError, ValueError) as exc:
            raise NetworkError(str(exc) or exc.__class__.__name__) from exc

    async def refresh(self) -> DashboardState:
        try:
            events = await self.fetch_events()
        except NetworkError as exc:
            logger.error("Polling transfer logs failed: %s", exc)
            self.state = replace(self.state, loading=False, error=CONNECTION_ERROR)
            return self.state
        self.state = DashboardState(
            events=events,
            overview=build_overview(events),
            loading=False,
            error=None,
            updated_at=datetime.now(timezone.utc),
        )
        logger.debug("Fetched %d transfer logs", len(events))
        return self.state

    async def retry(self) -> DashboardState:
        self.state = replace(self.state, loading=True)
        return await self.refresh()

    def schedule_refresh(self) -> asyncio.Task:
        task = asyncio.create_task(self.refresh())
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return task

    async def _run(self) -> None:
        while True:
            self.schedule_refresh()
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self.running:
            return
        logger.info("Polling %s every %.1fs", self.client.base_url, self.interval)
        self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        tasks = list(self._inflight)
        if self._task is not None:
            tasks.append(self._task)
            self._task = None
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
