"""
Booth Status Board
==================
Per-venue booth statuses kept fresh from the store: on start, after every
submitted report, and on a fixed timer while anyone watches the venue.
"""

import asyncio
import inspect
import logging
from typing import Awaitable, Callable, Dict, List, Optional, Union

from concert_buddy.booths.aggregator import (
    REPORT_WINDOW, BoothStatus, LineReport, MerchBooth, compute_booth_status, sort_statuses,
)
from concert_buddy.config import BOOTH_REFRESH_SECONDS
from concert_buddy.helpers import generate_report_id, utcnow
from concert_buddy.store import Store, StoreError

logger = logging.getLogger(__name__)

UpdateHandler = Callable[[List[BoothStatus]], Union[None, Awaitable[None]]]


class BoothStatusBoard:
    """Aggregated statuses for every booth of one venue."""

    def __init__(
        self,
        store: Store,
        venue_id: str,
        on_update: Optional[UpdateHandler] = None,
        interval: float = BOOTH_REFRESH_SECONDS,
    ):
        self.store = store
        self.venue_id = venue_id
        self.on_update = on_update
        self.interval = interval
        self.statuses: List[BoothStatus] = []
        self._task: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def refresh(self) -> List[BoothStatus]:
        """Re-fetch booths and their newest reports, then replace `statuses`."""
        booth_rows = await self.store.list("merch_booths", where={"venue_id": self.venue_id})

        statuses = []
        for row in booth_rows:
            booth = MerchBooth.from_record(row)
            report_rows = await self.store.list(
                "line_reports",
                where={"booth_id": booth.id},
                order_by=[("reported_at", "desc")],
                limit=REPORT_WINDOW,
            )
            reports = [LineReport.from_record(r) for r in report_rows]
            statuses.append(compute_booth_status(booth, reports))

        # replaced wholesale, never mutated in place
        self.statuses = sort_statuses(statuses)

        if self.on_update is not None:
            result = self.on_update(self.statuses)
            if inspect.isawaitable(result):
                await result
        return self.statuses

    async def submit_report(
        self,
        booth_id: str,
        user_id: str,
        line_length: int,
        wait_time_minutes: Optional[int] = None,
    ) -> Dict:
        """Append a new line report and refresh immediately."""
        if not booth_id or line_length is None:
            raise ValueError("Booth and line length are required")

        report = {
            "id": generate_report_id(),
            "booth_id": booth_id,
            "user_id": user_id,
            "line_length": line_length,
            "wait_time_minutes": wait_time_minutes,
            "reported_at": utcnow(),
        }
        await self.store.create("line_reports", report)
        await self.refresh()
        return report

    async def _poll(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self.refresh()
            except StoreError as e:
                logger.error("Error loading booth statuses for %s: %s", self.venue_id, e)

    async def start(self) -> None:
        """Refresh now, then keep refreshing every `interval` seconds."""
        # start/stop are serialized so at most one poll task exists
        async with self._lock:
            if self.running:
                return
            try:
                await self.refresh()
            except StoreError as e:
                logger.error("Error loading booth statuses for %s: %s", self.venue_id, e)
            self._task = asyncio.create_task(self._poll())
        logger.info("Booth polling started for venue %s (every %ss)", self.venue_id, self.interval)

    async def stop(self) -> None:
        async with self._lock:
            task, self._task = self._task, None
            if task is None:
                return
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        logger.info("Booth polling stopped for venue %s", self.venue_id)


class BoardRegistry:
    """
    Reference-counted boards, one per watched venue.

    The first watcher starts polling and the last one to leave stops it.
    """

    def __init__(self, store: Store, on_update_factory: Optional[Callable[[str], UpdateHandler]] = None):
        self.store = store
        self.on_update_factory = on_update_factory
        self.boards: Dict[str, BoothStatusBoard] = {}
        self.watchers: Dict[str, int] = {}

    async def acquire(self, venue_id: str) -> BoothStatusBoard:
        board = self.boards.get(venue_id)
        if board is None:
            on_update = self.on_update_factory(venue_id) if self.on_update_factory else None
            board = BoothStatusBoard(self.store, venue_id, on_update=on_update)
            self.boards[venue_id] = board
        self.watchers[venue_id] = self.watchers.get(venue_id, 0) + 1
        try:
            await board.start()
        except BaseException:
            await self.release(venue_id)
            raise
        return board

    async def release(self, venue_id: str) -> None:
        count = self.watchers.get(venue_id, 0) - 1
        if count > 0:
            self.watchers[venue_id] = count
            return
        self.watchers.pop(venue_id, None)
        board = self.boards.pop(venue_id, None)
        if board is not None:
            await board.stop()

    def get(self, venue_id: str) -> Optional[BoothStatusBoard]:
        return self.boards.get(venue_id)

    async def shutdown(self) -> None:
        for venue_id in list(self.boards):
            board = self.boards.pop(venue_id)
            await board.stop()
        self.watchers.clear()
