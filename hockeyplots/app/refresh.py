import asyncio
from typing import Callable, Optional, Set

from loguru import logger

from hockeyplots.feeds.base_feed import BaseFeed, FeedError
from hockeyplots.models.feed import FeedBatch
from hockeyplots.reconciliation.reconciler import Reconciler, ReconciliationReport
from hockeyplots.reference.store import ReferenceData
from hockeyplots.storage.base import GameLedger


class RefreshController:
    """Runs feed fetches in the background and hands results to the foreground loop.

    Fetch tasks only ever put finished batches on the channel. The ledger is
    written exclusively from ``poll()``, which the foreground loop calls once
    per frame.
    """

    def __init__(
        self,
        ledger: GameLedger,
        reference: ReferenceData,
        feed_factory: Callable[[], BaseFeed],
        reconciler: Optional[Reconciler] = None,
    ):
        self.ledger = ledger
        self.reference = reference
        self.feed_factory = feed_factory
        self.reconciler = reconciler or Reconciler(reference)
        self._channel: "asyncio.Queue[FeedBatch]" = asyncio.Queue()
        self._tasks: Set[asyncio.Task] = set()

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    def request_refresh(self) -> asyncio.Task:
        """Starts a background fetch. Overlapping fetches are allowed."""
        task = asyncio.create_task(self._fetch())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        logger.info(f"Refresh requested ({self.in_flight} fetch(es) in flight)")
        return task

    async def _fetch(self) -> None:
        feed = self.feed_factory()
        try:
            batch = await feed.fetch_schedules(self.reference.teams)
        except FeedError as e:
            logger.error(f"error from feed {feed.name}, refresh abandoned: {e}")
            return
        except Exception as e:
            logger.exception(f"Unexpected error running feed {feed.name}: {e}")
            return
        finally:
            await feed.close()
        self._channel.put_nowait(batch)

    async def poll(self) -> Optional[ReconciliationReport]:
        """Reconciles a waiting batch, if any; returns None when there was none.

        Raises:
            ReferenceDataError: the batch references unknown teams or codes.
        """
        try:
            batch = self._channel.get_nowait()
        except asyncio.QueueEmpty:
            return None

        return await self.reconciler.reconcile(self.ledger, batch)

    async def wait_idle(self) -> None:
        """Waits for every in-flight fetch to finish."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
