"""Timer-driven refresh cycle for the served catalog."""
from __future__ import annotations

import asyncio
import logging
import time

from ...catalog_sync.catalog import CatalogItem, Snapshot
from ...catalog_sync.feed_reader import FeedReader
from ...catalog_sync.reconciler import CatalogReconciler
from ...catalog_sync.resolution import ResolutionChain
from ...catalog_sync.title_parser import parse_title
from ..stores.catalog_store import CatalogStore

logger = logging.getLogger(__name__)


class RefreshServiceError(RuntimeError):
    """Raised when a refresh cannot be scheduled."""


class RefreshAlreadyRunningError(RefreshServiceError):
    """Raised when a refresh is requested while another cycle is in flight."""


class CycleError(RuntimeError):
    """Raised when a cycle cannot produce a new snapshot."""


class RefreshService:
    """Runs refresh cycles one at a time and publishes their snapshots.

    The timer fires every ``interval`` seconds regardless of how long a cycle
    takes; ticks that land while a cycle is still running are skipped.
    """

    def __init__(
        self,
        store: CatalogStore,
        reader: FeedReader,
        chain: ResolutionChain,
        *,
        interval: float = 15 * 60,
        max_age_hours: float | None = None,
        strict_titles: bool = False,
    ) -> None:
        self.store = store
        self.reader = reader
        self.chain = chain
        self.interval = interval
        self.max_age_hours = max_age_hours
        self.strict_titles = strict_titles
        self._running = False
        self._timer_task: asyncio.Task[None] | None = None
        self._cycle_tasks: set[asyncio.Task[Snapshot | None]] = set()

    @property
    def running(self) -> bool:
        """Whether a refresh cycle is currently in flight."""

        return self._running

    async def run_cycle(self) -> Snapshot | None:
        """Run one cycle inline and return the published snapshot.

        Returns ``None`` when the cycle failed; the previous snapshot stays
        in place and the status records the error.
        """

        self._claim()
        return await self._run_claimed()

    def trigger(self) -> asyncio.Task[Snapshot | None]:
        """Start a cycle in the background, raising if one is already running."""

        self._claim()
        task = asyncio.create_task(self._run_claimed())
        self._cycle_tasks.add(task)
        task.add_done_callback(self._cycle_tasks.discard)
        return task

    def start(self, *, immediate: bool = True) -> None:
        """Launch the periodic refresh timer.

        With ``immediate`` false the first cycle runs one interval later.
        """

        if self._timer_task is None:
            self._timer_task = asyncio.create_task(self._timer_loop(immediate))

    async def stop(self) -> None:
        """Cancel the timer and any cycle still in flight."""

        tasks = list(self._cycle_tasks)
        if self._timer_task is not None:
            tasks.append(self._timer_task)
            self._timer_task = None
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    # ------------------------------------------------------------------
    # Cycle internals

    def _claim(self) -> None:
        if self._running:
            raise RefreshAlreadyRunningError("A catalog refresh is already running")
        self._running = True

    async def _run_claimed(self) -> Snapshot | None:
        started = time.monotonic()
        logger.info("--- Updating catalog from %s ---", self.reader.feed_url)
        try:
            snapshot = await self._execute()
        except asyncio.CancelledError:
            self.store.set_status("Error: refresh cancelled", "error", error="cancelled")
            raise
        except Exception as exc:
            logger.exception("Error updating catalog: %s", exc)
            self.store.set_status(f"Error: {exc}", "error", error=str(exc))
            return None
        finally:
            self._running = False

        logger.info(
            "--- Update complete. Catalog size: %d (generation %d, %.1fs) ---",
            len(snapshot),
            snapshot.generation,
            time.monotonic() - started,
        )
        return snapshot

    async def _execute(self) -> Snapshot:
        self.store.set_status("Scraping r/MovieLeaks...")
        cutoff = None
        if self.max_age_hours is not None:
            cutoff = time.time() - self.max_age_hours * 3600
        feed = await self.reader.read(cutoff)
        if not feed.posts and feed.error:
            raise CycleError(f"feed unavailable ({feed.error})")

        self.store.set_status(f"Processing {len(feed.posts)} items...")
        reconciler = CatalogReconciler(self.store.current())
        items: list[CatalogItem] = []
        for post in feed.posts:
            candidate = parse_title(post.title, strict=self.strict_titles)
            if candidate is None:
                logger.debug("Skipping unparseable title: %s", post.title)
                continue
            existing = reconciler.reuse(candidate)
            if existing is not None:
                items.append(existing)
                continue
            items.append(await self.chain.resolve(post, candidate))

        snapshot = reconciler.reconcile(items)
        self.store.publish(snapshot)
        if reconciler.reused:
            logger.info("Reused %d items from generation %d", reconciler.reused, reconciler.previous.generation)

        message = "Ready"
        if feed.error:
            message = f"Ready (partial feed: {feed.error})"
        self.store.set_status(message, "ready")
        return snapshot

    async def _timer_loop(self, immediate: bool = True) -> None:
        if not immediate:
            await asyncio.sleep(self.interval)
        while True:
            try:
                self.trigger()
            except RefreshAlreadyRunningError:
                logger.warning("Previous refresh still running; skipping this tick")
            await asyncio.sleep(self.interval)
