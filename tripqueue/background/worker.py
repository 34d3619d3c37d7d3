# tripqueue/background/worker.py
"""
Background sweep triggers.

SweepScheduler runs the processor periodically; SweepDispatcher runs
fire-and-forget work (document creation, on-demand sweeps) after a
submission has already been answered.
"""

import asyncio
import logging
from collections.abc import Awaitable

from tripqueue.background.processor import JobProcessor, SweepReport

logger = logging.getLogger(__name__)


class SweepScheduler:
    """
    Periodic sweep loop.

    Features:
        - Runs one sweep every ``interval`` seconds
        - A failing sweep is logged and the loop keeps going
        - Stops cleanly on cancellation; a job interrupted mid-generation keeps
          its lock until stale-lock reclamation
    """

    def __init__(self, processor: JobProcessor, interval: float = 60.0) -> None:
        """
        Initialize scheduler.

        Args:
            processor: JobProcessor to sweep with
            interval:  Seconds between the end of one sweep and the next
        """
        self._processor = processor
        self._interval = interval
        self._task: asyncio.Task | None = None
        self._last_report: SweepReport | None = None
        logger.info(f"Initialized SweepScheduler (interval={interval}s)")

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def last_report(self) -> SweepReport | None:
        """Report of the most recent scheduled sweep (None before the first one)."""
        return self._last_report

    async def start(self) -> None:
        """Start the loop as an asyncio task."""
        if self._task is not None:
            logger.warning("Scheduler already started")
            return

        self._task = asyncio.create_task(self._run_loop())
        logger.info("Sweep scheduler started")

    async def stop(self) -> None:
        """Cancel the loop and wait for it to finish."""
        if self._task is None:
            logger.warning("Scheduler not running")
            return

        logger.info("Stopping sweep scheduler...")
        self._task.cancel()

        try:
            await self._task
        except asyncio.CancelledError:
            logger.info("Scheduler task cancelled")

        self._task = None
        logger.info("Sweep scheduler stopped")

    async def _run_loop(self) -> None:
        logger.info("Scheduler loop started")

        try:
            while True:
                try:
                    self._last_report = await self._processor.sweep()
                except Exception:
                    logger.exception("Scheduled sweep failed")

                await asyncio.sleep(self._interval)

        except asyncio.CancelledError:
            logger.info("Scheduler loop cancelled")
            raise


class SweepDispatcher:
    """
    Owner of background tasks started on behalf of request handlers.

    Keeps a reference to every task until it finishes and logs, rather than
    propagates, whatever it raised.
    """

    def __init__(self, processor: JobProcessor) -> None:
        self._processor = processor
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        """Number of background tasks still running."""
        return len(self._tasks)

    def spawn(self, coro: Awaitable, name: str) -> asyncio.Task:
        """Run a coroutine in the background under this dispatcher."""
        task = asyncio.ensure_future(self._guard(coro, name))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def trigger_sweep(self, before: Awaitable | None = None) -> asyncio.Task:
        """
        Start an on-demand sweep without waiting for it.

        Args:
            before: Optional coroutine awaited first (its failure is logged
                    and does not prevent the sweep)
        """
        return self.spawn(self._sweep_after(before), name="on-demand sweep")

    async def _sweep_after(self, before: Awaitable | None) -> SweepReport:
        if before is not None:
            try:
                await before
            except Exception:
                logger.exception("Pre-sweep step failed; sweeping anyway")
        return await self._processor.sweep()

    async def _guard(self, coro: Awaitable, name: str):
        try:
            return await coro
        except asyncio.CancelledError:
            logger.info(f"Background task '{name}' cancelled")
            raise
        except Exception:
            logger.exception(f"Background task '{name}' failed")
            return None

    async def drain(self) -> None:
        """Wait for all background tasks to finish."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def cancel_all(self) -> None:
        """Cancel outstanding background tasks and wait for them."""
        for task in list(self._tasks):
            task.cancel()
        await self.drain()
