# tripqueue/background/signals.py
"""
SIGINT/SIGTERM handling for the long-running surfaces.

The first signal starts the lifecycle shutdown; repeats while it is running
are ignored.
"""

import asyncio
import logging
import signal
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def setup_signal_handlers(shutdown: Callable[[], Awaitable[None]]) -> list[str]:
    """
    Route shutdown signals to ``shutdown`` on the running loop.

    Loops without add_signal_handler (Windows Proactor) get a signal.signal()
    callback that schedules the same coroutine thread-safely.

    Args:
        shutdown: Coroutine function stopping the scheduler and closing stores

    Returns:
        Names of the signals that were registered
    """
    loop = asyncio.get_running_loop()
    state: dict[str, asyncio.Task | None] = {"task": None}

    async def _run(sig_name: str) -> None:
        logger.info(f"Received {sig_name}, shutting down gracefully...")
        await shutdown()
        logger.info("Shutdown complete")

    def _trigger(sig_name: str) -> None:
        if state["task"] is not None:
            logger.warning(f"{sig_name} received while already shutting down")
            return
        state["task"] = loop.create_task(_run(sig_name))

    registered = []
    for sig in SHUTDOWN_SIGNALS:
        try:
            loop.add_signal_handler(sig, _trigger, sig.name)
        except NotImplementedError:
            signal.signal(
                sig,
                lambda num, _frame: loop.call_soon_threadsafe(
                    _trigger, signal.Signals(num).name
                ),
            )
        registered.append(sig.name)

    logger.info(f"Signal handlers registered: {', '.join(registered)}")
    return registered
