# tripqueue/server.py
"""
FastMCP server instance with tool registration.

CRITICAL: configure_logging() is called first to prevent stdout pollution.
All logging goes to stderr as JSON.
"""

# Configure logging FIRST before any other imports
from tripqueue.logging_config import configure_logging

configure_logging()

import logging

from fastmcp import FastMCP

from tripqueue.background.lifecycle import ServiceLifecycle
from tripqueue.config.loader import load_config
from tripqueue.tools.check_status import check_status as _check_status
from tripqueue.tools.run_sweep import run_sweep as _run_sweep
from tripqueue.tools.submit_itinerary import submit_itinerary as _submit_itinerary

logger = logging.getLogger(__name__)

mcp = FastMCP("tripqueue")

_config = load_config()
logger.info(f"Loaded configuration: provider={_config.provider}")

# Lifecycle manager (initialized by __main__.py)
_lifecycle: ServiceLifecycle | None = None


def get_lifecycle() -> ServiceLifecycle:
    """
    Get the initialized service lifecycle.

    Raises:
        RuntimeError: If lifecycle not initialized (should never happen)
    """
    if _lifecycle is None:
        raise RuntimeError("Service lifecycle not initialized. Call initialize_lifecycle() first.")
    return _lifecycle


async def initialize_lifecycle(config=None) -> ServiceLifecycle:
    """
    Initialize the service (queue + scheduler + signals).

    Must be called before any tool calls. Called by __main__.py on startup.
    """
    global _lifecycle

    _lifecycle = ServiceLifecycle(config or _config)
    await _lifecycle.startup(schedule=True, handle_signals=True)

    logger.info("Lifecycle initialized: queue + scheduler + signals ready")
    return _lifecycle


@mcp.tool()
async def create_itinerary(destination: str, duration_days: int) -> dict:
    """Queue a travel itinerary for generation. Returns a jobId to poll with check_status."""
    lifecycle = get_lifecycle()
    return await _submit_itinerary(
        {"destination": destination, "durationDays": duration_days},
        queue=lifecycle.queue,
        documents=lifecycle.documents,
        dispatcher=lifecycle.dispatcher,
    )


@mcp.tool()
async def check_status(job_id: str) -> dict:
    """Get the status of an itinerary job, including the itinerary once completed."""
    return await _check_status(job_id, documents=get_lifecycle().documents)


@mcp.tool()
async def run_sweep() -> dict:
    """Process all pending itinerary jobs now."""
    return await _run_sweep(get_lifecycle().processor)


logger.info("MCP server initialized with 3 tools")
