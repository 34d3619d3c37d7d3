# tripqueue/__main__.py
"""
Entry point for the tripqueue MCP server.

Server imports configure_logging() first to prevent stdout pollution.
FastMCP has no lifecycle hooks, so the service is started here before
serving stdio.
"""

import asyncio
import logging

from tripqueue.server import initialize_lifecycle, mcp

logger = logging.getLogger(__name__)


async def main() -> None:
    lifecycle = await initialize_lifecycle()

    logger.info("Starting MCP server on stdio transport")
    try:
        await mcp.run_stdio_async()
    finally:
        await lifecycle.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
