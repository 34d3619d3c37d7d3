# tripqueue/api.py
"""
HTTP surface.

Routes:
    POST /itineraries            submit -> 202 {"jobId": ...}
    GET  /itineraries?jobId=...  status view
    GET  /itineraries/{job_id}   status view
    POST /sweep                  run one sweep now (for external schedulers)
    GET  /health                 liveness

Thin layer over tripqueue.tools: ToolError becomes 400, JobNotFoundError 404,
DocumentStoreError 502.
"""

import json
import logging
from contextlib import asynccontextmanager

from fastmcp.exceptions import ToolError
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse
from starlette.routing import Route

from tripqueue.background.lifecycle import ServiceLifecycle
from tripqueue.errors import DocumentStoreError
from tripqueue.tools.check_status import JobNotFoundError, check_status
from tripqueue.tools.run_sweep import run_sweep
from tripqueue.tools.submit_itinerary import submit_itinerary

logger = logging.getLogger(__name__)


def _lifecycle(request: Request) -> ServiceLifecycle:
    return request.app.state.lifecycle


async def submit(request: Request) -> JSONResponse | PlainTextResponse:
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return PlainTextResponse("Invalid JSON", status_code=400)

    lifecycle = _lifecycle(request)
    try:
        result = await submit_itinerary(
            payload,
            queue=lifecycle.queue,
            documents=lifecycle.documents,
            dispatcher=lifecycle.dispatcher,
        )
    except ToolError as e:
        return PlainTextResponse(f"Bad Request: {e}", status_code=400)

    return JSONResponse(result, status_code=202)


async def status(request: Request) -> JSONResponse | PlainTextResponse:
    job_id = request.path_params.get("job_id") or request.query_params.get("jobId")
    try:
        result = await check_status(job_id, documents=_lifecycle(request).documents)
    except JobNotFoundError as e:
        return PlainTextResponse(str(e), status_code=404)
    except ToolError as e:
        return PlainTextResponse(str(e), status_code=400)
    except DocumentStoreError as e:
        logger.error(f"Status lookup failed: {e}")
        return PlainTextResponse(f"Error: {e}", status_code=502)

    return JSONResponse(result)


async def sweep(request: Request) -> JSONResponse:
    report = await run_sweep(_lifecycle(request).processor)
    return JSONResponse(report)


async def health(request: Request) -> JSONResponse:
    lifecycle = _lifecycle(request)
    return JSONResponse(
        {
            "status": "ok",
            "scheduler": lifecycle.scheduler.running,
            "backgroundTasks": lifecycle.dispatcher.pending,
        }
    )


def create_app(
    lifecycle: ServiceLifecycle,
    schedule: bool = True,
    manage_lifecycle: bool = True,
) -> Starlette:
    """
    Build the Starlette application.

    Args:
        lifecycle:        Wired service (stores, processor, dispatcher)
        schedule:         Start the periodic sweep scheduler on startup
        manage_lifecycle: Run lifecycle startup/shutdown in the app lifespan
    """

    @asynccontextmanager
    async def lifespan(app: Starlette):
        if manage_lifecycle:
            await lifecycle.startup(schedule=schedule)
        try:
            yield
        finally:
            if manage_lifecycle:
                await lifecycle.shutdown()

    routes = [
        Route("/itineraries", submit, methods=["POST"]),
        Route("/itineraries", status, methods=["GET"]),
        Route("/itineraries/{job_id}", status, methods=["GET"]),
        Route("/sweep", sweep, methods=["POST"]),
        Route("/health", health, methods=["GET"]),
    ]
    app = Starlette(routes=routes, lifespan=lifespan)
    app.state.lifecycle = lifecycle
    return app
