# tripqueue/cli.py
"""
CLI interface for tripqueue.

Thin presentation layer over the tools/ service layer.
All commands delegate to the same functions the HTTP and MCP surfaces wrap.
"""

import asyncio
import json
import logging

import typer
from fastmcp.exceptions import ToolError

from tripqueue.background.lifecycle import ServiceLifecycle
from tripqueue.config.loader import load_config
from tripqueue.logging_config import configure_logging

app = typer.Typer(
    name="tripqueue",
    help="Asynchronous travel-itinerary generation jobs.",
    no_args_is_help=True,
)


def _run(coro):
    """Run async function from sync CLI context."""
    return asyncio.run(coro)


def _build_lifecycle() -> ServiceLifecycle:
    return ServiceLifecycle(load_config())


def _status_color(status: str) -> str:
    colors = {
        "completed": typer.colors.GREEN,
        "processing": typer.colors.YELLOW,
        "pending": typer.colors.CYAN,
        "in-progress": typer.colors.YELLOW,
        "failed": typer.colors.RED,
    }
    return colors.get(status, typer.colors.WHITE)


def _echo_status(result: dict) -> None:
    typer.secho(f"Status: {result['status']}", fg=_status_color(result["status"]), bold=True)
    if result.get("error"):
        typer.secho(f"Error:  {result['error']}", fg=typer.colors.RED)
    if result.get("itinerary"):
        for day in result["itinerary"]:
            typer.secho(f"\nDay {day['day']}: {day['theme']}", bold=True)
            for activity in day["activities"]:
                typer.echo(f"  {activity['time']:>8}  {activity['description']} ({activity['location']})")


@app.command()
def serve(
    host: str = typer.Option(None, "--host", help="Bind address (default from config)"),
    port: int = typer.Option(None, "--port", help="Port (default from config)"),
    no_schedule: bool = typer.Option(
        False, "--no-schedule", help="Disable periodic sweeps (rely on POST /sweep)"
    ),
) -> None:
    """Run the HTTP API with the periodic sweep scheduler."""
    import uvicorn

    from tripqueue.api import create_app

    configure_logging()
    lifecycle = _build_lifecycle()
    config = lifecycle.config
    web_app = create_app(lifecycle, schedule=not no_schedule)
    uvicorn.run(
        web_app,
        host=host or config.server.host,
        port=port or config.server.port,
        log_config=None,
    )


@app.command()
def submit(
    destination: str = typer.Argument(..., help="Where to travel"),
    days: int = typer.Argument(..., help="Trip length in days"),
    wait: bool = typer.Option(
        True, "--wait/--no-wait", help="Process in this process and print the result (--no-wait only queues it)"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
) -> None:
    """Submit an itinerary job."""
    from tripqueue.tools.check_status import check_status
    from tripqueue.tools.submit_itinerary import submit_itinerary

    async def _submit():
        lifecycle = _build_lifecycle()
        await lifecycle.startup(schedule=False)
        try:
            result = await submit_itinerary(
                {"destination": destination, "durationDays": days},
                queue=lifecycle.queue,
                documents=lifecycle.documents,
                dispatcher=lifecycle.dispatcher,
                sweep=wait,
            )
            # The document and queue record must be written before shutdown
            await lifecycle.dispatcher.drain()
            status = None
            if wait:
                status = await check_status(result["jobId"], documents=lifecycle.documents)
            return result, status
        finally:
            await lifecycle.shutdown()

    try:
        result, status = _run(_submit())
    except ToolError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps({**result, "result": status}, indent=2))
        return

    typer.echo(f"Job ID: {result['jobId']}")
    if status:
        _echo_status(status)


@app.command()
def status(
    job_id: str = typer.Argument(..., help="Job ID returned by submit"),
    as_json: bool = typer.Option(False, "--json", help="Print raw JSON"),
) -> None:
    """Show the status of a job."""
    from tripqueue.tools.check_status import check_status

    async def _status():
        lifecycle = _build_lifecycle()
        try:
            return await check_status(job_id, documents=lifecycle.documents)
        finally:
            await lifecycle.shutdown()

    try:
        result = _run(_status())
    except ToolError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)

    if as_json:
        typer.echo(json.dumps(result, indent=2))
    else:
        _echo_status(result)


@app.command()
def sweep() -> None:
    """Run one sweep over the queue (for cron-style scheduling)."""
    from tripqueue.tools.run_sweep import run_sweep

    configure_logging(logging.WARNING)

    async def _sweep():
        lifecycle = _build_lifecycle()
        await lifecycle.startup(schedule=False)
        try:
            return await run_sweep(lifecycle.processor)
        finally:
            await lifecycle.shutdown()

    report = _run(_sweep())
    typer.echo(
        f"completed={len(report['completed'])} failed={len(report['failed'])} "
        f"reclaimed={len(report['reclaimed'])} skipped={len(report['skipped'])}"
    )


@app.command()
def jobs() -> None:
    """List queue records (jobs not yet completed)."""
    from rich.console import Console
    from rich.table import Table

    from tripqueue.tools.list_jobs import list_jobs

    async def _list():
        lifecycle = _build_lifecycle()
        await lifecycle.startup(schedule=False)
        try:
            return await list_jobs(lifecycle.queue)
        finally:
            await lifecycle.shutdown()

    records = _run(_list())
    if not records:
        typer.echo("No queued jobs.")
        return

    table = Table("Job ID", "Destination", "Days", "Status", "Created", "Error")
    for r in records:
        table.add_row(
            r["jobId"],
            r["destination"],
            str(r["durationDays"]),
            r["status"],
            r["createdAt"][:19],
            (r["error"] or "")[:60],
        )
    Console().print(table)


if __name__ == "__main__":
    app()
