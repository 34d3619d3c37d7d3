"""Service functions shared by the HTTP, MCP and CLI surfaces."""

from .check_status import JobNotFoundError, check_status
from .list_jobs import list_jobs
from .run_sweep import run_sweep
from .submit_itinerary import submit_itinerary

__all__ = [
    "submit_itinerary",
    "check_status",
    "run_sweep",
    "list_jobs",
    "JobNotFoundError",
]
