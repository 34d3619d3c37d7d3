# tripqueue/validation/sanitize.py
"""
Input sanitization and validation utilities for the submission surface.
"""

import logging
import re
from typing import Any

from fastmcp.exceptions import ToolError

logger = logging.getLogger(__name__)

MAX_DESTINATION_LENGTH = 200
MAX_DURATION_DAYS = 60


def sanitize_request(payload: Any) -> tuple[str, int]:
    """
    Validate a submission payload.

    Args:
        payload: Decoded request body

    Returns:
        (destination, duration_days)

    Raises:
        ToolError: If the payload is not an object or has wrong field types
    """
    if not isinstance(payload, dict):
        raise ToolError("Request body must be a JSON object")

    destination = payload.get("destination")
    duration_days = payload.get("durationDays")

    if not isinstance(destination, str):
        raise ToolError("destination must be a string")
    destination = destination.strip()
    if not destination:
        raise ToolError("destination cannot be empty")
    if len(destination) > MAX_DESTINATION_LENGTH:
        raise ToolError(
            f"destination must be at most {MAX_DESTINATION_LENGTH} characters"
        )

    # bool is an int subclass
    if isinstance(duration_days, bool) or not isinstance(duration_days, int):
        raise ToolError("durationDays must be an integer")
    if not 1 <= duration_days <= MAX_DURATION_DAYS:
        raise ToolError(f"durationDays must be between 1 and {MAX_DURATION_DAYS}")

    return destination, duration_days


def sanitize_job_id(job_id: str | None) -> str:
    """
    Sanitize and validate job ID.

    Job IDs must be alphanumeric with hyphens only, 8-64 characters.

    Raises:
        ToolError: If job ID is missing or its format is invalid
    """
    if not job_id:
        raise ToolError("Missing jobId")

    pattern = r"^[a-zA-Z0-9-]{8,64}$"
    if not re.match(pattern, job_id):
        raise ToolError(
            f"Invalid job ID '{job_id}': must be 8-64 alphanumeric characters or hyphens"
        )

    return job_id
