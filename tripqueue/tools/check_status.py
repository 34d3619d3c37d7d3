# tripqueue/tools/check_status.py
"""
check_status implementation.

Reads the durable document; the queue is never consulted.
"""

import logging

from fastmcp.exceptions import ToolError

from tripqueue.documents.base import DocumentStore
from tripqueue.models.responses import ItineraryStatusResponse
from tripqueue.validation.sanitize import sanitize_job_id

logger = logging.getLogger(__name__)


class JobNotFoundError(ToolError):
    """No itinerary document exists for the job id."""


async def check_status(job_id: str | None, documents: DocumentStore) -> dict:
    """
    Check the status of an itinerary job.

    Args:
        job_id:    Job identifier from create_itinerary
        documents: Document store

    Returns:
        ItineraryStatusResponse as dict (camelCase keys)

    Raises:
        ToolError: If job_id is missing or malformed
        JobNotFoundError: If no document exists for job_id
        DocumentStoreError: If the document store read fails
    """
    sanitized_id = sanitize_job_id(job_id)

    doc = await documents.fetch(sanitized_id)
    if doc is None:
        raise JobNotFoundError(f"Job '{sanitized_id}' not found")

    response = ItineraryStatusResponse(
        status=doc.status.value,
        destination=doc.destination,
        duration_days=doc.duration_days,
        created_at=doc.created_at.isoformat() if doc.created_at else None,
        completed_at=doc.completed_at.isoformat() if doc.completed_at else None,
        itinerary=doc.itinerary,
        error=doc.error,
    )
    return response.model_dump(by_alias=True)
