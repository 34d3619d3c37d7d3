# tripqueue/tools/submit_itinerary.py
"""
create_itinerary implementation.

Validates the request and returns a job id without waiting for storage or
processing. In the background the ``processing`` document is created first
and only then is the pending queue record written, so no sweep can pick up a
job whose document does not exist yet.
"""

import logging
from datetime import datetime
from typing import Any

from tripqueue.background.worker import SweepDispatcher
from tripqueue.documents.base import DocumentStore
from tripqueue.models.jobs import QueueRecord, QueueStatus, generate_job_id, utcnow
from tripqueue.models.responses import SubmitItineraryResponse
from tripqueue.models.store import QueueStore
from tripqueue.validation.sanitize import sanitize_request

logger = logging.getLogger(__name__)


async def enqueue_job(
    job_id: str,
    destination: str,
    duration_days: int,
    created_at: datetime,
    queue: QueueStore,
    documents: DocumentStore,
) -> None:
    """
    Create the job's document, then make the job visible to sweeps.

    If document creation raises, no queue record is written.
    """
    await documents.create(job_id, destination, duration_days, created_at)
    await queue.put(
        QueueRecord(
            job_id=job_id,
            destination=destination,
            duration_days=duration_days,
            status=QueueStatus.PENDING,
            created_at=created_at,
        )
    )
    logger.info(
        f"Queued job {job_id}: {duration_days} day(s) in {destination[:80]}",
        extra={"job_id": job_id},
    )


async def submit_itinerary(
    payload: Any,
    queue: QueueStore,
    documents: DocumentStore,
    dispatcher: SweepDispatcher,
    sweep: bool = True,
) -> dict:
    """
    Submit a new itinerary job.

    Args:
        payload:    Decoded request body with destination and durationDays
        queue:      Queue store
        documents:  Document store
        dispatcher: Background task owner
        sweep:      Follow the enqueue with an on-demand sweep

    Returns:
        SubmitItineraryResponse as dict ({"jobId": ...})

    Raises:
        ToolError: If the payload has missing or mistyped fields
    """
    destination, duration_days = sanitize_request(payload)

    job_id = generate_job_id()
    enqueue = enqueue_job(
        job_id, destination, duration_days, utcnow(), queue=queue, documents=documents
    )

    if sweep:
        dispatcher.trigger_sweep(before=enqueue)
    else:
        dispatcher.spawn(enqueue, name=f"enqueue {job_id}")

    return SubmitItineraryResponse(job_id=job_id).model_dump(by_alias=True)
