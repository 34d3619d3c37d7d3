# tripqueue/tools/list_jobs.py
"""list_jobs implementation: queue records still awaiting success."""

from tripqueue.models.responses import QueueRecordSummary
from tripqueue.models.store import QueueStore


async def list_jobs(queue: QueueStore) -> list[dict]:
    """
    List queue records, oldest first.

    Completed jobs are not listed: their records are deleted on success.
    """
    records = sorted(await queue.list_all(), key=lambda r: r.created_at)
    return [
        QueueRecordSummary(
            job_id=r.job_id,
            destination=r.destination,
            duration_days=r.duration_days,
            status=r.status.value,
            created_at=r.created_at.isoformat(),
            locked_at=r.locked_at.isoformat() if r.locked_at else None,
            error=r.error,
        ).model_dump(by_alias=True)
        for r in records
    ]
