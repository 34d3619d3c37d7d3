# tripqueue/models/jobs.py
"""
Queue record model and in-memory storage.

Queue records coordinate processing attempts only. The authoritative,
user-visible state of a job lives in its itinerary document.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

from tripqueue.models.store import QueueStore

logger = logging.getLogger(__name__)


class QueueStatus(Enum):
    """Queue record states. Success deletes the record instead."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    FAILED = "failed"


@dataclass
class QueueRecord:
    """Work-tracking entry for one itinerary job."""

    job_id: str
    destination: str
    duration_days: int
    status: QueueStatus
    created_at: datetime
    locked_at: datetime | None = None
    error: str | None = None  # Set only when status=FAILED

    def lock_age(self, now: datetime) -> float | None:
        """Seconds since the lock was taken, None if never locked."""
        if self.locked_at is None:
            return None
        return (now - self.locked_at).total_seconds()

    def to_dict(self) -> dict:
        """Wire form (camelCase keys, ISO timestamps, absent optionals omitted)."""
        data = {
            "destination": self.destination,
            "durationDays": self.duration_days,
            "status": self.status.value,
            "createdAt": self.created_at.isoformat(),
        }
        if self.locked_at is not None:
            data["lockedAt"] = self.locked_at.isoformat()
        if self.error is not None:
            data["error"] = self.error
        return data


class InMemoryQueueStore(QueueStore):
    """
    Simple in-memory queue storage.

    Safe for a single event loop: no awaits happen between the check and the
    write in try_lock, so the compare-and-set cannot interleave.
    """

    def __init__(self) -> None:
        self._records: dict[str, QueueRecord] = {}
        logger.info("Initialized InMemoryQueueStore")

    async def put(self, record: QueueRecord) -> None:
        # Store a copy so callers mutating their record don't bypass put()
        self._records[record.job_id] = replace(record)
        logger.debug(f"Put job {record.job_id} ({record.status.value})")

    async def get(self, job_id: str) -> QueueRecord | None:
        record = self._records.get(job_id)
        return replace(record) if record else None

    async def list_all(self) -> list[QueueRecord]:
        return [replace(r) for r in self._records.values()]

    async def delete(self, job_id: str) -> None:
        if self._records.pop(job_id, None) is not None:
            logger.debug(f"Deleted job {job_id}")

    async def try_lock(self, job_id: str, locked_at: datetime) -> bool:
        record = self._records.get(job_id)
        if record is None or record.status != QueueStatus.PENDING:
            return False
        record.status = QueueStatus.IN_PROGRESS
        record.locked_at = locked_at
        return True

    async def try_reclaim(self, job_id: str, stale_before: datetime) -> bool:
        record = self._records.get(job_id)
        if record is None or record.status != QueueStatus.IN_PROGRESS:
            return False
        if record.locked_at is not None and record.locked_at >= stale_before:
            return False
        record.status = QueueStatus.PENDING
        record.locked_at = None
        record.error = None
        return True


def generate_job_id() -> str:
    """
    Generate a unique job ID.

    Returns:
        Canonical UUID4 string (36 characters)
    """
    return str(uuid4())


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)
