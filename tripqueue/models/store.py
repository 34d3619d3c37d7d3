# tripqueue/models/store.py
"""
Queue store protocol definition.

Defines the abstract interface that both InMemoryQueueStore and SQLiteQueueStore implement.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tripqueue.models.jobs import QueueRecord


class QueueStore(ABC):
    """
    Abstract base class for the lightweight work-tracking queue.

    Records are keyed by job id and deleted once a job reaches durable success.
    """

    @abstractmethod
    async def put(self, record: "QueueRecord") -> None:
        """
        Write a record, replacing any existing record with the same job id.

        Args:
            record: QueueRecord to write
        """

    @abstractmethod
    async def get(self, job_id: str) -> "QueueRecord | None":
        """
        Get a record by job id.

        Returns:
            QueueRecord if found, None otherwise
        """

    @abstractmethod
    async def list_all(self) -> "list[QueueRecord]":
        """
        List all records currently in the queue.

        Callers must not rely on the order.
        """

    @abstractmethod
    async def delete(self, job_id: str) -> None:
        """Delete a record. Deleting a missing record is a no-op."""

    @abstractmethod
    async def try_lock(self, job_id: str, locked_at: datetime) -> bool:
        """
        Atomically move a record from pending to in-progress.

        Args:
            job_id: Job identifier
            locked_at: Lock timestamp to stamp on the record

        Returns:
            True if this caller acquired the lock, False if the record is
            missing or no longer pending
        """

    @abstractmethod
    async def try_reclaim(self, job_id: str, stale_before: datetime) -> bool:
        """
        Atomically reset a stale in-progress record to pending.

        A record is stale when it is in-progress and its lock was taken
        before ``stale_before`` (or was never stamped). The reset clears
        locked_at and error.

        Returns:
            True if the record was reset, False if it is missing, no longer
            in-progress, or was locked again since
        """

    async def close(self) -> None:
        """Release resources held by the store."""
