# tripqueue/models/__init__.py
"""
Queue models for tripqueue.

Provides the queue record, the store protocol and its implementations.
"""

from tripqueue.models.jobs import (
    InMemoryQueueStore,
    QueueRecord,
    QueueStatus,
    generate_job_id,
    utcnow,
)
from tripqueue.models.sqlite_store import SQLiteQueueStore
from tripqueue.models.store import QueueStore

__all__ = [
    "QueueStatus",
    "QueueRecord",
    "QueueStore",
    "InMemoryQueueStore",
    "SQLiteQueueStore",
    "generate_job_id",
    "utcnow",
]
