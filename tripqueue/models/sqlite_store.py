# tripqueue/models/sqlite_store.py
"""
SQLite-backed queue persistence.

Provides async operations with WAL mode and IMMEDIATE transactions so that
sweeps running in separate processes against the same file see a consistent
compare-and-set on the lock.
"""

import logging
from datetime import datetime, timezone

import aiosqlite

from tripqueue.models.jobs import QueueRecord, QueueStatus
from tripqueue.models.schema import init_db
from tripqueue.models.store import QueueStore

logger = logging.getLogger(__name__)


def _ts(value: datetime) -> str:
    """Fixed-width UTC ISO string, so SQL string comparison orders by time."""
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


class SQLiteQueueStore(QueueStore):
    """
    Async SQLite-backed queue storage.

    Features:
        - WAL mode for concurrent reads/writes
        - Conditional UPDATE for atomic lock acquisition
        - No persistent connections (avoids resource leaks)
    """

    def __init__(self, db_path: str) -> None:
        """
        Initialize SQLite queue store.

        Args:
            db_path: Path to SQLite database file
        """
        self._db_path = db_path
        logger.info(f"Created SQLiteQueueStore with path: {db_path}")

    @property
    def db_path(self) -> str:
        return self._db_path

    async def initialize(self) -> None:
        """Initialize database schema. In-progress records are left for stale-lock reclamation."""
        await init_db(self._db_path)

    async def put(self, record: QueueRecord) -> None:
        async with aiosqlite.connect(self._db_path) as db:
            await db.execute(
                """
                INSERT OR REPLACE INTO queue (
                    id, destination, duration_days, status, created_at, locked_at, error
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    record.job_id,
                    record.destination,
                    record.duration_days,
                    record.status.value,
                    _ts(record.created_at),
                    _ts(record.locked_at) if record.locked_at else None,
                    record.error,
                ),
            )
            await db.commit()
        logger.debug(f"Put job {record.job_id} ({record.status.value})")

    async def get(self, job_id: str) -> QueueRecord | None:
        async with aiosqlite.connect(self._db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute("SELECT * FROM queue WHERE id = ?", (job_id,))
            row = await cursor.fetchone()

            if not row:
                return None

            return self._row_to_record(row)

    async def list_all(self) -> list[QueueRecord]:
        async with aiosqlite.connect(self._db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute("SELECT * FROM queue")
            rows = await cursor.fetchall()

            return [self._row_to_record(row) for row in rows]

    async def delete(self, job_id: str) -> None:
        async with aiosqlite.connect(self._db_path) as db:
            await db.execute("DELETE FROM queue WHERE id = ?", (job_id,))
            await db.commit()
        logger.debug(f"Deleted job {job_id}")

    async def try_lock(self, job_id: str, locked_at: datetime) -> bool:
        async with aiosqlite.connect(self._db_path) as db:
            await db.execute("BEGIN IMMEDIATE")
            try:
                cursor = await db.execute(
                    "UPDATE queue SET status = ?, locked_at = ? WHERE id = ? AND status = ?",
                    (
                        QueueStatus.IN_PROGRESS.value,
                        _ts(locked_at),
                        job_id,
                        QueueStatus.PENDING.value,
                    ),
                )
                acquired = cursor.rowcount == 1
                await db.commit()
            except Exception:
                await db.rollback()
                raise

        return acquired

    async def try_reclaim(self, job_id: str, stale_before: datetime) -> bool:
        async with aiosqlite.connect(self._db_path) as db:
            await db.execute("BEGIN IMMEDIATE")
            try:
                cursor = await db.execute(
                    """
                    UPDATE queue SET status = ?, locked_at = NULL, error = NULL
                    WHERE id = ? AND status = ?
                      AND (locked_at IS NULL OR locked_at < ?)
                    """,
                    (
                        QueueStatus.PENDING.value,
                        job_id,
                        QueueStatus.IN_PROGRESS.value,
                        _ts(stale_before),
                    ),
                )
                reclaimed = cursor.rowcount == 1
                await db.commit()
            except Exception:
                await db.rollback()
                raise

        return reclaimed

    async def close(self) -> None:
        """
        Checkpoint WAL.

        Truncates WAL file to avoid unbounded growth.
        """
        try:
            async with aiosqlite.connect(self._db_path) as db:
                await db.execute("PRAGMA wal_checkpoint(TRUNCATE)")
                logger.info("WAL checkpoint completed")
        except aiosqlite.Error as e:
            logger.warning(f"WAL checkpoint failed: {e}")

    def _row_to_record(self, row: aiosqlite.Row) -> QueueRecord:
        return QueueRecord(
            job_id=row["id"],
            destination=row["destination"],
            duration_days=row["duration_days"],
            status=QueueStatus(row["status"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            locked_at=datetime.fromisoformat(row["locked_at"]) if row["locked_at"] else None,
            error=row["error"],
        )
