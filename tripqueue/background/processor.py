# tripqueue/background/processor.py
"""
Job processor: one sweep over the queue.

Per record:
    1. Reclaim stale in-progress locks (conditional reset, like the lock)
    2. Skip anything that is not pending
    3. Acquire the lock (compare-and-set pending -> in-progress)
    4. Generate under a deadline, then validate
    5. Success: write the completed document, THEN delete the queue record
    6. Failure: write the failed document (best effort), mark the record failed

The queue and the document store are not transactionally linked. A crash
between steps 5's two writes leaves an orphan queue record; reprocessing it
only overwrites the same document with an equivalent itinerary.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta

from tripqueue.documents.base import DocumentStatus, DocumentStore
from tripqueue.errors import JobFailure
from tripqueue.llm.generator import ItineraryGenerator
from tripqueue.models.jobs import QueueRecord, QueueStatus, utcnow
from tripqueue.models.store import QueueStore
from tripqueue.validation.itinerary import validate_itinerary

logger = logging.getLogger(__name__)

DEFAULT_GENERATION_TIMEOUT = 30.0
DEFAULT_STALE_LOCK_SECONDS = 600.0


@dataclass
class SweepReport:
    """Outcome counts for one sweep."""

    reclaimed: list[str] = field(default_factory=list)
    completed: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    lost_lock: list[str] = field(default_factory=list)
    errored: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "reclaimed": list(self.reclaimed),
            "completed": list(self.completed),
            "failed": list(self.failed),
            "skipped": list(self.skipped),
            "lostLock": list(self.lost_lock),
            "errored": list(self.errored),
        }


class JobProcessor:
    """
    Drives queued jobs to a terminal document state.

    Safe to run from several sweeps at once: the queue store's try_lock lets
    only one of them claim a pending record.
    """

    def __init__(
        self,
        queue: QueueStore,
        documents: DocumentStore,
        generator: ItineraryGenerator,
        generation_timeout: float = DEFAULT_GENERATION_TIMEOUT,
        stale_lock_seconds: float = DEFAULT_STALE_LOCK_SECONDS,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        """
        Initialize processor.

        Args:
            queue:              Work-tracking queue store
            documents:          Durable itinerary document store
            generator:          Itinerary generator (provider + retry policy)
            generation_timeout: Deadline in seconds for the generation phase
            stale_lock_seconds: Lock age after which in-progress is reset
            clock:              Returns the current UTC time (injectable for tests)
        """
        self._queue = queue
        self._documents = documents
        self._generator = generator
        self._generation_timeout = generation_timeout
        self._stale_lock_seconds = stale_lock_seconds
        self._clock = clock

    async def sweep(self) -> SweepReport:
        """
        Process every eligible queue record once.

        Never raises for per-record problems; those are logged and counted
        under ``errored``.
        """
        report = SweepReport()
        records = await self._queue.list_all()
        logger.info(f"Sweep started: {len(records)} queue record(s)")

        for record in records:
            try:
                await self._process_record(record, report)
            except Exception:
                logger.exception(
                    f"Unhandled error processing job {record.job_id}",
                    extra={"job_id": record.job_id},
                )
                report.errored.append(record.job_id)

        logger.info(
            f"Sweep finished: completed={len(report.completed)} failed={len(report.failed)} "
            f"reclaimed={len(report.reclaimed)} skipped={len(report.skipped)} "
            f"lost_lock={len(report.lost_lock)} errored={len(report.errored)}"
        )
        return report

    def is_stale(self, record: QueueRecord, now: datetime) -> bool:
        """True if an in-progress lock is older than the reclamation threshold."""
        if record.status != QueueStatus.IN_PROGRESS:
            return False
        age = record.lock_age(now)
        return age is None or age > self._stale_lock_seconds

    async def _process_record(self, record: QueueRecord, report: SweepReport) -> None:
        job_id = record.job_id
        now = self._clock()

        if self.is_stale(record, now):
            stale_before = now - timedelta(seconds=self._stale_lock_seconds)
            if not await self._queue.try_reclaim(job_id, stale_before):
                # Completed, deleted or re-locked since the snapshot
                report.skipped.append(job_id)
                return
            record = replace(record, status=QueueStatus.PENDING, locked_at=None, error=None)
            report.reclaimed.append(job_id)
            logger.warning(f"Reclaimed stale lock on job {job_id}", extra={"job_id": job_id})

        if record.status != QueueStatus.PENDING:
            report.skipped.append(job_id)
            return

        locked_at = self._clock()
        if not await self._queue.try_lock(job_id, locked_at):
            logger.info(f"Job {job_id} claimed by another sweep", extra={"job_id": job_id})
            report.lost_lock.append(job_id)
            return
        record = replace(record, status=QueueStatus.IN_PROGRESS, locked_at=locked_at)

        try:
            raw = await self._generator.generate(
                record.destination,
                record.duration_days,
                timeout=self._generation_timeout,
            )
            itinerary = validate_itinerary(raw)

            finished_at = self._clock()
            await self._documents.save(
                job_id,
                status=DocumentStatus.COMPLETED,
                updated_at=finished_at,
                completed_at=finished_at,
                error=None,
                itinerary=itinerary,
            )
        except Exception as e:
            await self._record_failure(record, JobFailure(e))
            report.failed.append(job_id)
            return

        # Only after the completed document is durable
        await self._queue.delete(job_id)
        report.completed.append(job_id)
        logger.info(
            f"Job {job_id} completed ({len(itinerary)} day(s))", extra={"job_id": job_id}
        )

    async def _record_failure(self, record: QueueRecord, failure: JobFailure) -> None:
        job_id = record.job_id
        logger.error(
            f"Job {job_id} failed: {failure.message}",
            exc_info=failure.error,
            extra={"job_id": job_id},
        )

        failed_at = self._clock()
        try:
            await self._documents.save(
                job_id,
                status=DocumentStatus.FAILED,
                updated_at=failed_at,
                completed_at=failed_at,
                error=failure.message,
                itinerary=None,
            )
        except Exception as persist_error:
            failure.persist_error = persist_error
            logger.error(
                f"Could not record failure of job {job_id} in document store: {persist_error}",
                extra={"job_id": job_id},
            )

        # Failed records are not retried by later sweeps
        await self._queue.put(
            replace(record, status=QueueStatus.FAILED, error=failure.render())
        )
