# tripqueue/background/lifecycle.py
"""
Service lifecycle management.

Wires stores, provider, processor and triggers together from config, and
coordinates startup and shutdown for every surface (HTTP, MCP, CLI).
"""

import logging
from pathlib import Path

from tripqueue.background.processor import JobProcessor
from tripqueue.background.signals import setup_signal_handlers
from tripqueue.background.worker import SweepDispatcher, SweepScheduler
from tripqueue.config.loader import get_config_dir
from tripqueue.config.schema import TripQueueConfig
from tripqueue.documents.base import DocumentStore
from tripqueue.documents.firestore import FirestoreDocumentStore
from tripqueue.documents.memory import InMemoryDocumentStore
from tripqueue.llm.factory import create_provider
from tripqueue.llm.generator import ItineraryGenerator
from tripqueue.llm.types import TextProvider
from tripqueue.models.sqlite_store import SQLiteQueueStore
from tripqueue.models.store import QueueStore

logger = logging.getLogger(__name__)


def create_document_store(config: TripQueueConfig) -> DocumentStore:
    """Firestore when a project is configured, in-memory otherwise."""
    fs = config.firestore
    if fs.project_id:
        return FirestoreDocumentStore(
            project_id=fs.project_id,
            collection=fs.collection,
            access_token=fs.access_token,
            base_url=fs.base_url,
            timeout=fs.timeout,
        )
    logger.warning(
        "No firestore.project_id configured: itinerary documents are kept in memory"
    )
    return InMemoryDocumentStore()


def default_queue_path(config: TripQueueConfig) -> str:
    if config.jobs.queue_db:
        return str(Path(config.jobs.queue_db).expanduser())
    return str(get_config_dir() / "jobs.db")


class ServiceLifecycle:
    """
    Service lifecycle coordinator.

    Manages:
        - Queue schema initialization on startup
        - Periodic sweep scheduler
        - Background dispatcher for submissions
        - Optional signal handler registration
        - Graceful shutdown (closing HTTP clients and the queue)
    """

    def __init__(
        self,
        config: TripQueueConfig | None = None,
        queue: QueueStore | None = None,
        documents: DocumentStore | None = None,
        provider: TextProvider | None = None,
    ) -> None:
        """
        Initialize lifecycle. Any collaborator not passed in is built from config.

        Args:
            config:    TripQueueConfig (defaults to built-in defaults)
            queue:     Queue store override
            documents: Document store override
            provider:  Text provider override
        """
        self._config = config or TripQueueConfig()
        self._queue = queue or SQLiteQueueStore(default_queue_path(self._config))
        self._documents = documents or create_document_store(self._config)

        retry = self._config.retry
        self._generator = ItineraryGenerator(
            provider or create_provider(self._config),
            retries=retry.retries,
            base_delay=retry.base_delay,
            factor=retry.factor,
        )

        jobs = self._config.jobs
        self._processor = JobProcessor(
            self._queue,
            self._documents,
            self._generator,
            generation_timeout=jobs.generation_timeout,
            stale_lock_seconds=jobs.stale_lock_seconds,
        )
        self._scheduler = SweepScheduler(self._processor, interval=jobs.sweep_interval)
        self._dispatcher = SweepDispatcher(self._processor)
        self._closed = False
        logger.info(f"Created ServiceLifecycle (provider={self._config.provider})")

    @property
    def config(self) -> TripQueueConfig:
        return self._config

    @property
    def queue(self) -> QueueStore:
        return self._queue

    @property
    def documents(self) -> DocumentStore:
        return self._documents

    @property
    def processor(self) -> JobProcessor:
        return self._processor

    @property
    def scheduler(self) -> SweepScheduler:
        return self._scheduler

    @property
    def dispatcher(self) -> SweepDispatcher:
        return self._dispatcher

    async def startup(self, schedule: bool = True, handle_signals: bool = False) -> None:
        """
        Start the service.

        Steps:
            1. Initialize queue schema (SQLite only)
            2. Register signal handlers if requested
            3. Start the periodic sweep scheduler if requested
        """
        logger.info("Starting service lifecycle...")

        if isinstance(self._queue, SQLiteQueueStore):
            await self._queue.initialize()

        if handle_signals:
            setup_signal_handlers(self.shutdown)

        if schedule:
            await self._scheduler.start()

        logger.info(f"Service lifecycle started (scheduler={'on' if schedule else 'off'})")

    async def shutdown(self) -> None:
        """
        Shut down gracefully.

        Steps:
            1. Stop scheduler and cancel background tasks
            2. Close provider and document store HTTP clients
            3. Close the queue (WAL checkpoint)
        """
        if self._closed:
            return
        self._closed = True
        logger.info("Shutting down service lifecycle...")

        if self._scheduler.running:
            await self._scheduler.stop()
        await self._dispatcher.cancel_all()

        await self._generator.close()
        await self._documents.close()
        await self._queue.close()

        logger.info("Service lifecycle shutdown complete")
