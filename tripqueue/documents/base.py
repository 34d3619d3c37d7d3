# tripqueue/documents/base.py
"""
Durable itinerary document model and store protocol.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class DocumentStatus(Enum):
    """User-visible job states."""

    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class _Unset:
    """Marker for 'field not given' in partial updates."""

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


@dataclass
class ItineraryDocument:
    """
    Authoritative record of one job.

    Fields may be None when a save() upserted a document that create() never
    wrote (a store written to by other tools).
    """

    job_id: str
    status: DocumentStatus
    destination: str | None
    duration_days: int | None
    created_at: datetime | None
    updated_at: datetime | None = None
    completed_at: datetime | None = None
    itinerary: list[dict] | None = None
    error: str | None = None


class DocumentStore(ABC):
    """Durable document store used by submission, processing and status queries."""

    @abstractmethod
    async def create(
        self,
        job_id: str,
        destination: str,
        duration_days: int,
        created_at: datetime,
    ) -> None:
        """
        Write the initial ``processing`` document, replacing any existing one.

        Raises:
            DocumentStoreError: On a non-success response
        """

    @abstractmethod
    async def save(
        self,
        job_id: str,
        status: DocumentStatus,
        updated_at: datetime,
        completed_at: datetime | None = None,
        error: str | None = None,
        itinerary: list[dict] | None = UNSET,
    ) -> None:
        """
        Partially update a document.

        status, updated_at, completed_at and error are always written;
        itinerary only when given (None clears it).

        Raises:
            DocumentStoreError: On a non-success response
        """

    @abstractmethod
    async def fetch(self, job_id: str) -> ItineraryDocument | None:
        """
        Read a document.

        Returns:
            ItineraryDocument, or None if it does not exist

        Raises:
            DocumentStoreError: On a non-success response other than not-found
        """

    async def close(self) -> None:
        """Release resources held by the store."""
