# tripqueue/documents/memory.py
"""In-process document store that keeps Firestore-shaped field maps."""

import copy
import logging
from datetime import datetime

from .base import UNSET, DocumentStatus, DocumentStore, ItineraryDocument
from .codec import decode_document, encode_create, encode_save

logger = logging.getLogger(__name__)


class InMemoryDocumentStore(DocumentStore):
    """
    Document store for local runs and tests.

    Applies the same create-overwrites / save-upserts-masked-fields semantics
    as the Firestore adapter.
    """

    def __init__(self) -> None:
        self._docs: dict[str, dict[str, dict]] = {}
        logger.info("Initialized InMemoryDocumentStore")

    async def create(
        self,
        job_id: str,
        destination: str,
        duration_days: int,
        created_at: datetime,
    ) -> None:
        self._docs[job_id] = encode_create(destination, duration_days, created_at)
        logger.debug(f"Created document {job_id}")

    async def save(
        self,
        job_id: str,
        status: DocumentStatus,
        updated_at: datetime,
        completed_at: datetime | None = None,
        error: str | None = None,
        itinerary: list[dict] | None = UNSET,
    ) -> None:
        fields, _paths = encode_save(status, updated_at, completed_at, error, itinerary)
        self._docs.setdefault(job_id, {}).update(fields)
        logger.debug(f"Saved document {job_id} ({status.value})")

    async def fetch(self, job_id: str) -> ItineraryDocument | None:
        fields = self._docs.get(job_id)
        if fields is None:
            return None
        return decode_document(job_id, copy.deepcopy(fields))

    def raw_fields(self, job_id: str) -> dict[str, dict] | None:
        """Stored wire fields (for inspection in tests)."""
        fields = self._docs.get(job_id)
        return copy.deepcopy(fields) if fields is not None else None
