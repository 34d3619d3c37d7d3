# tripqueue/documents/firestore.py
"""Firestore REST adapter for itinerary documents."""

import logging
from collections.abc import Awaitable, Callable
from datetime import datetime

import httpx

from tripqueue.errors import DocumentStoreError

from .base import UNSET, DocumentStatus, DocumentStore, ItineraryDocument
from .codec import decode_document, encode_create, encode_save

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], Awaitable[str]]


class FirestoreDocumentStore(DocumentStore):
    """
    Itinerary documents in a Firestore collection, over the REST API.

    Token acquisition is not handled here: pass either a static bearer token
    or an async callable returning a fresh one. No retries are attempted.
    """

    def __init__(
        self,
        project_id: str,
        collection: str = "itineraries",
        access_token: str | None = None,
        token_provider: TokenProvider | None = None,
        base_url: str = "https://firestore.googleapis.com/v1",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize Firestore adapter.

        Args:
            project_id:     GCP project id
            collection:     Collection holding itinerary documents
            access_token:   Static OAuth bearer token
            token_provider: Async callable returning a bearer token (wins over access_token)
            base_url:       Firestore REST root
            timeout:        Request timeout in seconds
            transport:      Optional httpx transport (tests)
        """
        if access_token is None and token_provider is None:
            raise ValueError("Firestore store needs an access_token or a token_provider")

        self._collection_url = (
            f"{base_url.rstrip('/')}/projects/{project_id}"
            f"/databases/(default)/documents/{collection}"
        )
        self._access_token = access_token
        self._token_provider = token_provider
        self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
        logger.info(f"Created FirestoreDocumentStore for {project_id}/{collection}")

    async def _headers(self) -> dict[str, str]:
        token = await self._token_provider() if self._token_provider else self._access_token
        return {"Authorization": f"Bearer {token}", "Content-Type": "application/json"}

    async def _request(
        self, operation: str, method: str, job_id: str, **kwargs
    ) -> httpx.Response:
        try:
            return await self._client.request(
                method,
                f"{self._collection_url}/{job_id}",
                headers=await self._headers(),
                **kwargs,
            )
        except httpx.HTTPError as e:
            raise DocumentStoreError(operation, None, f"{type(e).__name__}: {e}") from e

    async def create(
        self,
        job_id: str,
        destination: str,
        duration_days: int,
        created_at: datetime,
    ) -> None:
        fields = encode_create(destination, duration_days, created_at)
        resp = await self._request("create", "PATCH", job_id, json={"fields": fields})
        if not resp.is_success:
            raise DocumentStoreError("create", resp.status_code, resp.text)
        logger.info(f"Created itinerary document {job_id}")

    async def save(
        self,
        job_id: str,
        status: DocumentStatus,
        updated_at: datetime,
        completed_at: datetime | None = None,
        error: str | None = None,
        itinerary: list[dict] | None = UNSET,
    ) -> None:
        fields, paths = encode_save(status, updated_at, completed_at, error, itinerary)
        params = [("updateMask.fieldPaths", p) for p in paths]
        resp = await self._request(
            "save", "PATCH", job_id, params=params, json={"fields": fields}
        )
        if not resp.is_success:
            raise DocumentStoreError("save", resp.status_code, resp.text)
        logger.info(f"Saved itinerary document {job_id} ({status.value})")

    async def fetch(self, job_id: str) -> ItineraryDocument | None:
        resp = await self._request("fetch", "GET", job_id)
        if resp.status_code == 404:
            return None
        if not resp.is_success:
            raise DocumentStoreError("fetch", resp.status_code, resp.text)
        return decode_document(job_id, resp.json().get("fields", {}))

    async def close(self) -> None:
        await self._client.aclose()
