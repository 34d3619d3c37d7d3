# tests/unit/test_documents.py
"""Tests for the document codec and both document store adapters."""

import json
from datetime import datetime, timezone

import httpx
import pytest

from tripqueue.documents import (
    DocumentStatus,
    FirestoreDocumentStore,
    InMemoryDocumentStore,
)
from tripqueue.documents.codec import decode_document, encode_create, encode_save
from tripqueue.errors import DocumentStoreError

from .conftest import make_itinerary

CREATED = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)
DONE = datetime(2026, 3, 1, 12, 0, 20, tzinfo=timezone.utc)
JOB_ID = "0b7c56a2-51a4-4a0e-9a8b-1f0e2d3c4b5a"


class TestCodec:
    def test_create_fields(self):
        fields = encode_create("Rome", 3, CREATED)
        assert fields == {
            "status": {"stringValue": "processing"},
            "destination": {"stringValue": "Rome"},
            "durationDays": {"integerValue": "3"},
            "createdAt": {"timestampValue": "2026-03-01T12:00:00+00:00"},
            "completedAt": {"nullValue": None},
            "itinerary": {"nullValue": None},
            "error": {"nullValue": None},
        }

    def test_save_without_itinerary_leaves_it_out_of_mask(self):
        fields, paths = encode_save(DocumentStatus.FAILED, DONE, DONE, "boom")
        assert paths == ["status", "updatedAt", "completedAt", "error"]
        assert "itinerary" not in fields
        assert fields["error"] == {"stringValue": "boom"}

    def test_save_with_itinerary_serializes_string(self):
        itinerary = make_itinerary(1)
        fields, paths = encode_save(DocumentStatus.COMPLETED, DONE, DONE, None, itinerary)
        assert paths[-1] == "itinerary"
        assert json.loads(fields["itinerary"]["stringValue"]) == itinerary
        assert fields["error"] == {"nullValue": None}

    def test_save_with_none_itinerary_clears_it(self):
        fields, paths = encode_save(DocumentStatus.FAILED, DONE, DONE, "x", None)
        assert "itinerary" in paths
        assert fields["itinerary"] == {"nullValue": None}

    def test_decode_firestore_nanosecond_timestamp(self):
        doc = decode_document(
            JOB_ID,
            {
                "status": {"stringValue": "completed"},
                "destination": {"stringValue": "Rome"},
                "durationDays": {"integerValue": "3"},
                "createdAt": {"timestampValue": "2026-03-01T12:00:00.123456789Z"},
                "completedAt": {"timestampValue": "2026-03-01T12:00:20Z"},
                "itinerary": {"stringValue": json.dumps(make_itinerary(1))},
                "error": {"nullValue": None},
            },
        )
        assert doc.status == DocumentStatus.COMPLETED
        assert doc.duration_days == 3
        assert doc.created_at.year == 2026
        assert doc.completed_at == DONE
        assert doc.itinerary == make_itinerary(1)
        assert doc.error is None


class TestInMemoryDocumentStore:
    @pytest.mark.asyncio
    async def test_create_then_complete(self):
        store = InMemoryDocumentStore()
        await store.create(JOB_ID, "Rome", 3, CREATED)

        doc = await store.fetch(JOB_ID)
        assert doc.status == DocumentStatus.PROCESSING
        assert doc.itinerary is None
        assert doc.completed_at is None

        await store.save(
            JOB_ID,
            DocumentStatus.COMPLETED,
            updated_at=DONE,
            completed_at=DONE,
            itinerary=make_itinerary(3),
        )
        doc = await store.fetch(JOB_ID)
        assert doc.status == DocumentStatus.COMPLETED
        assert doc.destination == "Rome"
        assert doc.created_at == CREATED
        assert doc.updated_at == doc.completed_at == DONE
        assert len(doc.itinerary) == 3

        raw = store.raw_fields(JOB_ID)
        assert raw["durationDays"] == {"integerValue": "3"}
        assert json.loads(raw["itinerary"]["stringValue"]) == make_itinerary(3)

    @pytest.mark.asyncio
    async def test_save_keeps_itinerary_when_not_given(self):
        store = InMemoryDocumentStore()
        await store.create(JOB_ID, "Rome", 3, CREATED)
        await store.save(JOB_ID, DocumentStatus.COMPLETED, DONE, DONE, itinerary=make_itinerary(1))
        await store.save(JOB_ID, DocumentStatus.COMPLETED, DONE, DONE)

        assert (await store.fetch(JOB_ID)).itinerary == make_itinerary(1)

    @pytest.mark.asyncio
    async def test_create_overwrites(self):
        store = InMemoryDocumentStore()
        await store.create(JOB_ID, "Rome", 3, CREATED)
        await store.save(JOB_ID, DocumentStatus.FAILED, DONE, DONE, error="boom")
        await store.create(JOB_ID, "Rome", 3, CREATED)

        doc = await store.fetch(JOB_ID)
        assert doc.status == DocumentStatus.PROCESSING
        assert doc.error is None

    @pytest.mark.asyncio
    async def test_fetch_missing(self):
        assert await InMemoryDocumentStore().fetch(JOB_ID) is None


class FirestoreRecorder:
    def __init__(self, responses: list[httpx.Response] | None = None):
        self.requests: list[httpx.Request] = []
        self.responses = responses or [httpx.Response(200, json={})]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responses[min(len(self.requests), len(self.responses)) - 1]


def _firestore(recorder: FirestoreRecorder, **kwargs) -> FirestoreDocumentStore:
    kwargs.setdefault("access_token", "tok")
    return FirestoreDocumentStore(
        project_id="demo", transport=httpx.MockTransport(recorder), **kwargs
    )


class TestFirestoreDocumentStore:
    @pytest.mark.asyncio
    async def test_create_patches_full_document(self):
        recorder = FirestoreRecorder()
        store = _firestore(recorder)

        await store.create(JOB_ID, "Rome", 3, CREATED)

        request = recorder.requests[0]
        assert request.method == "PATCH"
        assert request.url.path == (
            f"/v1/projects/demo/databases/(default)/documents/itineraries/{JOB_ID}"
        )
        assert "updateMask.fieldPaths" not in request.url.params
        assert request.headers["Authorization"] == "Bearer tok"
        assert json.loads(request.content)["fields"] == json.loads(
            json.dumps(encode_create("Rome", 3, CREATED))
        )
        await store.close()

    @pytest.mark.asyncio
    async def test_save_sends_update_mask(self):
        recorder = FirestoreRecorder()
        store = _firestore(recorder)

        await store.save(
            JOB_ID, DocumentStatus.COMPLETED, DONE, DONE, itinerary=make_itinerary(2)
        )

        request = recorder.requests[0]
        assert request.url.params.get_list("updateMask.fieldPaths") == [
            "status",
            "updatedAt",
            "completedAt",
            "error",
            "itinerary",
        ]
        fields = json.loads(request.content)["fields"]
        assert fields["status"] == {"stringValue": "completed"}
        assert json.loads(fields["itinerary"]["stringValue"]) == make_itinerary(2)

    @pytest.mark.asyncio
    async def test_save_failure_raises_with_body(self):
        recorder = FirestoreRecorder([httpx.Response(403, text="PERMISSION_DENIED")])
        store = _firestore(recorder)

        with pytest.raises(DocumentStoreError, match="save failed: 403 PERMISSION_DENIED"):
            await store.save(JOB_ID, DocumentStatus.FAILED, DONE, DONE, error="x")
        assert len(recorder.requests) == 1  # no retries

    @pytest.mark.asyncio
    async def test_network_failure_raises_store_error(self):
        def handler(request):
            raise httpx.ConnectError("unreachable")

        store = FirestoreDocumentStore(
            project_id="demo", access_token="tok", transport=httpx.MockTransport(handler)
        )
        with pytest.raises(DocumentStoreError, match="create failed"):
            await store.create(JOB_ID, "Rome", 3, CREATED)

    @pytest.mark.asyncio
    async def test_fetch_decodes_and_handles_404(self):
        body = {"name": "x", "fields": encode_create("Rome", 3, CREATED)}
        recorder = FirestoreRecorder(
            [httpx.Response(200, json=body), httpx.Response(404, json={})]
        )
        store = _firestore(recorder)

        doc = await store.fetch(JOB_ID)
        assert doc.status == DocumentStatus.PROCESSING
        assert doc.destination == "Rome"
        assert doc.created_at == CREATED

        assert await store.fetch(JOB_ID) is None
        assert recorder.requests[0].method == "GET"

    @pytest.mark.asyncio
    async def test_token_provider_called_per_request(self):
        tokens = iter(["t1", "t2"])

        async def token_provider():
            return next(tokens)

        recorder = FirestoreRecorder()
        store = _firestore(recorder, access_token=None, token_provider=token_provider)
        await store.create(JOB_ID, "Rome", 3, CREATED)
        await store.save(JOB_ID, DocumentStatus.FAILED, DONE, DONE, error="x")

        assert [r.headers["Authorization"] for r in recorder.requests] == [
            "Bearer t1",
            "Bearer t2",
        ]

    def test_requires_credentials(self):
        with pytest.raises(ValueError):
            FirestoreDocumentStore(project_id="demo")
