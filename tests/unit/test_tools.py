# tests/unit/test_tools.py
"""
Integration tests for the service functions.

Submit -> background create + sweep -> check_status, over in-memory stores.
"""

import asyncio
import json
import re

import pytest
from fastmcp.exceptions import ToolError

from tripqueue.documents.base import DocumentStatus
from tripqueue.documents.memory import InMemoryDocumentStore
from tripqueue.errors import DocumentStoreError
from tripqueue.models.jobs import QueueStatus
from tripqueue.tools import JobNotFoundError, check_status, list_jobs, run_sweep, submit_itinerary

from .conftest import FakeProvider, make_itinerary, make_lifecycle

UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$")


class SlowCreateDocumentStore(InMemoryDocumentStore):
    async def create(self, *args, **kwargs):
        await asyncio.sleep(0.2)
        await super().create(*args, **kwargs)


class BrokenCreateDocumentStore(InMemoryDocumentStore):
    async def create(self, *args, **kwargs):
        raise DocumentStoreError("create", 503, "UNAVAILABLE")


async def _submit(lifecycle, payload):
    return await submit_itinerary(
        payload,
        queue=lifecycle.queue,
        documents=lifecycle.documents,
        dispatcher=lifecycle.dispatcher,
    )


@pytest.mark.asyncio
async def test_submit_creates_document_before_queueing(provider):
    lifecycle = make_lifecycle(provider)

    result = await submit_itinerary(
        {"destination": "Lisbon", "durationDays": 3},
        queue=lifecycle.queue,
        documents=lifecycle.documents,
        dispatcher=lifecycle.dispatcher,
        sweep=False,
    )

    assert set(result) == {"jobId"}
    assert UUID_RE.match(result["jobId"])
    # Nothing is written until the background task runs
    assert await lifecycle.queue.list_all() == []

    await lifecycle.dispatcher.drain()

    record = await lifecycle.queue.get(result["jobId"])
    assert record.status == QueueStatus.PENDING
    assert record.destination == "Lisbon"
    doc = await lifecycle.documents.fetch(result["jobId"])
    assert doc.status == DocumentStatus.PROCESSING
    assert doc.created_at == record.created_at
    assert provider.calls == []


@pytest.mark.asyncio
async def test_sweep_during_slow_create_does_not_strand_job(provider):
    lifecycle = make_lifecycle(provider, documents=SlowCreateDocumentStore())

    result = await _submit(lifecycle, {"destination": "Lisbon", "durationDays": 3})
    await asyncio.sleep(0.05)

    # A periodic or POST /sweep pass while the document is still being created
    report = await run_sweep(lifecycle.processor)
    assert report["completed"] == []

    await lifecycle.dispatcher.drain()
    status = await check_status(result["jobId"], documents=lifecycle.documents)

    assert status["status"] == "completed"
    assert status["destination"] == "Lisbon"
    assert len(status["itinerary"]) == 3
    assert await lifecycle.queue.list_all() == []


@pytest.mark.asyncio
async def test_failed_create_leaves_nothing_queued(provider):
    lifecycle = make_lifecycle(provider, documents=BrokenCreateDocumentStore())

    await _submit(lifecycle, {"destination": "Lisbon", "durationDays": 3})
    await lifecycle.dispatcher.drain()

    assert await lifecycle.queue.list_all() == []
    assert provider.calls == []


@pytest.mark.asyncio
async def test_tokyo_five_days_end_to_end():
    plan = make_itinerary(5, theme="Tokyo")
    lifecycle = make_lifecycle(FakeProvider([json.dumps(plan)]))

    result = await _submit(lifecycle, {"destination": "Tokyo, Japan", "durationDays": 5})
    await lifecycle.dispatcher.drain()
    status = await check_status(result["jobId"], documents=lifecycle.documents)

    assert status["status"] == "completed"
    assert status["destination"] == "Tokyo, Japan"
    assert status["durationDays"] == 5
    assert len(status["itinerary"]) == 5
    assert status["error"] is None
    assert status["completedAt"] is not None
    assert await lifecycle.queue.list_all() == []


@pytest.mark.asyncio
async def test_failed_job_status():
    lifecycle = make_lifecycle(FakeProvider(["[]"]))

    result = await _submit(lifecycle, {"destination": "Oslo", "durationDays": 2})
    await lifecycle.dispatcher.drain()
    status = await check_status(result["jobId"], documents=lifecycle.documents)

    assert status["status"] == "failed"
    assert status["itinerary"] is None
    assert status["error"].startswith("Validation error: (root):")

    jobs = await list_jobs(lifecycle.queue)
    assert [j["jobId"] for j in jobs] == [result["jobId"]]
    assert jobs[0]["status"] == "failed"


@pytest.mark.asyncio
async def test_invalid_payload_writes_nothing(provider):
    lifecycle = make_lifecycle(provider)

    with pytest.raises(ToolError, match="durationDays must be an integer"):
        await _submit(lifecycle, {"destination": "Lisbon", "durationDays": "3"})

    assert await lifecycle.queue.list_all() == []
    assert lifecycle.dispatcher.pending == 0


@pytest.mark.asyncio
async def test_check_status_unknown_job(provider):
    lifecycle = make_lifecycle(provider)

    with pytest.raises(JobNotFoundError, match="not found"):
        await check_status("0b7c56a2-51a4-4a0e-9a8b-1f0e2d3c4b5a", documents=lifecycle.documents)


@pytest.mark.asyncio
async def test_check_status_rejects_malformed_id(provider):
    lifecycle = make_lifecycle(provider)

    with pytest.raises(ToolError, match="Invalid job ID"):
        await check_status("../etc/passwd", documents=lifecycle.documents)


@pytest.mark.asyncio
async def test_run_sweep_reports_outcomes(provider):
    lifecycle = make_lifecycle(provider)

    report = await run_sweep(lifecycle.processor)

    assert report == {
        "reclaimed": [],
        "completed": [],
        "failed": [],
        "skipped": [],
        "lostLock": [],
        "errored": [],
    }
