# tests/unit/conftest.py
"""Shared fakes for processor, tools and surface tests."""

import asyncio
import json

import pytest


def make_itinerary(days: int = 2, theme: str = "Old town") -> list[dict]:
    return [
        {
            "day": n,
            "theme": f"{theme} {n}",
            "activities": [
                {"time": "09:00", "description": "Breakfast", "location": "Hotel"},
                {"time": "11:00", "description": "Walking tour", "location": "Center"},
            ],
        }
        for n in range(1, days + 1)
    ]


class FakeProvider:
    """
    Scripted TextProvider.

    Each call consumes the next item of ``responses``: strings are returned,
    exceptions raised. The last item repeats once the script runs out.
    """

    model = "fake-model"

    def __init__(self, responses, delay: float = 0.0, gate: asyncio.Event | None = None):
        self.responses = list(responses)
        self.delay = delay
        self.gate = gate
        self.calls: list[list[dict]] = []
        self.closed = False

    async def generate(self, messages: list[dict]) -> str:
        self.calls.append(messages)
        item = self.responses[min(len(self.calls), len(self.responses)) - 1]
        if self.gate is not None:
            await self.gate.wait()
        if self.delay:
            await asyncio.sleep(self.delay)
        if isinstance(item, BaseException):
            raise item
        return item

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def itinerary() -> list[dict]:
    return make_itinerary(3)


@pytest.fixture
def provider(itinerary) -> FakeProvider:
    return FakeProvider([json.dumps(itinerary)])


def make_lifecycle(provider, documents=None, **jobs):
    """ServiceLifecycle over in-memory stores with no retry backoff."""
    from tripqueue.background.lifecycle import ServiceLifecycle
    from tripqueue.config.schema import TripQueueConfig
    from tripqueue.documents.memory import InMemoryDocumentStore
    from tripqueue.models.jobs import InMemoryQueueStore

    config = TripQueueConfig.model_validate(
        {"retry": {"retries": 0, "base_delay": 0.0}, "jobs": jobs}
    )
    return ServiceLifecycle(
        config,
        queue=InMemoryQueueStore(),
        documents=documents or InMemoryDocumentStore(),
        provider=provider,
    )
