# tripqueue/llm/generator.py
"""Itinerary generation: prompt construction, retried provider call, parsing."""

import asyncio
import logging
from typing import Any

import httpx

from tripqueue.errors import GenerationError, GenerationTimeoutError

from .parsing import parse_generation_output
from .retry import SleepFn, generation_retrying
from .types import TextProvider

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = "Output exactly one JSON array, no commentary, no markdown."

ITINERARY_SHAPE = (
    '[{"day":number,"theme":string,"activities":'
    '[{"time":string,"description":string,"location":string}]}...]'
)


def build_messages(destination: str, duration_days: int) -> list[dict]:
    """Chat transcript asking for a day-by-day itinerary as a bare JSON array."""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {
            "role": "user",
            "content": (
                f"Itinerary for {duration_days} days in {destination}. "
                "Return exactly a JSON array:\n"
                f"{ITINERARY_SHAPE}"
            ),
        },
    ]


class ItineraryGenerator:
    """
    Produces the raw (unvalidated) itinerary for a job.

    Wraps any TextProvider with the retry policy and an optional deadline.
    """

    def __init__(
        self,
        provider: TextProvider,
        retries: int = 3,
        base_delay: float = 0.5,
        factor: float = 2.0,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self._provider = provider
        self._retries = retries
        self._base_delay = base_delay
        self._factor = factor
        self._sleep = sleep

    async def _generate_text(self, messages: list[dict]) -> str:
        retrying = generation_retrying(
            retries=self._retries,
            base_delay=self._base_delay,
            factor=self._factor,
            sleep=self._sleep,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    return await self._provider.generate(messages)
        except (httpx.TransportError, ConnectionError) as e:
            raise GenerationError(f"LLM network error: {type(e).__name__}: {e}") from e

    async def generate(
        self,
        destination: str,
        duration_days: int,
        timeout: float | None = None,
    ) -> Any:
        """
        Generate and parse an itinerary.

        Args:
            destination:   Trip destination
            duration_days: Number of days
            timeout:       Deadline in seconds for the whole call, retries and
                           backoff sleeps included (None = no deadline)

        Returns:
            Parsed JSON value (expected to be a list; not yet validated)

        Raises:
            GenerationTimeoutError: Deadline expired
            GenerationError: HTTP failure, exhausted retries or malformed output
        """
        messages = build_messages(destination, duration_days)
        try:
            raw = await asyncio.wait_for(self._generate_text(messages), timeout)
        except TimeoutError as e:
            logger.warning(f"Generation for {destination!r} aborted after {timeout}s")
            raise GenerationTimeoutError() from e

        return parse_generation_output(raw)

    async def close(self) -> None:
        await self._provider.close()
