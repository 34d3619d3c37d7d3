# tripqueue/llm/ollama_provider.py
"""Ollama chat provider."""

import logging

import httpx
from ollama import AsyncClient, ResponseError

from tripqueue.errors import GenerationHTTPError, MalformedOutputError

logger = logging.getLogger(__name__)


class OllamaProvider:
    """
    Non-streaming Ollama chat call.

    ResponseError status codes are mapped onto GenerationHTTPError so the
    shared retry policy treats Ollama like any HTTP provider.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "llama3.1:8b",
        temperature: float = 0.2,
        timeout: float = 30.0,
    ):
        self.model = model
        self.temperature = temperature
        self.client = AsyncClient(host=base_url, timeout=httpx.Timeout(timeout))

    async def generate(self, messages: list[dict]) -> str:
        logger.info(f"Ollama.generate: model={self.model}, messages={len(messages)}")
        try:
            response = await self.client.chat(
                model=self.model,
                messages=messages,
                stream=False,
                options={"temperature": self.temperature},
            )
        except ResponseError as e:
            raise GenerationHTTPError(e.status_code, e.error) from e

        content = response.message.content
        if not content:
            raise MalformedOutputError("Empty LLM response")
        return content

    async def close(self) -> None:
        await self.client.close()
