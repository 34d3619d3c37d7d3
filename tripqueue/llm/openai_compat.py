# tripqueue/llm/openai_compat.py
"""Chat-completions provider for OpenAI and OpenAI-compatible servers."""

import logging

import httpx

from tripqueue.errors import GenerationHTTPError, MalformedOutputError

logger = logging.getLogger(__name__)


class OpenAIChatProvider:
    """
    Single-shot chat completion over plain httpx.

    Retries are not handled here; non-success statuses surface as
    GenerationHTTPError so the caller's retry policy can classify them.
    """

    def __init__(
        self,
        base_url: str = "https://api.openai.com/v1",
        model: str = "gpt-4o",
        api_key: str | None = None,
        temperature: float = 0.2,
        max_tokens: int = 1500,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize provider.

        Args:
            base_url:    API root (the /chat/completions path is appended)
            model:       Model name
            api_key:     Bearer token (omitted from headers when None)
            temperature: Sampling temperature
            max_tokens:  Completion token cap
            timeout:     Per-request timeout in seconds
            transport:   Optional httpx transport (tests)
        """
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"

        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers=headers,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def generate(self, messages: list[dict]) -> str:
        """
        POST a chat completion and return the first choice's content.

        Raises:
            GenerationHTTPError: On a non-success status
            MalformedOutputError: If the response has no content
            httpx.TransportError: On network failures
        """
        logger.info(f"OpenAIChat.generate: model={self.model}, messages={len(messages)}")
        resp = await self._client.post(
            "/chat/completions",
            json={
                "model": self.model,
                "messages": messages,
                "temperature": self.temperature,
                "max_tokens": self.max_tokens,
            },
        )
        if not resp.is_success:
            raise GenerationHTTPError(resp.status_code, resp.text[:500])

        try:
            data = resp.json()
        except ValueError as e:
            raise MalformedOutputError("LLM response body is not JSON") from e

        choices = data.get("choices") or []
        content = choices[0].get("message", {}).get("content") if choices else None
        if not content:
            raise MalformedOutputError("Empty LLM response")

        logger.info(f"OpenAIChat.generate: {len(content)} chars")
        return content

    async def close(self) -> None:
        await self._client.aclose()
