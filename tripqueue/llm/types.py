# tripqueue/llm/types.py
"""Provider capability interface shared by all text-generation backends."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class TextProvider(Protocol):
    """
    Anything that turns a chat transcript into raw text.

    Implementations raise GenerationHTTPError for non-success statuses and let
    network-level errors (httpx.TransportError, ConnectionError) propagate so
    the retry policy can classify them.
    """

    model: str

    async def generate(self, messages: list[dict]) -> str:
        """Return the assistant text for the given messages."""
        ...

    async def close(self) -> None:
        """Release HTTP resources."""
        ...
