# tripqueue/llm/factory.py
"""Factory for creating the configured text provider."""

from tripqueue.config.schema import TripQueueConfig

from .ollama_provider import OllamaProvider
from .openai_compat import OpenAIChatProvider
from .types import TextProvider


def create_provider(config: TripQueueConfig) -> TextProvider:
    """
    Create the text provider selected by config.provider.

    Returns:
        OllamaProvider for provider="ollama", OpenAIChatProvider otherwise
    """
    if config.provider == "ollama":
        return OllamaProvider(
            base_url=config.ollama.base_url,
            model=config.ollama.model,
            temperature=config.ollama.temperature,
            timeout=config.ollama.timeout,
        )
    return OpenAIChatProvider(
        base_url=config.openai.base_url,
        model=config.openai.model,
        api_key=config.openai.api_key,
        temperature=config.openai.temperature,
        max_tokens=config.openai.max_tokens,
        timeout=config.openai.timeout,
    )
