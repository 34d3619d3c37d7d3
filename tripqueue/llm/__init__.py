"""Text generation: providers, retry policy and itinerary prompt/parsing."""

from .factory import create_provider
from .generator import ItineraryGenerator, build_messages
from .ollama_provider import OllamaProvider
from .openai_compat import OpenAIChatProvider
from .parsing import extract_first_json_array, parse_generation_output
from .retry import generation_retrying, is_retryable
from .types import TextProvider

__all__ = [
    "TextProvider",
    "OpenAIChatProvider",
    "OllamaProvider",
    "create_provider",
    "ItineraryGenerator",
    "build_messages",
    "extract_first_json_array",
    "parse_generation_output",
    "generation_retrying",
    "is_retryable",
]
