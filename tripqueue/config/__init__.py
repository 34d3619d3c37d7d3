"""Configuration system for tripqueue."""

from .loader import get_config_dir, get_config_path, load_config
from .schema import (
    FirestoreConfig,
    JobsConfig,
    OllamaConfig,
    OpenAIConfig,
    RetryConfig,
    ServerConfig,
    TripQueueConfig,
)

__all__ = [
    "TripQueueConfig",
    "OpenAIConfig",
    "OllamaConfig",
    "RetryConfig",
    "JobsConfig",
    "FirestoreConfig",
    "ServerConfig",
    "load_config",
    "get_config_path",
    "get_config_dir",
]
