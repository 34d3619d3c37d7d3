# tripqueue/config/schema.py
"""
Pydantic configuration models for tripqueue.

All models use extra="ignore" to allow unknown YAML keys without crashing.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class OpenAIConfig(BaseModel):
    """OpenAI-compatible chat completions endpoint."""

    model_config = ConfigDict(extra="ignore")

    base_url: str = Field(
        default="https://api.openai.com/v1", description="Chat completions API base URL"
    )
    model: str = Field(default="gpt-4o", description="Model used for itinerary generation")
    api_key: str | None = Field(
        default=None,
        description="Bearer token (overridden by TRIPQUEUE_LLM_API_KEY)",
    )
    temperature: float = Field(default=0.2, ge=0.0, le=2.0)
    max_tokens: int = Field(default=1500, ge=1)
    timeout: float = Field(
        default=30.0, description="Per-request HTTP timeout in seconds"
    )


class OllamaConfig(BaseModel):
    """Ollama server configuration."""

    model_config = ConfigDict(extra="ignore")

    base_url: str = Field(
        default="http://localhost:11434", description="Ollama API base URL"
    )
    model: str = Field(default="llama3.1:8b", description="Ollama model to use")
    temperature: float = Field(default=0.2, ge=0.0, le=2.0)
    timeout: float = Field(default=30.0, description="Request timeout in seconds")


class RetryConfig(BaseModel):
    """Backoff policy for generation calls."""

    model_config = ConfigDict(extra="ignore")

    retries: int = Field(
        default=3, ge=0, le=10, description="Extra attempts after the first failure"
    )
    base_delay: float = Field(
        default=0.5, ge=0.0, description="Base backoff delay in seconds (also max jitter)"
    )
    factor: float = Field(default=2.0, ge=1.0, description="Exponential backoff factor")


class JobsConfig(BaseModel):
    """Job processing and queue configuration."""

    model_config = ConfigDict(extra="ignore")

    generation_timeout: float = Field(
        default=30.0, gt=0.0, description="Deadline for the whole generation phase (seconds)"
    )
    stale_lock_seconds: float = Field(
        default=600.0,
        gt=0.0,
        description="Age after which an in-progress lock is reclaimed",
    )
    sweep_interval: float = Field(
        default=60.0, gt=0.0, description="Seconds between scheduled sweeps"
    )
    queue_db: str | None = Field(
        default=None,
        description="SQLite queue path (None = jobs.db in the user config dir)",
    )


class FirestoreConfig(BaseModel):
    """Firestore REST document store."""

    model_config = ConfigDict(extra="ignore")

    project_id: str | None = Field(
        default=None, description="GCP project (None = in-memory document store)"
    )
    collection: str = Field(default="itineraries")
    base_url: str = Field(default="https://firestore.googleapis.com/v1")
    access_token: str | None = Field(
        default=None,
        description="OAuth bearer token (overridden by TRIPQUEUE_FIRESTORE_TOKEN)",
    )
    timeout: float = Field(default=10.0, description="Request timeout in seconds")


class ServerConfig(BaseModel):
    """HTTP server binding."""

    model_config = ConfigDict(extra="ignore")

    host: str = Field(default="127.0.0.1")
    port: int = Field(default=8080, ge=1, le=65535)


class TripQueueConfig(BaseModel):
    """Root configuration for tripqueue."""

    model_config = ConfigDict(extra="ignore")

    provider: Literal["openai", "ollama"] = Field(
        default="openai", description="Text generation provider to use"
    )
    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)
    ollama: OllamaConfig = Field(default_factory=OllamaConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    jobs: JobsConfig = Field(default_factory=JobsConfig)
    firestore: FirestoreConfig = Field(default_factory=FirestoreConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
