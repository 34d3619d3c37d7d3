# tripqueue/models/responses.py
"""
Pydantic response models for the submission and status surfaces.

Serialized with camelCase keys (``model_dump(by_alias=True)``).
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SubmitItineraryResponse(_CamelModel):
    """Response from create_itinerary."""

    job_id: str = Field(description="Unique job identifier for status polling")


class ItineraryStatusResponse(_CamelModel):
    """Normalized view of an itinerary document."""

    status: str = Field(description="processing, completed or failed")
    destination: str | None = Field(default=None)
    duration_days: int | None = Field(default=None)
    created_at: str | None = Field(default=None, description="ISO-8601 creation time")
    completed_at: str | None = Field(
        default=None, description="ISO-8601 completion or failure time"
    )
    itinerary: list[dict[str, Any]] | None = Field(
        default=None, description="Day plans when completed"
    )
    error: str | None = Field(default=None, description="Failure message when failed")


class QueueRecordSummary(_CamelModel):
    """One queue record (used by the CLI jobs listing)."""

    job_id: str
    destination: str
    duration_days: int
    status: str
    created_at: str
    locked_at: str | None = None
    error: str | None = None
