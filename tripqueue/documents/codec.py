# tripqueue/documents/codec.py
"""
Firestore typed-value encoding for itinerary documents.

The itinerary is stored as an opaque JSON string; the store never needs to
understand its structure.
"""

import json
from datetime import datetime
from typing import Any

from .base import UNSET, DocumentStatus, ItineraryDocument

ALWAYS_SAVED = ("status", "updatedAt", "completedAt", "error")


def _string(value: str | None) -> dict:
    return {"stringValue": value} if value is not None else {"nullValue": None}


def _timestamp(value: datetime | None) -> dict:
    return {"timestampValue": value.isoformat()} if value is not None else {"nullValue": None}


def encode_create(
    destination: str, duration_days: int, created_at: datetime
) -> dict[str, dict]:
    """Fields of a freshly created ``processing`` document."""
    return {
        "status": _string(DocumentStatus.PROCESSING.value),
        "destination": _string(destination),
        "durationDays": {"integerValue": str(duration_days)},
        "createdAt": _timestamp(created_at),
        "completedAt": {"nullValue": None},
        "itinerary": {"nullValue": None},
        "error": {"nullValue": None},
    }


def encode_save(
    status: DocumentStatus,
    updated_at: datetime,
    completed_at: datetime | None,
    error: str | None,
    itinerary: Any = UNSET,
) -> tuple[dict[str, dict], list[str]]:
    """
    Fields and update mask for a partial save.

    Returns:
        (fields, field_paths)
    """
    fields = {
        "status": _string(status.value),
        "updatedAt": _timestamp(updated_at),
        "completedAt": _timestamp(completed_at),
        "error": _string(error or None),
    }
    paths = list(ALWAYS_SAVED)
    if itinerary is not UNSET:
        fields["itinerary"] = _string(
            json.dumps(itinerary) if itinerary is not None else None
        )
        paths.append("itinerary")
    return fields, paths


def _get_string(fields: dict, name: str) -> str | None:
    return fields.get(name, {}).get("stringValue")


def _get_timestamp(fields: dict, name: str) -> datetime | None:
    raw = fields.get(name, {}).get("timestampValue")
    return datetime.fromisoformat(raw) if raw else None


def decode_document(job_id: str, fields: dict[str, dict]) -> ItineraryDocument:
    """Build an ItineraryDocument from Firestore fields, tolerating missing ones."""
    raw_days = fields.get("durationDays", {}).get("integerValue")
    raw_itinerary = _get_string(fields, "itinerary")

    return ItineraryDocument(
        job_id=job_id,
        status=DocumentStatus(_get_string(fields, "status") or DocumentStatus.PROCESSING.value),
        destination=_get_string(fields, "destination"),
        duration_days=int(raw_days) if raw_days is not None else None,
        created_at=_get_timestamp(fields, "createdAt"),
        updated_at=_get_timestamp(fields, "updatedAt"),
        completed_at=_get_timestamp(fields, "completedAt"),
        itinerary=json.loads(raw_itinerary) if raw_itinerary else None,
        error=_get_string(fields, "error") or None,
    )
