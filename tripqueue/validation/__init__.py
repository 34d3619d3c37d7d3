"""Itinerary and input validation."""

from .itinerary import Activity, DayPlan, validate_itinerary
from .sanitize import sanitize_job_id, sanitize_request

__all__ = [
    "Activity",
    "DayPlan",
    "validate_itinerary",
    "sanitize_request",
    "sanitize_job_id",
]
