# tripqueue/validation/itinerary.py
"""
Itinerary shape validation.

Generated output is untrusted: field types are checked strictly (no string to
int coercion) and every violation is reported, not just the first.
"""

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, TypeAdapter, ValidationError

from tripqueue.errors import ItineraryValidationError

ROOT_PATH = "(root)"


class Activity(BaseModel):
    """One scheduled activity within a day."""

    model_config = ConfigDict(extra="ignore")

    time: StrictStr
    description: StrictStr
    location: StrictStr


class DayPlan(BaseModel):
    """Plan for a single day of the trip."""

    model_config = ConfigDict(extra="ignore")

    day: StrictInt = Field(ge=1)
    theme: StrictStr
    activities: list[Activity] = Field(min_length=1)


Itinerary = Annotated[list[DayPlan], Field(min_length=1)]

_itinerary_adapter = TypeAdapter(Itinerary)


def _format_path(loc: tuple) -> str:
    return ".".join(str(part) for part in loc) or ROOT_PATH


def validate_itinerary(value: Any) -> list[dict]:
    """
    Check that value is a non-empty list of day-plans.

    Args:
        value: Parsed JSON from the generation client

    Returns:
        The validated itinerary as plain dicts (unknown keys dropped)

    Raises:
        ItineraryValidationError: Listing every violated field path
    """
    try:
        days = _itinerary_adapter.validate_python(value)
    except ValidationError as e:
        issues = [(_format_path(err["loc"]), err["msg"]) for err in e.errors()]
        raise ItineraryValidationError(issues) from None

    return [day.model_dump() for day in days]
