# tests/unit/test_validation.py
"""Tests for itinerary shape validation and request sanitization."""

import pytest
from fastmcp.exceptions import ToolError

from tripqueue.errors import ItineraryValidationError
from tripqueue.validation import sanitize_job_id, sanitize_request, validate_itinerary

from .conftest import make_itinerary


class TestValidateItinerary:
    def test_valid_itinerary_passes(self):
        data = make_itinerary(2)
        assert validate_itinerary(data) == data

    def test_unknown_keys_dropped(self):
        data = make_itinerary(1)
        data[0]["weather"] = "sunny"
        data[0]["activities"][0]["cost"] = 12

        result = validate_itinerary(data)
        assert "weather" not in result[0]
        assert "cost" not in result[0]["activities"][0]

    def test_empty_day_list_rejected(self):
        with pytest.raises(ItineraryValidationError) as exc_info:
            validate_itinerary([])
        assert exc_info.value.issues[0][0] == "(root)"
        assert str(exc_info.value).startswith("Validation error: (root):")

    def test_day_zero_rejected(self):
        data = make_itinerary(1)
        data[0]["day"] = 0

        with pytest.raises(ItineraryValidationError) as exc_info:
            validate_itinerary(data)
        assert [path for path, _ in exc_info.value.issues] == ["0.day"]
        assert "0.day:" in str(exc_info.value)

    def test_empty_activities_rejected(self):
        data = make_itinerary(1)
        data[0]["activities"] = []

        with pytest.raises(ItineraryValidationError) as exc_info:
            validate_itinerary(data)
        assert "0.activities" in str(exc_info.value)

    def test_missing_location_rejected(self):
        data = make_itinerary(2)
        del data[1]["activities"][1]["location"]

        with pytest.raises(ItineraryValidationError) as exc_info:
            validate_itinerary(data)
        assert exc_info.value.issues == [("1.activities.1.location", "Field required")]

    def test_all_violations_collected(self):
        data = make_itinerary(2)
        data[0]["day"] = "1"
        data[0]["theme"] = 7
        data[1]["activities"][0]["time"] = 900

        with pytest.raises(ItineraryValidationError) as exc_info:
            validate_itinerary(data)
        paths = {path for path, _ in exc_info.value.issues}
        assert paths == {"0.day", "0.theme", "1.activities.0.time"}

    def test_non_list_rejected(self):
        with pytest.raises(ItineraryValidationError, match=r"\(root\)"):
            validate_itinerary({"day": 1})

    def test_bool_day_rejected(self):
        data = make_itinerary(1)
        data[0]["day"] = True

        with pytest.raises(ItineraryValidationError, match="0.day"):
            validate_itinerary(data)


class TestSanitizeRequest:
    def test_valid_payload(self):
        assert sanitize_request({"destination": " Tokyo, Japan ", "durationDays": 5}) == (
            "Tokyo, Japan",
            5,
        )

    @pytest.mark.parametrize(
        "payload",
        [
            None,
            ["Tokyo", 5],
            {"durationDays": 5},
            {"destination": 5, "durationDays": 5},
            {"destination": "   ", "durationDays": 5},
            {"destination": "Tokyo"},
            {"destination": "Tokyo", "durationDays": "5"},
            {"destination": "Tokyo", "durationDays": 2.5},
            {"destination": "Tokyo", "durationDays": True},
            {"destination": "Tokyo", "durationDays": 0},
            {"destination": "Tokyo", "durationDays": 61},
        ],
    )
    def test_invalid_payload_rejected(self, payload):
        with pytest.raises(ToolError):
            sanitize_request(payload)


class TestSanitizeJobId:
    def test_uuid_accepted(self):
        job_id = "0b7c56a2-51a4-4a0e-9a8b-1f0e2d3c4b5a"
        assert sanitize_job_id(job_id) == job_id

    @pytest.mark.parametrize("job_id", [None, "", "short", "../../etc/passwd", "a" * 65])
    def test_invalid_rejected(self, job_id):
        with pytest.raises(ToolError):
            sanitize_job_id(job_id)
