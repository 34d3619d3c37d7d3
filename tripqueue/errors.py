# tripqueue/errors.py
"""
Error taxonomy for itinerary processing.

Client input errors are raised at submission time as ToolError (see
tripqueue.validation.sanitize). Everything here is raised while a job is being
processed and ends up in the job's terminal ``failed`` state.
"""

from dataclasses import dataclass


class TripQueueError(Exception):
    """Base class for processing-phase errors."""


class GenerationError(TripQueueError):
    """Text generation failed (network, HTTP or provider error)."""


class GenerationHTTPError(GenerationError):
    """Provider answered with a non-success HTTP status."""

    def __init__(self, status_code: int, body: str | None = None) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"LLM request failed: HTTP {status_code}")


class GenerationTimeoutError(GenerationError):
    """Generation deadline expired before the provider answered."""

    def __init__(self, message: str = "LLM request aborted by timeout") -> None:
        super().__init__(message)


class MalformedOutputError(GenerationError):
    """Provider output could not be parsed into a JSON value."""


class ItineraryValidationError(TripQueueError):
    """
    Generated itinerary does not match the required shape.

    Carries every violation as a (path, message) pair so the failure message
    names all offending fields at once.
    """

    def __init__(self, issues: list[tuple[str, str]]) -> None:
        self.issues = issues
        rendered = "; ".join(f"{path}: {msg}" for path, msg in issues)
        super().__init__(f"Validation error: {rendered}")


class DocumentStoreError(TripQueueError):
    """Durable document store rejected a request."""

    def __init__(self, operation: str, status_code: int | None, body: str = "") -> None:
        self.operation = operation
        self.status_code = status_code
        self.body = body
        detail = f"{status_code} {body}".strip() if status_code is not None else body
        super().__init__(f"{operation} failed: {detail}")


@dataclass
class JobFailure:
    """
    Primary failure of a job plus the optional error from recording it.

    The rendered message is what lands in the queue record; the durable
    document only ever sees the primary message.
    """

    error: BaseException
    persist_error: BaseException | None = None

    @property
    def message(self) -> str:
        return describe_error(self.error)

    def render(self) -> str:
        if self.persist_error is None:
            return self.message
        return f"{self.message} | persistError: {describe_error(self.persist_error)}"


def describe_error(exc: BaseException) -> str:
    """Human-readable message for an exception, falling back to its type."""
    text = str(exc)
    return text if text else type(exc).__name__
