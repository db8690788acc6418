"""
Domain errors raised by the feedback engine.

These carry no HTTP knowledge; app.main maps them to responses.
"""
from __future__ import annotations

from typing import Any


class FeedbackError(Exception):
    status_code = 500

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []

    def to_detail(self) -> dict[str, Any]:
        detail: dict[str, Any] = {"message": self.message}
        if self.errors:
            detail["errors"] = self.errors
        return detail


class ValidationFailed(FeedbackError):
    """Bad tuple reference, unknown relationship type, rating out of bounds."""
    status_code = 400


class NotFound(FeedbackError):
    status_code = 404


class Conflict(FeedbackError):
    status_code = 409


class DataIntegrityError(FeedbackError):
    """A stored response disagrees with itself (calculator vs store)."""
    status_code = 500


class UpstreamUnavailable(FeedbackError):
    """Persistence, text generation or rendering collaborator failed."""
    status_code = 503
