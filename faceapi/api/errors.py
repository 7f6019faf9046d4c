"""Exceptions raised by the face service client."""

from __future__ import annotations


class FaceServiceError(RuntimeError):
    """Base class for failures reported by the face service client."""


class FaceServiceRequestError(FaceServiceError):
    """Raised when the face API responds with an error status code."""

    def __init__(
        self,
        reason: str,
        details: str,
        status_code: int | None = None,
        error_code: str | None = None,
    ) -> None:
        self.reason = reason
        self.details = details
        self.status_code = status_code
        self.error_code = error_code
        super().__init__(f"Reason: {reason}. Details: {details}")


class NameConflictError(FaceServiceError):
    """Raised when a group or person with the requested name already exists."""


class AmbiguousMatchError(FaceServiceError):
    """Raised when a name lookup matches more than one remote entity."""
