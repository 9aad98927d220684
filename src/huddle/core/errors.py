"""Domain exceptions raised by the service layer.

The API layer maps these onto HTTP responses in ``huddle.main``; services never
build ``HTTPException`` themselves.
"""

from __future__ import annotations

from collections.abc import Mapping

HTTP_NOT_FOUND = 404
HTTP_GONE = 410


class HuddleError(RuntimeError):
    """Base class for all Huddle domain errors."""


class PostValidationError(HuddleError):
    """Raised when post input is malformed or out of range.

    ``field_errors`` maps each offending field to a user-facing message.
    """

    def __init__(self, field_errors: Mapping[str, str]) -> None:
        self.field_errors = dict(field_errors)
        summary = "; ".join(f"{k}: {v}" for k, v in self.field_errors.items())
        super().__init__(summary or "Invalid input")


class PostNotFoundError(HuddleError):
    """Raised when the referenced post does not exist."""

    def __init__(self, post_id: int) -> None:
        self.post_id = post_id
        super().__init__(f"Post {post_id} not found")


class PostForbiddenError(HuddleError):
    """Raised when the caller's session does not own the post."""

    def __init__(self, post_id: int) -> None:
        self.post_id = post_id
        super().__init__(f"Post {post_id} is not owned by this session")


class DependencyFailure(HuddleError):
    """An external collaborator (geocoder, push service) failed.

    These are always degraded gracefully and never surface to API callers.
    """


class GeocodingError(DependencyFailure):
    """Reverse geocoding could not produce a result."""


class PushDeliveryError(DependencyFailure):
    """A single push delivery attempt failed."""

    def __init__(self, endpoint: str, status_code: int | None, message: str = "") -> None:
        self.endpoint = endpoint
        self.status_code = status_code
        super().__init__(message or f"Push delivery failed with status {status_code}")

    @property
    def gone(self) -> bool:
        """True when the push service reports the endpoint as permanently gone."""
        return self.status_code in (HTTP_NOT_FOUND, HTTP_GONE)


class StorageFailure(HuddleError):
    """Unexpected persistence error; the operation was rolled back."""
