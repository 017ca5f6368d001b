"""Domain exceptions for viewcache.

Every failure is scoped to the single requested entity; none is fatal
to the session. Callers distinguish "fetch failed" (FetchFailedException)
from "fetch succeeded but the entity does not exist" (NotFoundException).
"""

from typing import Any


class ViewCacheException(Exception):
    """Base exception for all viewcache errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. entity_class, key).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(ViewCacheException):
    """Raised when input validation fails (e.g. an empty key component)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class NotFoundException(ViewCacheException):
    """Raised when a fetch succeeded but the entity is empty or absent."""

    def __init__(
        self,
        message: str,
        entity_class: str | None = None,
        key: str | None = None,
    ) -> None:
        """Initialize with message and optional entity coordinates.

        Args:
            message: Human-readable message (e.g. 'View not found').
            entity_class: Optional entity class value.
            key: Optional entity key.
        """
        details: dict[str, Any] = {}
        if entity_class:
            details["entity_class"] = entity_class
        if key:
            details["key"] = key
        super().__init__(message, "NOT_FOUND", details)


class FetchFailedException(ViewCacheException):
    """Raised when the network fetch for an entity rejected.

    The original error is chained as __cause__.
    """

    def __init__(self, entity_class: str, key: str, reason: str) -> None:
        """Initialize with entity coordinates and the underlying reason.

        Args:
            entity_class: Entity class value whose fetch failed.
            key: Entity key whose fetch failed.
            reason: String form of the underlying error.
        """
        super().__init__(
            f"Fetch failed for {entity_class} {key}: {reason}",
            "FETCH_FAILED",
            {"entity_class": entity_class, "key": key, "reason": reason},
        )


class PreconditionFailedException(ViewCacheException):
    """Raised before any network or cache activity when a precondition is unmet."""

    def __init__(self, message: str) -> None:
        super().__init__(message, "PRECONDITION_FAILED")


class ApiRequestException(ViewCacheException):
    """Raised by the HTTP transport on transport errors, HTTP errors or non-zero API codes."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        api_code: int | None = None,
    ) -> None:
        """Initialize with message and optional HTTP/API status.

        Args:
            message: Error message from the server or transport.
            status_code: HTTP status code when a response was received.
            api_code: Non-zero "code" field of the API envelope.
        """
        details: dict[str, Any] = {}
        if status_code is not None:
            details["status_code"] = status_code
        if api_code is not None:
            details["api_code"] = api_code
        super().__init__(message, "API_REQUEST_FAILED", details)
