"""
Custom exceptions for the booking listing service.

Both error kinds are fatal for the whole listing request: the caller gets a
complete page or a single failure, never a partial result.
"""

from typing import Optional


class ServiceError(Exception):
    """Base exception for service layer errors."""
    pass


class StoreQueryError(ServiceError):
    """Raised when one of the listing queries fails against the store.

    Connectivity problems, timeouts and constraint violations all end up
    here. Nothing is retried at this layer.
    """

    def __init__(self, query_name: str, original: Exception):
        self.query_name = query_name
        self.original = original
        self.message = f"Booking query '{query_name}' failed: {original}"
        super().__init__(self.message)


class ValidationError(ServiceError):
    """Raised when a stored event type blob fails schema validation.

    One malformed metadata or recurrence-rule blob fails the entire page.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(message)
