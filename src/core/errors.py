from __future__ import annotations


class ThrottleError(Exception):
    """Base error for the throttling package."""


class InvalidRateError(ThrottleError, ValueError):
    """Raised when a throttle rate is not a positive, finite number of kbps."""


class ValidationError(ThrottleError):
    """Raised when user input is invalid."""


class AccessDeniedError(ThrottleError):
    """Raised when a source location points outside the allowed root."""


class ExternalServiceError(ThrottleError):
    """Raised when a remote source (HTTP) fails."""


class NotFoundError(ThrottleError):
    """Raised when a requested source does not exist."""
