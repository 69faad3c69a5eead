from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class LocationUnavailableError(DomainError):
    """Raised when device coordinates cannot be obtained."""


class RemoteServiceError(DomainError):
    """Raised when the attendance service call fails.

    Covers network errors, non-2xx responses and malformed bodies.
    """

    def __init__(self, message: str, *, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
