"""Shared exception types for the bangarang console."""

from __future__ import annotations


class IntegrationError(RuntimeError):
    """Raised when an upstream bangarang API call fails."""


class AuthenticationError(IntegrationError):
    """Raised when the server rejects the credentials or the session token."""


class RequestError(IntegrationError):
    """Raised on network failures, non-2xx responses or unreadable bodies."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DraftValidationError(ValueError):
    """Raised synchronously when a draft is missing a required field."""
