"""Errors raised by backend operations."""

from typing import Optional


class BackendError(Exception):
    """A remote operation failed. Screens turn this into a page-level message."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(BackendError):
    """The requested service, provider or booking does not exist."""


class InvalidStatusTransitionError(BackendError):
    """The backend rejected a booking status change."""


class AuthenticationError(BackendError):
    """Sign-in failed or the session is no longer valid."""
