from marketplace.backend.base import Backend
from marketplace.backend.client import BackendClient
from marketplace.backend.errors import (
    AuthenticationError,
    BackendError,
    InvalidStatusTransitionError,
    NotFoundError,
)

__all__ = [
    "Backend",
    "BackendClient",
    "BackendError",
    "NotFoundError",
    "InvalidStatusTransitionError",
    "AuthenticationError",
]
