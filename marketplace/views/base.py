"""Shared plumbing for screen controllers: loading flag and page-level messages."""

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Awaitable, Iterator, Optional, TypeVar

from marketplace.backend.base import Backend
from marketplace.backend.errors import BackendError
from marketplace.logging_context import get_session_logger

logger = get_session_logger(__name__)

T = TypeVar("T")


@dataclass
class PageMessage:
    """Dismissible banner shown at the top of a screen."""

    text: str
    level: str = "error"  # "error" | "info"


class Screen:
    """
    Owner of one screen's state.

    Remote calls go through ``_remote`` so a backend failure becomes a
    PageMessage and never escapes; whatever the user had entered stays put.
    """

    def __init__(self, backend: Backend) -> None:
        self.backend = backend
        self._in_flight = 0
        self.message: Optional[PageMessage] = None

    @property
    def loading(self) -> bool:
        """True while any remote call started by this screen is outstanding."""
        return self._in_flight > 0

    @contextmanager
    def _busy(self) -> Iterator[None]:
        self._in_flight += 1
        try:
            yield
        finally:
            self._in_flight -= 1

    def dismiss_message(self) -> None:
        self.message = None

    def _notify(self, text: str, level: str = "info") -> None:
        self.message = PageMessage(text=text, level=level)

    async def _remote(self, operation: Awaitable[T], action: str) -> tuple[bool, Optional[T]]:
        """Await a backend call with the loading flag set.

        Returns (ok, result). On failure the error is logged and surfaced
        as a page message; the caller decides what local state to restore.
        """
        with self._busy():
            try:
                result = await operation
            except BackendError as exc:
                logger.warning("Could not %s: %s", action, exc)
                self.message = PageMessage(text=f"Could not {action}. {exc}".strip(), level="error")
                return False, None
        return True, result


def describe(value: Any) -> str:
    """Human label for enum-ish values in messages."""
    return str(getattr(value, "value", value)).replace("_", " ")
