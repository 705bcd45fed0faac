"""Session correlation ID logging context.

Provides a session_id-aware logger that attaches a correlation ID to every
log message, so a single visitor's path through the catalog, the booking
wizard and the dashboards can be traced across modules.

Usage:
    from marketplace.logging_context import get_session_logger, set_session_id

    set_session_id("SESSION-abc123")
    logger = get_session_logger(__name__)
    logger.info("Loading catalog")  # record carries session_id="SESSION-abc123"
"""

import logging
from contextvars import ContextVar

_session_id: ContextVar[str] = ContextVar("session_id", default="NO_SESSION_ID")


def set_session_id(session_id: str) -> None:
    """Set the correlation ID for the current async context."""
    _session_id.set(session_id)


def get_session_id() -> str:
    """Retrieve the current correlation ID."""
    return _session_id.get()


class SessionIdFilter(logging.Filter):
    """Injects session_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.session_id = _session_id.get()  # type: ignore[attr-defined]
        return True


def get_session_logger(name: str) -> logging.Logger:
    """Return a logger with the SessionIdFilter attached.

    The filter adds ``session_id`` to each record so formatters can
    include ``%(session_id)s`` in their format string.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, SessionIdFilter) for f in logger.filters):
        logger.addFilter(SessionIdFilter())
    return logger
