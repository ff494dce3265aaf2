"""Correlation ID logging context for tracing a single inbound turn.

Provides a turn_id-aware logger that attaches a correlation ID to every
record emitted through a logger obtained from ``get_turn_logger``. The
orchestrator sets the ID at the start of each turn; other modules log
through plain ``logging.getLogger`` and carry no turn_id.

Usage:
    from ticketdesk.logging_context import get_turn_logger, set_turn_id

    set_turn_id("TURN-+447700900123-3")
    logger = get_turn_logger(__name__)
    logger.info("Processing turn")  # record.turn_id == "TURN-+447700900123-3"
"""

import logging
from contextvars import ContextVar

_turn_id: ContextVar[str] = ContextVar("turn_id", default="NO_TURN_ID")


def set_turn_id(turn_id: str) -> None:
    """Set the correlation ID for the current async context."""
    _turn_id.set(turn_id)


def get_turn_id() -> str:
    """Retrieve the current correlation ID."""
    return _turn_id.get()


class TurnIdFilter(logging.Filter):
    """Injects turn_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.turn_id = _turn_id.get()  # type: ignore[attr-defined]
        return True


def get_turn_logger(name: str) -> logging.Logger:
    """Return a logger with the TurnIdFilter attached.

    The filter adds ``turn_id`` to each record so formatters can
    include ``%(turn_id)s`` in their format string.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, TurnIdFilter) for f in logger.filters):
        logger.addFilter(TurnIdFilter())
    return logger
