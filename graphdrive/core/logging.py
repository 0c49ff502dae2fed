"""Contextual logging for graphdrive.

Every client receives a ``ContextualLogger`` at construction. Context dimensions
(component, site, url...) travel with the logger and are rendered with every
record, so call sites only pass the message and per-call details.

The library logger only gets a NullHandler; applications attach their own
handler (with ``ContextualFormatter`` to render the dimensions). With
``LOCAL_DEVELOPMENT`` set, a Rich console handler is installed instead.
"""

import logging
from typing import Any, Dict, MutableMapping, Optional, Tuple

from rich.console import Console
from rich.logging import RichHandler

from graphdrive.core.config import settings

LIBRARY_LOGGER_NAME = "graphdrive"


class ContextualFormatter(logging.Formatter):
    """Formatter that appends the record's context dimensions as key=value pairs."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        dimensions = getattr(record, "dimensions", None)
        if dimensions:
            rendered = " ".join(f"{key}={value}" for key, value in dimensions.items())
            return f"{message} [{rendered}]"
        return message


class ContextualLogger(logging.LoggerAdapter):
    """Logger adapter carrying a dictionary of context dimensions.

    ``with_context`` returns a new adapter; the original is never mutated, so a
    logger handed to one client cannot leak context into another.
    """

    def __init__(self, logger: logging.Logger, dimensions: Optional[Dict[str, Any]] = None):
        """Initialize the adapter.

        Args:
            logger: Underlying stdlib logger
            dimensions: Context dimensions attached to every record
        """
        super().__init__(logger, {})
        self.dimensions: Dict[str, Any] = dict(dimensions or {})

    def with_context(self, **dimensions: Any) -> "ContextualLogger":
        """Return a logger with additional context dimensions."""
        return ContextualLogger(self.logger, {**self.dimensions, **dimensions})

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> Tuple[Any, MutableMapping[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        extra["dimensions"] = {**self.dimensions, **extra.pop("dimensions", {})}
        kwargs["extra"] = extra
        return msg, kwargs


def _build_handler() -> logging.Handler:
    if settings.LOCAL_DEVELOPMENT:
        console = Console(width=200)
        handler: logging.Handler = RichHandler(
            console=console, show_time=True, show_path=False, rich_tracebacks=True
        )
        handler.setFormatter(ContextualFormatter("%(name)s - %(message)s"))
        return handler

    # Output is left to the application outside local development
    return logging.NullHandler()


def get_logger(name: str = LIBRARY_LOGGER_NAME, level: Optional[str] = None) -> ContextualLogger:
    """Get a contextual logger.

    Args:
        name: Logger name, usually a child of ``graphdrive``
        level: Log level (default: ``settings.LOG_LEVEL``)

    Returns:
        ContextualLogger wrapping the named stdlib logger
    """
    base = logging.getLogger(name)

    # Handlers live on the library logger only; children propagate to it
    library_logger = logging.getLogger(LIBRARY_LOGGER_NAME)
    if not library_logger.handlers:
        library_logger.addHandler(_build_handler())
        library_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    if level:
        base.setLevel(getattr(logging, level.upper()))

    return ContextualLogger(base)


logger = get_logger()
