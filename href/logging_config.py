"""
Structured logging configuration for HREF replay.

Log records carry a trace_id holding the id of the session being replayed,
so lines from several documents can be told apart.

Environment Variables:
    HREF_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR) - default: WARNING
    HREF_LOG_FORMAT: Log format (json, text) - default: text

Usage:
    from href.logging_config import setup_logging, get_logger

    setup_logging()
    logger = get_logger(__name__, trace_id=document.session.id)
    logger.info(f"Loaded {len(document.events)} events")
"""

import logging
import os
import sys
from typing import Optional

from pythonjsonlogger import jsonlogger

NO_SESSION = "N/A"

JSON_FIELDS = "%(asctime)s %(name)s %(levelname)s %(message)s %(trace_id)s"
TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s (session=%(trace_id)s)"


class TraceIDFilter(logging.Filter):
    """Give records logged outside a session adapter a placeholder trace_id."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "trace_id"):
            record.trace_id = NO_SESSION  # type: ignore
        return True


def _resolve_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.WARNING


def setup_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Configure the root logger for CLI use.

    Arguments override HREF_LOG_LEVEL / HREF_LOG_FORMAT. Records go to stderr
    so JSON command output on stdout stays parseable. Library modules never
    call this.
    """
    resolved = _resolve_level(level or os.getenv("HREF_LOG_LEVEL", "WARNING"))
    fmt = (log_format or os.getenv("HREF_LOG_FORMAT", "text")).lower()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(resolved)
    handler.addFilter(TraceIDFilter())
    if fmt == "json":
        handler.setFormatter(
            jsonlogger.JsonFormatter(
                JSON_FIELDS,
                rename_fields={"asctime": "timestamp", "name": "logger", "levelname": "level"},
            )
        )
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt="%H:%M:%S"))

    root = logging.getLogger()
    root.setLevel(resolved)
    # Replace handlers from earlier calls
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)


def get_logger(name: str, trace_id: Optional[str] = None) -> logging.LoggerAdapter:
    """
    Logger bound to a replay session.

    Args:
        name: Logger name (typically __name__)
        trace_id: Session id of the loaded document, if any
    """
    return logging.LoggerAdapter(logging.getLogger(name), {"trace_id": trace_id or NO_SESSION})
