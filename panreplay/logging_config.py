"""
Structured logging for panreplay.

Records carry a trace_id (the dataset's location id) plus any per-call
extra fields, e.g. the timeline second and pan of a skipped event, so a
replay's diagnostics can be filtered per dataset and per pan.

Environment Variables:
    PANREPLAY_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR - default: INFO
    PANREPLAY_LOG_FORMAT: json or text - default: json

Usage:
    from panreplay.logging_config import setup_logging, get_logger

    setup_logging()
    logger = get_logger(__name__, trace_id="store-0042")
    logger.warning("No machine available", extra={"protein_pan": "Spicy 2", "second": 812})
"""

import logging
import os
import sys
from typing import Any, MutableMapping, Optional, TextIO, Tuple

from pythonjsonlogger import jsonlogger

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

JSON_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s %(trace_id)s"
TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s [trace_id=%(trace_id)s]"


class TraceIDFilter(logging.Filter):
    """Gives every record a trace_id, "N/A" when logged without an adapter."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "trace_id"):
            record.trace_id = "N/A"  # type: ignore
        return True


class ReplayLogAdapter(logging.LoggerAdapter):
    """LoggerAdapter that merges per-call extra fields with its trace_id."""

    def process(self, msg: Any, kwargs: MutableMapping[str, Any]) -> Tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**(kwargs.get("extra") or {}), **self.extra}
        return msg, kwargs


def _formatter(fmt: str) -> logging.Formatter:
    if fmt == "json":
        return jsonlogger.JsonFormatter(
            JSON_FORMAT,
            rename_fields={"asctime": "timestamp", "name": "logger", "levelname": "level"},
        )
    return logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")


def setup_logging(
    level: Optional[str] = None,
    log_format: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Replace the root logger's handlers with one structured stream handler.

    Args:
        level: Log level name; defaults to $PANREPLAY_LOG_LEVEL, then INFO
        log_format: "json" or "text"; defaults to $PANREPLAY_LOG_FORMAT, then json
        stream: Destination stream (default: stderr, keeping stdout for output)
    """
    name = (level or os.getenv("PANREPLAY_LOG_LEVEL", "INFO")).upper()
    fmt = (log_format or os.getenv("PANREPLAY_LOG_FORMAT", "json")).lower()
    resolved = LEVELS.get(name, logging.INFO)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(resolved)
    handler.addFilter(TraceIDFilter())
    handler.setFormatter(_formatter(fmt))

    root_logger = logging.getLogger()
    for old in root_logger.handlers[:]:
        root_logger.removeHandler(old)
    root_logger.setLevel(resolved)
    root_logger.addHandler(handler)


def get_logger(name: str, trace_id: Optional[str] = None) -> ReplayLogAdapter:
    """
    Logger for `name` tagging every record with `trace_id`.

    Args:
        name: Logger name (typically __name__)
        trace_id: Correlation id, typically the dataset's location id
    """
    return ReplayLogAdapter(logging.getLogger(name), {"trace_id": trace_id or "N/A"})
