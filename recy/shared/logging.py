"""
Logging configuration for the application.

Sets up logging once at startup with either a human-readable format
(development) or one JSON object per line (production log shippers).
JSON lines are rendered by structlog's ProcessorFormatter, so records
from plain `logging.getLogger(__name__)` loggers keep their `extra=`
fields (errorId, path, ...) and exception stacks.
Logging must not change program behavior.
Never logs sensitive data (request bodies, secrets, raw payloads).
"""

import logging
import sys
from typing import Any

import structlog
from structlog.stdlib import ProcessorFormatter

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_NOISY_LOGGERS = ("uvicorn.access", "httpx", "httpcore")

# Applied to every stdlib record before rendering.
_PRE_CHAIN: list[Any] = [
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    structlog.stdlib.ExtraAdder(),
]


def json_formatter() -> ProcessorFormatter:
    """Formatter rendering stdlib records as single-line JSON objects."""
    return ProcessorFormatter(
        foreign_pre_chain=_PRE_CHAIN,
        processors=[
            ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.EventRenamer("message"),
            structlog.processors.JSONRenderer(),
        ],
    )


def configure_logging(level: str = "INFO", fmt: str = "text") -> None:
    """Configure logging for the application.

    Args:
        level: The log level string (DEBUG, INFO, WARNING, ERROR).
        fmt: "text" or "json".
    """
    handler = logging.StreamHandler(sys.stdout)
    if fmt == "json":
        handler.setFormatter(json_formatter())
    else:
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=[handler],
        force=True,
    )

    # Suppress noisy third-party loggers
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def flush_logging() -> None:
    """Flush every root handler. Called at application shutdown."""
    for handler in logging.getLogger().handlers:
        handler.flush()
