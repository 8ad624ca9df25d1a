"""
Structured logging setup using structlog.
Logs go to stderr so that reports written to stdout stay machine-readable.
"""

import logging
import sys
import time
from contextlib import contextmanager
from typing import Any, Generator

import structlog
from structlog.types import Processor

from .constants import LogFormat


def setup_logging(level: str = "WARNING", log_format: LogFormat = LogFormat.CONSOLE) -> None:
    """
    Configure structured logging for the auditor.

    Console format: human-readable output
    JSON format: one JSON object per line for CI log collection
    """
    log_level = getattr(logging, level.upper(), logging.WARNING)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.ExtraAdder(),
    ]

    if log_format == LogFormat.JSON:
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    logging.getLogger("docs_auditor").setLevel(log_level)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of the module)

    Example:
        logger = get_logger(__name__)
        logger.info("Loaded documents", count=12)
    """
    return structlog.get_logger(name)


class LogContext:
    """
    Context manager for adding temporary context to logs.

    Example:
        with LogContext(doc="security/audit-logging.md"):
            logger.debug("Checking")  # Will include doc
    """

    def __init__(self, **kwargs: Any) -> None:
        self.context = kwargs

    def __enter__(self) -> "LogContext":
        structlog.contextvars.bind_contextvars(**self.context)
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        structlog.contextvars.unbind_contextvars(*self.context.keys())


@contextmanager
def log_operation(
    logger: structlog.stdlib.BoundLogger, operation: str, **context: Any
) -> Generator[None, None, None]:
    """
    Log operation start/end with timing.

    Usage:
        with log_operation(logger, "audit", docs_dir="docs"):
            ...
    """
    start_time = time.time()
    logger.info(f"[START] {operation}", **context)
    try:
        yield
    except Exception as e:
        duration = time.time() - start_time
        logger.error(f"[FAILED] {operation}", duration=f"{duration:.2f}s", error=str(e), **context)
        raise
    duration = time.time() - start_time
    logger.info(f"[DONE] {operation}", duration=f"{duration:.2f}s", **context)
