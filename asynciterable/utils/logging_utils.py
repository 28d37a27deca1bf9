"""
Structured logging for asynciterable.

Library modules log key-value events through get_library_logger(), which
wraps the stdlib logger for the module so nothing is printed until the host
enables the ``asynciterable`` namespace. setup_logging() does that with a
structlog console renderer; get_logger() hands out structlog loggers for
application code that wants key-value logging around its sequences.
"""

import logging
import os
import sys
from typing import Any

import structlog
from structlog.typing import Processor

LOGGER_NAMESPACE = "asynciterable"
LOG_LEVEL_ENV = "ASYNCITERABLE_LOG_LEVEL"


def setup_logging(level: str | None = None, force_colors: bool | None = None) -> None:
    """
    Configure structlog and the ``asynciterable`` logger namespace.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR). Falls back to
            the ASYNCITERABLE_LOG_LEVEL environment variable, then WARNING.
        force_colors: Force color output (True/False) or auto-detect (None).
    """
    level_upper = (level or os.environ.get(LOG_LEVEL_ENV, "WARNING")).upper()
    numeric_level = getattr(logging, level_upper, logging.WARNING)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", utc=False),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    console_processor = structlog.dev.ConsoleRenderer(
        colors=force_colors if force_colors is not None else sys.stderr.isatty(),
        exception_formatter=structlog.dev.plain_traceback,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors + [structlog.stdlib.ExtraAdder()],
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            console_processor,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger(LOGGER_NAMESPACE)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(numeric_level)
    root_logger.propagate = False


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structlog logger inside the ``asynciterable`` namespace.

    Example:
        >>> logger = get_logger("pipeline")
        >>> logger.info("Drained sequence", items=5)
    """
    if name is None:
        logger_name = LOGGER_NAMESPACE
    elif name.startswith(f"{LOGGER_NAMESPACE}."):
        logger_name = name
    else:
        logger_name = f"{LOGGER_NAMESPACE}.{name}"

    return structlog.get_logger(logger_name)


# Turns key-value events into LogRecords whose extras carry the bound context.
_LIBRARY_PROCESSORS: list[Processor] = [
    structlog.stdlib.filter_by_level,
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.render_to_log_kwargs,
]


def get_library_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Wrap ``logging.getLogger(name)`` in a structlog bound logger.

    Independent of structlog.configure(): level filtering and output are left
    to the stdlib logger, and bound key-values arrive as LogRecord extras.

    Example:
        >>> log = get_library_logger(__name__).bind(cursor="numbers")
        >>> log.debug("producer_started", scope="global")
    """
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=_LIBRARY_PROCESSORS,
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def bind_log_context(**kwargs: Any) -> None:
    """Bind context variables included in all subsequent log messages."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_log_context() -> None:
    structlog.contextvars.clear_contextvars()


def unbind_log_context(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)
