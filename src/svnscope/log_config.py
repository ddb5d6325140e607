"""structlog setup for the CLI and embedding applications.

Library modules only call ``structlog.get_logger(__name__)``; nothing is
configured until the host calls :func:`configure_logging`.
"""

from __future__ import annotations

import logging
import sys

import structlog

from svnscope.config.schema import LoggingConfig

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def configure_logging(level: str = "warning", fmt: str = "console") -> None:
    """Route structlog events to stderr at *level* using a console or JSON renderer."""
    numeric = _LEVELS.get(level.lower(), logging.WARNING)

    processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if fmt == "json":
        processors.append(structlog.processors.dict_tracebacks)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def configure_from(config: LoggingConfig) -> None:
    configure_logging(config.level, config.format)
