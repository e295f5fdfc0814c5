"""Structured logging setup for the OccFS command line.

Library code only calls ``structlog.get_logger(__name__)``; processes that
embed OccFS may configure structlog however they like. The CLI calls
``configure_logging`` once at startup.
"""

import logging
import sys

import structlog


def configure_logging(verbose: bool = False, json_format: bool = False) -> None:
    """Configure structlog rendering to stderr.

    Args:
        verbose: Emit debug/info events when True, only warnings and errors
            otherwise
        json_format: Render events as JSON lines instead of console output
    """
    level = logging.DEBUG if verbose else logging.WARNING

    processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
