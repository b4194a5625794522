"""Logging configuration with structlog for JSON output in production."""

import logging
import os
import sys

import structlog
from structlog.types import EventDict, WrappedLogger

APP_NAME = "amodinfo"


def _add_app(_logger: WrappedLogger, _method: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("app", APP_NAME)
    return event_dict


def configure_logging(level: str, json_output: bool | None = None) -> None:
    """Configure logging with structlog.

    Output goes to stderr; stdout is reserved for command results.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR).
        json_output: Force JSON output. If None, auto-detect (JSON in prod).
    """
    log_level = getattr(logging, level.upper(), logging.WARNING)

    if json_output is None:
        json_output = os.environ.get("APP_ENV", "dev") == "prod"

    # Records from stdlib loggers pass through the same chain.
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        _add_app,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    renderer: structlog.types.Processor
    if json_output:
        renderer = structlog.processors.JSONRenderer(sort_keys=True)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared_processors,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                renderer,
            ],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(log_level)


def bind_query_context(*, module_info: str, module: str | None = None) -> None:
    """Tag subsequent log records with the document and module being queried."""
    structlog.contextvars.bind_contextvars(module_info=module_info)
    if module is not None:
        structlog.contextvars.bind_contextvars(module=module)


def clear_context() -> None:
    """Clear all structlog context variables."""
    structlog.contextvars.clear_contextvars()
