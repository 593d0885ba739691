"""structlog configuration for the uploader CLI."""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.stdlib import add_logger_name
from opentelemetry.trace import get_current_span


def _add_trace_context(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: structlog.types.EventDict,
) -> structlog.types.EventDict:
    """Inject trace_id/span_id while an upload span is active."""
    span_context = get_current_span().get_span_context()
    if span_context.is_valid:
        event_dict["trace_id"] = f"{span_context.trace_id:032x}"
        event_dict["span_id"] = f"{span_context.span_id:016x}"
    return event_dict


def setup_logging(service_name: str, level: str = "INFO", json_logs: bool = False) -> None:
    """Configure structlog and stdlib logging; JSON lines or console output to stdout."""
    renderer: structlog.types.Processor
    if json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        _add_trace_context,
        structlog.processors.StackInfoRenderer(),
    ]
    if json_logs:
        # ConsoleRenderer prints exceptions itself
        shared_processors += [
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ]

    log_level = logging.getLevelName(level.upper())
    structlog.configure(
        processors=shared_processors + [renderer],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        stream=sys.stdout,
    )
    # basicConfig is a no-op once handlers exist
    logging.getLogger().setLevel(log_level)

    structlog.contextvars.bind_contextvars(service=service_name)


def bind_environment(environment: str | None) -> None:
    """Add the deployment environment to every subsequent log line."""
    if environment:
        structlog.contextvars.bind_contextvars(environment=environment)
