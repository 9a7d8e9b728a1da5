"""Structured logging configuration using structlog.

kubenotify's own loggers are structlog loggers. Third-party libraries
(uvicorn, kubernetes_asyncio, slack_sdk) log through the standard library,
so their records are routed through the same JSON renderer to keep stderr
a single stream of JSON lines.
"""

from __future__ import annotations

import logging
import sys

import structlog

from kubenotify.models.events import EventRecord

_SHARED_PROCESSORS: list[structlog.typing.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.StackInfoRenderer(),
    structlog.processors.TimeStamper(fmt="iso", utc=True, key="ts"),
]

# Chatty at INFO; only their warnings are interesting.
_QUIET_LIBRARIES = ("kubernetes_asyncio", "slack_sdk", "uvicorn.access")


def setup_logging(level: str = "info") -> None:
    """Configure structlog and stdlib logging for JSON output to stderr."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    structlog.configure(
        processors=[
            *_SHARED_PROCESSORS,
            structlog.dev.set_exc_info,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=[structlog.stdlib.add_logger_name, *_SHARED_PROCESSORS],
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.JSONRenderer(),
            ],
        )
    )
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)
    for name in _QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))


def get_logger(component: str) -> structlog.stdlib.BoundLogger:
    """Get a logger bound with a component name."""
    return structlog.get_logger(component=component)  # type: ignore[return-value]


def event_log_fields(event: EventRecord) -> dict[str, object]:
    """Identifying fields of *event* for structured log lines."""
    return {
        "event_name": event.name,
        "namespace": event.namespace,
        "reason": event.reason,
        "count": event.count,
    }
