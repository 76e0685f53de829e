"""
kube_discovery.tier0_core.logging
───────────────────────────────────
Structured logs on stderr, routed through stdlib logging so library users'
handlers see them too. Every event is redacted before rendering.

Minimal stack: structlog (JSON or console renderer)
Configure via: configure_logging(settings.log_level, settings.log_format), or
KUBE_DISCOVERY_LOG_LEVEL / KUBE_DISCOVERY_LOG_FORMAT before the first log call.
"""
from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

from kube_discovery.tier0_core.redact import structlog_redact_processor

_handler: logging.Handler | None = None


def configure_logging(level: str | None = None, fmt: str | None = None) -> None:
    """(Re)install the stderr handler. Missing arguments fall back to env."""
    global _handler
    level_name = (level or os.getenv("KUBE_DISCOVERY_LOG_LEVEL", "INFO")).upper()
    fmt = (fmt or os.getenv("KUBE_DISCOVERY_LOG_FORMAT", "json")).lower()

    pre_chain: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog_redact_processor,
    ]
    structlog.configure(
        processors=[structlog.stdlib.filter_by_level, *pre_chain,
                    structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    if fmt == "console":
        renderer: Any = structlog.dev.ConsoleRenderer(colors=False)
    else:
        renderer = structlog.processors.JSONRenderer()
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=pre_chain,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    ))

    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level_name, logging.INFO))
    _handler = handler


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Return a structured logger, configuring from env on first use.

    Usage:
        log = get_logger(__name__)
        log.info("endpoints.resolve.done", namespace="default", nodes=3)
    """
    if _handler is None:
        configure_logging()
    return structlog.get_logger(name or __name__)


__all__ = ["configure_logging", "get_logger"]
