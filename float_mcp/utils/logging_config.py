"""Logging setup for the gateway process.

Stdout carries the MCP transport, so every record goes to stderr. Module
loggers stay on the standard library and attach structured fields through
``extra={...}``; a structlog ProcessorFormatter on the single root handler
lifts those fields into the rendered event, either as one JSON object per
line or as a console line with trailing key=value pairs.
"""

from __future__ import annotations

import logging
import sys
from typing import IO

import structlog
from structlog.typing import Processor


def build_formatter(fmt: str = "json") -> structlog.stdlib.ProcessorFormatter:
    """Formatter rendering stdlib records through structlog processors.

    Args:
        fmt: "json" or "pretty"
    """
    pre_chain: list[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.ExtraAdder(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if fmt == "pretty":
        processors: list[Processor] = [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.dev.ConsoleRenderer(colors=False),
        ]
    else:
        processors = [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    return structlog.stdlib.ProcessorFormatter(
        processors=processors,
        foreign_pre_chain=pre_chain,
    )


def configure_logging(
    level: str | int = "INFO",
    fmt: str = "json",
    *,
    stream: IO[str] | None = None,
) -> logging.Handler:
    """Install a single stderr handler on the root logger.

    Args:
        level: Level name or number
        fmt: "json" or "pretty"
        stream: Output stream (stderr by default)

    Returns:
        The installed handler
    """
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(build_formatter(fmt))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)
    return handler
