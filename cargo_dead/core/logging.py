"""Logging setup: structlog events rendered through stdlib logging to stderr."""

from __future__ import annotations

import logging
import logging.config
import os

import structlog

LEVEL_ENV = "CARGO_DEAD_LOG_LEVEL"
FORMAT_ENV = "CARGO_DEAD_LOG_FORMAT"

# Applied to structlog events and to records from plain stdlib loggers alike
_PRE_CHAIN: list[structlog.types.Processor] = [
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.format_exc_info,
]


def _renderer(log_format: str) -> list[structlog.types.Processor]:
    if log_format == "json":
        return [
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.JSONRenderer(),
        ]
    return [structlog.dev.ConsoleRenderer(colors=False)]


def setup_logging(level: str | None = None) -> None:
    """Route cargo-dead logs to stderr; stdout carries only the report.

    *level* overrides ``CARGO_DEAD_LOG_LEVEL`` (default WARNING).
    ``CARGO_DEAD_LOG_FORMAT=json`` switches to one JSON object per line.
    """
    log_level = (level or os.environ.get(LEVEL_ENV, "WARNING")).upper()
    log_format = os.environ.get(FORMAT_ENV, "console").lower()

    structlog.configure(
        processors=[*_PRE_CHAIN, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = {
        "()": structlog.stdlib.ProcessorFormatter,
        "foreign_pre_chain": _PRE_CHAIN,
        "processors": [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            *_renderer(log_format),
        ],
    }
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"cargo_dead": formatter},
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "cargo_dead",
                },
            },
            "loggers": {
                "cargo_dead": {"handlers": ["stderr"], "level": log_level, "propagate": False},
            },
        }
    )
