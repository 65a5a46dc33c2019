"""structlog configuration for nullconf.

Library modules log through stdlib ``logging.getLogger(__name__)``; this
module routes those records through structlog so CLI runs get either:
- Human (default): console renderer on stderr
- JSON (--log-json): one JSON object per line on stderr

Only the ``nullconf`` logger follows ``--verbose``; the root logger stays
at WARNING so third-party debug chatter never reaches the terminal.
"""

from __future__ import annotations

import logging
import sys

import structlog

PACKAGE_LOGGER = "nullconf"


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Configure structlog and attach a single stderr handler to the root logger.

    Safe to call repeatedly: existing root handlers are replaced.

    Args:
        verbose: ``nullconf`` logger at DEBUG instead of WARNING.
        log_json: JSON lines instead of the console renderer.
    """
    shared = _shared_processors()
    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
