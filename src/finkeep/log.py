"""Structured logging setup.

Ledger state transitions are logged as structlog events with the ids and
amounts bound as keys. Events go through the stdlib ``logging`` module, so
nothing below WARNING is emitted until ``configure_logging`` lowers the level.
"""

import logging
import os
import sys
from typing import Optional

import structlog

_configured = False


def _configure_structlog(json: bool = False) -> None:
    global _configured

    renderer = (
        structlog.processors.JSONRenderer()
        if json
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True


def configure_logging(level: Optional[str] = None, json: bool = False) -> None:
    """Attach a stderr handler and set the finkeep log level.

    Args:
        level: Level name; defaults to FINKEEP_LOG_LEVEL, then WARNING
        json: Render events as JSON lines instead of key=value pairs
    """
    level_name = (level or os.environ.get("FINKEEP_LOG_LEVEL") or "WARNING").upper()
    logger = logging.getLogger("finkeep")
    logger.setLevel(level_name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    _configure_structlog(json=json)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to a stdlib logger of that name."""
    if not _configured:
        _configure_structlog()
    return structlog.get_logger(name)
