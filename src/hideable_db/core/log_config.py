# Core Module — Structured Logging Setup
#
# structlog on top of the stdlib logging module. Library code only calls
# structlog.get_logger(__name__); handlers and rendering are decided once
# by the application (CLI or host program) through configure_logging().

import logging
import sys
from typing import Optional, TextIO

import structlog


def configure_logging(
    level: str = "INFO",
    *,
    json: bool = False,
    stream: Optional[TextIO] = None,
) -> None:
    """Configure structlog and the root stdlib logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ...).
        json: Render events as JSON lines instead of key=value console output.
        stream: Where to write log lines (default: stderr).
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level!r}")

    renderer = (
        structlog.processors.JSONRenderer()
        if json
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))  # structlog handles formatting

    root_logger = logging.getLogger()
    for existing in list(root_logger.handlers):
        if getattr(existing, "_hideable_db", False):
            root_logger.removeHandler(existing)
    handler._hideable_db = True  # type: ignore[attr-defined]
    root_logger.addHandler(handler)
    root_logger.setLevel(numeric_level)
