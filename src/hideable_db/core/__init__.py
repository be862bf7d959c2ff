# Core Module - Shared Utilities
#
# - SQLite connection helper
# - Structured logging setup

from .db import DEFAULT_BUSY_TIMEOUT_MS, connect
from .log_config import configure_logging

__all__ = [
    "DEFAULT_BUSY_TIMEOUT_MS",
    "connect",
    "configure_logging",
]
