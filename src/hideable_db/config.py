# Configuration
#
# Settings come from the environment, optionally seeded from a .env file
# (an explicit path, or the nearest .env above the working directory).
# Existing environment variables always win over .env entries.

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from dotenv import find_dotenv, load_dotenv

ENV_PREFIX = "HIDEABLE_"


def _int(name: str, default: str) -> int:
    raw = os.getenv(name, default).strip()
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    data_dir: Path
    wiki_id: str
    busy_timeout_ms: int
    log_level: str
    log_json: bool

    @property
    def db_path(self) -> Path:
        """Database file for this wiki: <data_dir>/<wiki_id>.db"""
        return self.data_dir / f"{self.wiki_id}.db"

    @classmethod
    def from_env(cls, dotenv_path: Optional[Union[str, Path]] = None) -> "Settings":
        load_dotenv(dotenv_path or find_dotenv(usecwd=True), override=False)

        busy_timeout_ms = _int(f"{ENV_PREFIX}BUSY_TIMEOUT_MS", "5000")
        if busy_timeout_ms < 0:
            raise ValueError(f"{ENV_PREFIX}BUSY_TIMEOUT_MS must be >= 0")

        wiki_id = os.getenv(f"{ENV_PREFIX}WIKI_ID", "wiki").strip() or "wiki"

        return cls(
            data_dir=Path(os.getenv(f"{ENV_PREFIX}DATA_DIR", "data")),
            wiki_id=wiki_id,
            busy_timeout_ms=busy_timeout_ms,
            log_level=os.getenv(f"{ENV_PREFIX}LOG_LEVEL", "INFO").strip().upper(),
            log_json=_bool(f"{ENV_PREFIX}LOG_JSON", "false"),
        )
