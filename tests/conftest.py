"""
Shared pytest fixtures for the hideable-db test suite.

Autouse fixtures below isolate tests from the developer's environment:
  - HIDEABLE_* variables -> removed, and anything a .env load adds is undone
  - Working directory    -> tmp_path  (no stray .env, no data/ in the repo)
  - structlog / logging  -> reset after each test
"""

import logging
import os

import pytest
import structlog

from hideable_db.config import ENV_PREFIX, Settings
from hideable_db.db import Database


@pytest.fixture(autouse=True)
def _isolate_environment(tmp_path, monkeypatch):
    """Start every test with no HIDEABLE_* settings and cwd in tmp_path.

    load_dotenv() writes straight into os.environ, so the full environment
    is snapshotted and restored rather than relying on monkeypatch alone.
    """
    saved = dict(os.environ)
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)

    yield

    os.environ.clear()
    os.environ.update(saved)


@pytest.fixture(autouse=True)
def _reset_logging():
    """Undo configure_logging() calls made by a test."""
    yield
    structlog.reset_defaults()
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, "_hideable_db", False):
            root.removeHandler(handler)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        data_dir=tmp_path,
        wiki_id="testwiki",
        busy_timeout_ms=1000,
        log_level="DEBUG",
        log_json=False,
    )


@pytest.fixture
def db(settings):
    database = Database(settings=settings)
    yield database
    database.close()
