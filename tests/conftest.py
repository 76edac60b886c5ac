"""Pytest configuration for test isolation.

The CLI and ``load_settings()`` read ``DATABASE_URL`` and the
``FINANCE_TRACKER_*`` variables, and the CLI root callback loads a ``.env``
from the working directory. A developer's shell or ``.env`` must not leak into
tests, so every test starts with those variables cleared and runs from its
own temporary directory.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

import pytest

_ENV_VARS = (
    "DATABASE_URL",
    "FINANCE_TRACKER_USER_ID",
    "FINANCE_TRACKER_LOG_LEVEL",
    "FINANCE_TRACKER_CSV_DELIMITER",
)


@pytest.fixture(autouse=True)
def _isolate_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
    # load_dotenv() in the CLI callback writes to os.environ directly.
    for name in _ENV_VARS:
        os.environ.pop(name, None)


@pytest.fixture(autouse=True)
def _dispose_engines() -> Iterator[None]:
    """Close pooled SQLite connections so temp files can be removed."""

    yield
    from db.client import dispose_engines

    dispose_engines()
