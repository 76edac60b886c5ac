"""Process-wide logging for ``finance_tracker``.

Two entry points:

- ``configure_logging(...)`` installs one ``StreamHandler`` on the
  ``"finance_tracker"`` logger. The CLI root callback calls it once; later
  calls are ignored. With ``echo_sql=True`` the same handler also receives
  SQLAlchemy's statement log (``sqlalchemy.engine`` at INFO).
- ``get_logger(name)`` is what modules use. Until logging is configured the
  package logger carries a ``NullHandler``, so importing the package as a
  library stays silent.

The level comes from the explicit argument, else ``FINANCE_TRACKER_LOG_LEVEL``,
else INFO.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

PACKAGE_LOGGER = "finance_tracker"
LEVEL_ENV_VAR = "FINANCE_TRACKER_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

_SQL_LOGGER = "sqlalchemy.engine"
_handler: logging.Handler | None = None


def resolve_level(level: int | str | None = None) -> int:
    """Turn ``level`` (or the env var when ``None``) into a numeric level.

    Unknown names resolve to INFO rather than failing the command.
    """

    if level is None:
        level = os.getenv(LEVEL_ENV_VAR) or logging.INFO
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    return logging.getLevelNamesMapping().get(name, logging.INFO)


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
    echo_sql: bool = False,
) -> None:
    global _handler
    if _handler is not None:
        return

    resolved = resolve_level(level)
    handler = logging.StreamHandler(stream)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))

    pkg = logging.getLogger(PACKAGE_LOGGER)
    for h in [h for h in pkg.handlers if isinstance(h, logging.NullHandler)]:
        pkg.removeHandler(h)
    pkg.addHandler(handler)
    pkg.setLevel(resolved)
    pkg.propagate = False

    if echo_sql:
        sql = logging.getLogger(_SQL_LOGGER)
        sql.addHandler(handler)
        sql.setLevel(logging.INFO)
        handler.setLevel(min(resolved, logging.INFO))

    _handler = handler


def get_logger(name: str) -> logging.Logger:
    pkg = logging.getLogger(PACKAGE_LOGGER)
    if _handler is None and not pkg.handlers:
        pkg.addHandler(logging.NullHandler())
    return logging.getLogger(name)


def reset_logging() -> None:
    """Undo :func:`configure_logging` (tests only)."""

    global _handler
    if _handler is None:
        return
    for name in (PACKAGE_LOGGER, _SQL_LOGGER):
        logging.getLogger(name).removeHandler(_handler)
    logging.getLogger(_SQL_LOGGER).setLevel(logging.NOTSET)
    pkg = logging.getLogger(PACKAGE_LOGGER)
    pkg.setLevel(logging.NOTSET)
    pkg.propagate = True
    _handler = None


__all__ = [
    "DEFAULT_FORMAT",
    "LEVEL_ENV_VAR",
    "PACKAGE_LOGGER",
    "configure_logging",
    "get_logger",
    "reset_logging",
    "resolve_level",
]
