"""Runtime settings resolved from the environment.

Entrypoints load a local ``.env`` (``python-dotenv``, never overriding values
already set) before calling :func:`load_settings`. Library code receives a
:class:`Settings` instance instead of reading the environment itself.

Variables
---------
- ``DATABASE_URL``: SQLAlchemy URL. When set, the SQL store is used;
  otherwise the in-memory store.
- ``FINANCE_TRACKER_USER_ID``: user scope for CLI commands
  (default ``default-user``).
- ``FINANCE_TRACKER_LOG_LEVEL``: read by :mod:`finance_tracker.logging_setup`
  itself, since logging is configured before settings are loaded.
- ``FINANCE_TRACKER_CSV_DELIMITER``: CSV delimiter; ``auto`` sniffs it from
  the header line (default ``,``).
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_USER_ID = "default-user"
AUTO_DELIMITER = "auto"


@dataclass(frozen=True, slots=True)
class Settings:
    database_url: str | None = None
    user_id: str = DEFAULT_USER_ID
    csv_delimiter: str | None = ","

    @property
    def uses_database(self) -> bool:
        return bool(self.database_url)


def _resolve_delimiter(raw: str | None) -> str | None:
    """Map the env/CLI delimiter value to a parser option.

    ``None`` means "sniff from the header". Escaped tabs (``\\t``) are accepted
    because shells make literal tabs awkward to pass.
    """

    if raw is None or raw == "":
        return ","
    if raw.strip().lower() == AUTO_DELIMITER:
        return None
    if raw == "\\t":
        return "\t"
    if len(raw) != 1:
        raise ValueError(f"CSV delimiter must be a single character or 'auto', got {raw!r}")
    return raw


def load_settings(
    *,
    database_url: str | None = None,
    user_id: str | None = None,
    csv_delimiter: str | None = None,
) -> Settings:
    """Build :class:`Settings` from explicit overrides, falling back to env vars."""

    url = database_url or os.getenv("DATABASE_URL") or None
    uid = (user_id or os.getenv("FINANCE_TRACKER_USER_ID") or DEFAULT_USER_ID).strip()
    delimiter = _resolve_delimiter(
        csv_delimiter if csv_delimiter is not None else os.getenv("FINANCE_TRACKER_CSV_DELIMITER")
    )
    return Settings(
        database_url=url,
        user_id=uid or DEFAULT_USER_ID,
        csv_delimiter=delimiter,
    )


__all__ = ["AUTO_DELIMITER", "DEFAULT_USER_ID", "Settings", "load_settings"]
