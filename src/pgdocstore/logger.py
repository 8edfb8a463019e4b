"""Logging for pgdocstore.

Every store owns a `Logger`. Lifecycle and mutation events go through
`.message()`, whose level follows `LOG_LEVEL`; executed statements go through
`.sql()` at DEBUG; rollbacks are warnings.
"""

import logging
from typing import Any, Optional

from pgdocstore.settings import settings as api_settings

_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}

_configured = False


def _level(name: Optional[str]) -> int:
    # Unset and unknown names fall back to INFO
    return _LEVELS.get((name or "").upper(), logging.INFO)


def setup_global_logging(level: str = "INFO") -> None:
    """Configure the root logger once.

    Args:
        level: Log level name (e.g., "DEBUG", "INFO")
    """
    global _configured
    if _configured:
        return
    logging.basicConfig(
        level=_level(level),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    _configured = True


def get_logger(name: Optional[str] = None) -> "Logger":
    return Logger(name or "pgdocstore")


class Logger:
    """Store logger on top of `logging`, configured on first use from settings."""

    def __init__(self, name: Optional[str] = None) -> None:
        if not _configured:
            setup_global_logging(api_settings.LOG_LEVEL)
        self._logger = logging.getLogger(name or "pgdocstore")

    @property
    def name(self) -> str:
        return self._logger.name

    def debug(self, msg: str, *args: Any) -> None:
        self._logger.debug(msg, *args)

    def info(self, msg: str, *args: Any) -> None:
        self._logger.info(msg, *args)

    def warning(self, msg: str, *args: Any) -> None:
        self._logger.warning(msg, *args)

    def sql(self, statement: str, params: Any = None) -> None:
        self.debug("SQL: %s params=%s", statement, params)

    def message(self, msg: str, *args: Any) -> None:
        """Log a store event at the level configured by LOG_LEVEL."""
        self._logger.log(_level(api_settings.LOG_LEVEL), msg, *args)
