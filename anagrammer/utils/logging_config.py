"""Process-wide logging setup for the web app and the CLI."""

from __future__ import annotations

import logging
import os
from typing import Optional

LOG_LEVEL_ENV = "ANAGRAM_LOG_LEVEL"

_LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
_PROJECT_LOGGER = "anagrammer"
# Chatty libraries that follow the project level but never drop below INFO.
_QUIET_LOGGERS = ("httpx", "gradio", "uvicorn.access")

_configured_level: Optional[int] = None


def resolve_level(level: Optional[str | int]) -> int:
    """Translate ``"debug"``, ``"20"`` or ``logging.DEBUG`` into a level number.

    Unknown names resolve to ``INFO``.
    """

    if level is None:
        return logging.INFO
    if isinstance(level, int):
        return level
    text = str(level).strip()
    if text.isdigit():
        return int(text)
    resolved = logging.getLevelName(text.upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def configure_logging(level: Optional[str | int] = None, *, force: bool = False) -> int:
    """Install the root handler once and return the active project level.

    ``level`` wins over the ``ANAGRAM_LOG_LEVEL`` environment variable.  Later
    calls are ignored unless ``force`` is set, so the web entry point and
    library callers can both call this safely.
    """

    global _configured_level

    if _configured_level is not None and not force:
        return _configured_level

    resolved = resolve_level(level if level is not None else os.environ.get(LOG_LEVEL_ENV))
    logging.basicConfig(level=resolved, format=_LOG_FORMAT, force=force)
    logging.getLogger(_PROJECT_LOGGER).setLevel(resolved)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved, logging.INFO))

    _configured_level = resolved
    return resolved


__all__ = ["LOG_LEVEL_ENV", "configure_logging", "resolve_level"]
