"""Opt-in log output for recordkit.

Accessor misses are logged at DEBUG through loguru and the library never
installs a handler on its own. Applications that want to see them call
:func:`configure_logging`, directly or through ``get_settings``.
"""

from __future__ import annotations

import os
import sys
from logging import Handler
from typing import Literal, TextIO

from loguru import logger
from rich import get_console
from rich.logging import RichHandler

LogProfile = Literal["default", "console"]

_FORMATS: dict[LogProfile, str] = {
    "default": "{time:HH:mm:ss.SSS} | {level:<7} | {name}:{line} | {message}",
    # Rich renders the level column itself.
    "console": "{message}",
}
_CONFIGURED: tuple[LogProfile, str] | None = None


def _resolve_level(level: str | None) -> str:
    return (level or os.getenv("RECORDKIT_LOG_LEVEL") or "WARNING").upper()


def _sink_for(profile: LogProfile) -> TextIO | Handler:
    if profile == "console":
        return RichHandler(console=get_console(), show_time=False, show_path=False, markup=False)
    return sys.stderr


def configure_logging(*, profile: LogProfile = "default", level: str | None = None) -> None:
    """Route recordkit's log records to stderr or a rich console.

    Repeated calls with the same profile and level are no-ops; a different
    pair replaces the previous handler.
    """
    global _CONFIGURED

    level = _resolve_level(level)
    if _CONFIGURED == (profile, level):
        return

    logger.remove()
    logger.add(_sink_for(profile), level=level, format=_FORMATS[profile], backtrace=False, diagnose=False)
    _CONFIGURED = (profile, level)
