"""Centralized logging configuration for postcorpus."""

from __future__ import annotations

import logging
import os
from typing import Final

from rich.console import Console
from rich.logging import RichHandler

__all__ = ["configure_logging", "console", "err_console"]

_LOG_LEVEL_ENV: Final[str] = "POSTCORPUS_LOG_LEVEL"
_DEFAULT_LEVEL_NAME: Final[str] = "INFO"

console = Console()
err_console = Console(stderr=True)


class _ManagedRichHandler(RichHandler):
    """Marker subclass so repeated configuration reuses the same handler."""


def _resolve_level(level_name: str | None = None) -> int:
    """Return the logging level from the argument or the environment."""

    name = (level_name or os.getenv(_LOG_LEVEL_ENV, _DEFAULT_LEVEL_NAME)).upper()
    level = getattr(logging, name, None)
    if not isinstance(level, int):
        return logging.INFO
    return level


def configure_logging(level_name: str | None = None) -> int:
    """Configure logging once with a Rich handler writing to stderr.

    Returns the effective level.
    """

    root_logger = logging.getLogger()
    level = _resolve_level(level_name)

    if not any(isinstance(handler, _ManagedRichHandler) for handler in root_logger.handlers):
        root_logger.handlers.clear()
        handler = _ManagedRichHandler(
            console=err_console,
            rich_tracebacks=True,
            show_path=False,
            markup=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(handler)

    root_logger.setLevel(level)
    logging.captureWarnings(True)
    return level
