"""Shared logger initialization for the OmniFocus MCP tools.

Usage:
    from omnifocus_mcp.utils.logger import get_logger
    log = get_logger(__name__)
    log.info("message")

Log records go to stderr so stdout stays reserved for tool output.
"""
from __future__ import annotations

import logging
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

from .config import get_settings

_FORMAT = "%(message)s"  # rich handler already adds time & level

_HANDLER: Optional[logging.Handler] = None


def _resolve_level(level: Union[int, str, None]) -> int:
    if level is None:
        level = get_settings().log_level
    if isinstance(level, str):
        value = logging.getLevelName(level.upper())
        return value if isinstance(value, int) else logging.INFO
    return level


def configure_logging(level: Union[int, str, None] = None) -> None:
    """Idempotently install the rich handler on the package logger."""
    global _HANDLER
    resolved = _resolve_level(level)
    package_logger = logging.getLogger("omnifocus_mcp")
    if _HANDLER is None:
        _HANDLER = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            markup=False,
            show_path=False,
        )
        _HANDLER.setFormatter(logging.Formatter(_FORMAT))
        package_logger.addHandler(_HANDLER)
    package_logger.setLevel(resolved)
    _HANDLER.setLevel(resolved)


def get_logger(name: str = __name__, level: Optional[int] = None) -> logging.Logger:
    """Return a module-level logger (configuring the package logger on first call)."""
    if _HANDLER is None:
        configure_logging()
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    return logger
