"""Configuration and logging helpers shared by the API and command layers."""

from .config import Settings, get_settings, load_env_vars
from .logger import configure_logging, get_logger

__all__ = [
    "Settings",
    "get_settings",
    "load_env_vars",
    "configure_logging",
    "get_logger",
]
