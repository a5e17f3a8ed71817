"""
Configuration utilities for the OmniFocus MCP tools.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

ENV_FILE_NAME = ".ofmcp.env"

DEFAULT_OSASCRIPT = "osascript"
DEFAULT_DOCUMENT = "front document"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    osascript: str = DEFAULT_OSASCRIPT
    script_dir: Optional[str] = None
    document: str = DEFAULT_DOCUMENT
    log_level: str = DEFAULT_LOG_LEVEL


def load_env_vars() -> None:
    """
    Load environment variables from .env files in the following order:
    1. .ofmcp.env in the current directory
    2. .ofmcp.env in the user's home directory

    Values already present in the environment are never overridden.
    """
    # Load from current directory
    if os.path.exists(ENV_FILE_NAME):
        load_dotenv(ENV_FILE_NAME)

    # Load from home directory
    home_env = Path.home() / ENV_FILE_NAME
    if home_env.exists():
        load_dotenv(home_env)


def get_config(key: str, default: Optional[str] = None) -> Optional[str]:
    """Get configuration value from environment variables."""
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    return value.strip()


def get_settings() -> Settings:
    """Read the current settings from the environment."""
    return Settings(
        osascript=get_config("OFMCP_OSASCRIPT", DEFAULT_OSASCRIPT),
        script_dir=get_config("OFMCP_SCRIPT_DIR"),
        document=get_config("OFMCP_DOCUMENT", DEFAULT_DOCUMENT),
        log_level=get_config("OFMCP_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
    )
