"""Utility functions for OmniFocus API."""

from typing import Optional


def escape_applescript_string(text: Optional[str]) -> str:
    """Escape special characters for AppleScript strings.

    Backslashes are doubled before quotes are escaped; the reverse order would
    double the backslash introduced for each quote.
    """
    if not text:
        return ""
    return text.replace("\\", "\\\\").replace('"', '\\"')


def quote(text: Optional[str]) -> str:
    """Return *text* as a double-quoted AppleScript string literal."""
    return f'"{escape_applescript_string(text)}"'
