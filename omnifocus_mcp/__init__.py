"""
OmniFocus MCP tools: OmniFocus task, project, tag, folder and perspective
operations compiled to AppleScript and run through ``osascript``.
"""

__version__ = "1.0.0"

# Import the main CLI app for entry point
from .ofmcp import app  # noqa: E402

__all__ = ["app", "__version__"]
