"""Tool handlers, grouped per entity. Importing this package registers every tool."""

from . import (  # noqa: F401
    folder_commands,
    perspective_commands,
    project_commands,
    tag_commands,
    task_commands,
)
from .dispatch import call_tool, compile_script
from .registry import TOOLS, ToolSpec, get_tool

__all__ = ["TOOLS", "ToolSpec", "call_tool", "compile_script", "get_tool"]
