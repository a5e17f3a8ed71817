"""
Entry point for tool calls: validate, compile, run, format.

:func:`call_tool` never raises. Every failure, including unexpected ones, is
returned as an error envelope so the caller always gets a response.
"""
from typing import Any, Mapping, Optional

from ..omnifocus_api.apple_script_client import run_script
from ..omnifocus_api.errors import OmniFocusError
from ..omnifocus_api.formatter import Envelope, format_error
from ..utils.logger import get_logger
from .registry import get_tool

log = get_logger(__name__)


def compile_script(name: str, arguments: Optional[Mapping[str, Any]] = None) -> str:
    """Script text for one tool call; nothing is run.

    Raises :class:`~omnifocus_mcp.omnifocus_api.errors.ArgumentError` for an
    unknown tool or invalid arguments.
    """
    return get_tool(name).compile(arguments)


def call_tool(name: str, arguments: Optional[Mapping[str, Any]] = None) -> Envelope:
    log.info("Calling %s", name)
    try:
        spec = get_tool(name)
        args = spec.parse(arguments)
        script = spec.generate(args).render()
    except OmniFocusError as exc:
        log.warning("Rejected %s: %s", name, exc.detail)
        return format_error(exc.detail)
    except Exception as exc:
        log.exception("Failed to compile %s", name)
        return format_error(f"Failed to compile {name}: {exc}")

    log.debug("Compiled script for %s:\n%s", name, script)
    try:
        result = run_script(script)
    except Exception as exc:
        log.exception("Failed to run %s", name)
        return format_error(f"Failed to run {name}: {exc}")
    if not result.ok:
        log.warning("%s failed (%s): %s", name, result.kind.value, result.detail)

    try:
        return spec.format(result, args)
    except Exception as exc:
        log.exception("Failed to format the result of %s", name)
        return format_error(f"Failed to format the result of {name}: {exc}")
