"""AppleScript execution helper for the OmniFocus tools.

Every tool call compiles exactly one script. :pyfunc:`execute_omnifocus_applescript`
writes it to a uniquely named temporary ``.applescript`` file, runs it with
``osascript`` and returns *stdout* with leading/trailing whitespace stripped.

The runtime reports errors on stderr, so any stderr output is a failure even
when the exit status is zero. On failure the script file is kept and its path
is attached to the raised error for offline inspection; on success it is
removed. There are no retries and no timeout: scripts have side effects.
"""
from __future__ import annotations

import os
import re
import subprocess
import tempfile
import time
from typing import Final, Optional

from ..utils.config import get_settings
from ..utils.logger import get_logger
from .errors import (
    INVALID_VALUE_ERROR_NUMBER,
    RESOLUTION_ERROR_NUMBER,
    Err,
    ExecutionError,
    OmniFocusError,
    Ok,
    RemoteValidationError,
    ResolutionError,
    Result,
)

__all__: Final = ["execute_omnifocus_applescript", "run_script", "classify_failure"]

log = get_logger(__name__)

# "<file>:12:80: execution error: Project not found: X (1404)"
_EXECUTION_ERROR = re.compile(
    r"execution error: (?P<message>.*) \((?P<number>-?\d+)\)\s*$", re.DOTALL
)


def _write_temp_applescript(script: str, directory: Optional[str] = None) -> str:
    """Write *script* to a new ``omnifocus-<ns>-*.applescript`` file and return its path."""
    tmp_file = tempfile.NamedTemporaryFile(
        mode="w",
        delete=False,
        prefix=f"omnifocus-{time.time_ns()}-",
        suffix=".applescript",
        dir=directory,
        encoding="utf-8",
    )
    tmp_file.write(script)
    tmp_file.flush()
    tmp_file.close()
    return tmp_file.name


def classify_failure(diagnostic: str, script_path: Optional[str] = None) -> OmniFocusError:
    """Map the runtime's diagnostic text to a typed error."""
    match = _EXECUTION_ERROR.search(diagnostic.strip())
    if match is None:
        return ExecutionError(diagnostic.strip() or "AppleScript execution failed", script_path)

    message = match.group("message").strip()
    number = int(match.group("number"))
    if number == RESOLUTION_ERROR_NUMBER:
        return ResolutionError(message, script_path)
    if number == INVALID_VALUE_ERROR_NUMBER:
        return RemoteValidationError(message, script_path)
    return ExecutionError(f"{message} ({number})", script_path)


def execute_omnifocus_applescript(script: str) -> str:  # noqa: D401
    """Run an AppleScript snippet and return its *stdout* as ``str``.

    Raises a subclass of :class:`OmniFocusError` when the runtime fails.
    """
    settings = get_settings()
    try:
        script_path = _write_temp_applescript(script, settings.script_dir)
    except OSError as exc:
        log.warning("Could not write the script file: %s", exc)
        raise ExecutionError(f"Could not write the script file: {exc}") from None
    cmd = [settings.osascript, script_path]
    log.debug("Running %s", " ".join(cmd))

    try:
        process = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except FileNotFoundError:
        log.warning("AppleScript runner not found. Script kept at %s", script_path)
        raise ExecutionError(
            f"AppleScript runner not found: {settings.osascript}", script_path
        ) from None
    except OSError as exc:
        log.warning("Could not start %s: %s. Script kept at %s", settings.osascript, exc, script_path)
        raise ExecutionError(
            f"Could not start AppleScript runner {settings.osascript}: {exc}", script_path
        ) from None

    stderr = (process.stderr or "").strip()
    if process.returncode != 0 or stderr:
        log.warning(
            "AppleScript failed (code %s). Script kept at %s", process.returncode, script_path
        )
        raise classify_failure(
            stderr or f"AppleScript execution failed (code {process.returncode})",
            script_path,
        )

    try:
        os.remove(script_path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        log.warning("Could not remove %s: %s", script_path, exc)
    return (process.stdout or "").strip()


def run_script(script: str) -> Result:
    """Tagged-result form of :pyfunc:`execute_omnifocus_applescript`."""
    try:
        return Ok(execute_omnifocus_applescript(script))
    except OmniFocusError as exc:
        return Err.from_exception(exc)
