"""OmniFocus scripting layer: locate entities, build scripts, run them."""

from .apple_script_client import execute_omnifocus_applescript, run_script
from .errors import (
    ArgumentError,
    Err,
    ErrorKind,
    ExecutionError,
    Ok,
    OmniFocusError,
    RemoteValidationError,
    ResolutionError,
)
from .locator import EntityKind, locate, resolve

__all__ = [
    "execute_omnifocus_applescript",
    "run_script",
    "ArgumentError",
    "Err",
    "ErrorKind",
    "ExecutionError",
    "Ok",
    "OmniFocusError",
    "RemoteValidationError",
    "ResolutionError",
    "EntityKind",
    "locate",
    "resolve",
]
