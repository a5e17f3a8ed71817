"""
Error types and the tagged result returned by the AppleScript runner.

Compiled scripts signal their own failures with AppleScript error numbers so
the runner can classify them without looking at the success text.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

# Error numbers raised by compiled scripts (``error "..." number N``).
RESOLUTION_ERROR_NUMBER = 1404
INVALID_VALUE_ERROR_NUMBER = 1422


class ErrorKind(str, Enum):
    RESOLUTION = "resolution"
    EXECUTION = "execution"
    VALIDATION = "validation"


class OmniFocusError(Exception):
    """Base class for every failure surfaced by a tool call."""

    kind = ErrorKind.EXECUTION

    def __init__(self, detail: str, script_path: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        self.script_path = script_path


class ResolutionError(OmniFocusError):
    """A named project, task, folder or tag was not found."""

    kind = ErrorKind.RESOLUTION


class ExecutionError(OmniFocusError):
    """The scripting runtime reported a diagnostic."""

    kind = ErrorKind.EXECUTION


class RemoteValidationError(OmniFocusError):
    """The compiled script rejected a value at run time."""

    kind = ErrorKind.VALIDATION


class ArgumentError(OmniFocusError):
    """Unknown tool, missing argument or invalid enumerated value."""

    kind = ErrorKind.VALIDATION


@dataclass(frozen=True)
class Ok:
    text: str

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    detail: str
    script_path: Optional[str] = None

    @property
    def ok(self) -> bool:
        return False

    @classmethod
    def from_exception(cls, exc: OmniFocusError) -> "Err":
        return cls(kind=exc.kind, detail=exc.detail, script_path=exc.script_path)


Result = Union[Ok, Err]
