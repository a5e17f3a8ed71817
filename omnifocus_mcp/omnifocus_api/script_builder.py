"""Typed AppleScript statements, serialized once into script text.

Command generators assemble lists of statement values; only
:py:meth:`Script.render` knows the concrete AppleScript syntax, indentation
and the ``tell application`` wrapper.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Sequence, Union

from .errors import INVALID_VALUE_ERROR_NUMBER, RESOLUTION_ERROR_NUMBER
from .utils import quote

INDENT = "    "
MISSING = "missing value"


# --- Expressions -------------------------------------------------------------

def literal(text: str) -> str:
    """Sanitized string literal."""
    return quote(text)


def concat(*parts: str) -> str:
    return " & ".join(parts)


def bool_literal(value: bool) -> str:
    return "true" if value else "false"


def number_literal(value: Union[int, float]) -> str:
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def whose(*predicates: str) -> str:
    """`` whose a and b`` suffix, or ``""`` when there is nothing to filter."""
    active = [p for p in predicates if p]
    if not active:
        return ""
    return " whose " + " and ".join(active)


# --- Statements --------------------------------------------------------------

class Statement:
    def render(self, depth: int) -> List[str]:
        raise NotImplementedError


def _render_block(statements: Sequence[Statement], depth: int) -> List[str]:
    lines: List[str] = []
    for statement in statements:
        lines.extend(statement.render(depth))
    return lines


@dataclass(frozen=True)
class Raw(Statement):
    line: str

    def render(self, depth: int) -> List[str]:
        return [INDENT * depth + self.line]


@dataclass(frozen=True)
class SetVar(Statement):
    name: str
    expr: str

    def render(self, depth: int) -> List[str]:
        return [f"{INDENT * depth}set {self.name} to {self.expr}"]


@dataclass(frozen=True)
class AssignField(Statement):
    target: str
    field: str
    expr: str

    def render(self, depth: int) -> List[str]:
        return [f"{INDENT * depth}set {self.field} of {self.target} to {self.expr}"]


@dataclass(frozen=True)
class Fail(Statement):
    """``error`` with an explicit number so the runner can classify it."""

    message: str
    number: int = INVALID_VALUE_ERROR_NUMBER

    def render(self, depth: int) -> List[str]:
        return [f"{INDENT * depth}error {self.message} number {self.number}"]


@dataclass(frozen=True)
class AssertFound(Statement):
    """Abort the script when *var* was not resolved."""

    var: str
    label: str
    name: str

    def render(self, depth: int) -> List[str]:
        message = literal(f"{self.label} not found: {self.name}")
        return [
            f"{INDENT * depth}if {self.var} is {MISSING} then",
            f"{INDENT * (depth + 1)}error {message} number {RESOLUTION_ERROR_NUMBER}",
            f"{INDENT * depth}end if",
        ]


@dataclass(frozen=True)
class Return(Statement):
    expr: str

    def render(self, depth: int) -> List[str]:
        return [f"{INDENT * depth}return {self.expr}"]


@dataclass(frozen=True)
class ExitRepeat(Statement):
    def render(self, depth: int) -> List[str]:
        return [INDENT * depth + "exit repeat"]


@dataclass(frozen=True)
class ExitRepeatIf(Statement):
    condition: str

    def render(self, depth: int) -> List[str]:
        return [f"{INDENT * depth}if {self.condition} then exit repeat"]


@dataclass(frozen=True)
class Try(Statement):
    body: Sequence[Statement]
    on_error: Sequence[Statement] = ()

    def render(self, depth: int) -> List[str]:
        lines = [INDENT * depth + "try"]
        lines.extend(_render_block(self.body, depth + 1))
        if self.on_error:
            lines.append(INDENT * depth + "on error")
            lines.extend(_render_block(self.on_error, depth + 1))
        lines.append(INDENT * depth + "end try")
        return lines


@dataclass(frozen=True)
class If(Statement):
    condition: str
    body: Sequence[Statement]
    orelse: Sequence[Statement] = ()

    def render(self, depth: int) -> List[str]:
        lines = [f"{INDENT * depth}if {self.condition} then"]
        lines.extend(_render_block(self.body, depth + 1))
        if self.orelse:
            lines.append(INDENT * depth + "else")
            lines.extend(_render_block(self.orelse, depth + 1))
        lines.append(INDENT * depth + "end if")
        return lines


@dataclass(frozen=True)
class Repeat(Statement):
    var: str
    collection: str
    body: Sequence[Statement]

    def render(self, depth: int) -> List[str]:
        lines = [f"{INDENT * depth}repeat with {self.var} in {self.collection}"]
        lines.extend(_render_block(self.body, depth + 1))
        lines.append(INDENT * depth + "end repeat")
        return lines


@dataclass(frozen=True)
class Tell(Statement):
    target: str
    body: Sequence[Statement]

    def render(self, depth: int) -> List[str]:
        lines = [f"{INDENT * depth}tell {self.target}"]
        lines.extend(_render_block(self.body, depth + 1))
        lines.append(INDENT * depth + "end tell")
        return lines


# --- Handlers ----------------------------------------------------------------

# Dates are assembled field by field so the result never depends on the
# locale's date format. Day is reset to 1 first to avoid month overflow.
MAKE_DATE_HANDLER = """on makeDate(y, m, d, hh, mm, ss)
    set theDate to current date
    set day of theDate to 1
    set year of theDate to y
    set month of theDate to m
    set day of theDate to d
    set time of theDate to (hh * hours) + (mm * minutes) + ss
    return theDate
end makeDate"""

# Escapes "\" and "|" in one field of a "|"-joined record.
ESCAPE_FIELD_HANDLER = r"""on escapeField(theText)
    set theText to theText as text
    set savedDelimiters to AppleScript's text item delimiters
    set AppleScript's text item delimiters to "\\"
    set theParts to text items of theText
    set AppleScript's text item delimiters to "\\\\"
    set theText to theParts as text
    set AppleScript's text item delimiters to "|"
    set theParts to text items of theText
    set AppleScript's text item delimiters to "\\|"
    set theText to theParts as text
    set AppleScript's text item delimiters to savedDelimiters
    return theText
end escapeField"""


@dataclass
class Script:
    """One compiled script: handlers plus a body run inside OmniFocus."""

    target: str = "front document"
    body: List[Statement] = field(default_factory=list)
    handlers: List[str] = field(default_factory=list)
    application: str = "OmniFocus"

    def add(self, *statements: Statement) -> "Script":
        self.body.extend(statements)
        return self

    def _use(self, handler: str) -> None:
        if handler not in self.handlers:
            self.handlers.append(handler)

    def date(self, value: datetime) -> str:
        """Expression building *value* through the ``makeDate`` handler."""
        self._use(MAKE_DATE_HANDLER)
        return (
            f"my makeDate({value.year}, {value.month}, {value.day}, "
            f"{value.hour}, {value.minute}, {value.second})"
        )

    def escaped(self, expr: str) -> str:
        """Expression escaping *expr* as one field of a ``|`` record."""
        self._use(ESCAPE_FIELD_HANDLER)
        return f"my escapeField({expr})"

    def render(self) -> str:
        chunks = [handler for handler in self.handlers]
        inner: Statement = Tell(f'application "{self.application}"', [Tell(self.target, self.body)])
        chunks.append("\n".join(inner.render(0)))
        return "\n\n".join(chunks) + "\n"
