"""
Fragments shared by the command script generators.

A mutation script is always laid out the same way:

1. resolution statements for every named target;
2. one guard per required target, before anything is changed;
3. one assignment per supplied field (``None`` means "leave unchanged");
4. a final ``return`` with the confirmation text.

:func:`resolve_targets` covers steps 1 and 2, :func:`assign_fields` step 3.
Query scripts are built from :func:`each_project`, :func:`task_line` and
:func:`return_lines`.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, List, Optional, Sequence, Tuple

from ..utils.config import get_settings
from .locator import (
    FOLDER_LOOP_VARS,
    TOP_LEVEL,
    EntityKind,
    locate,
    location_var,
    path_expr,
)
from .script_builder import (
    MISSING,
    AssertFound,
    AssignField,
    If,
    Repeat,
    Return,
    Script,
    SetVar,
    Statement,
    Try,
    bool_literal,
    concat,
    literal,
    number_literal,
    whose,
)

INCOMPLETE = "completed is false"
NOT_DROPPED = "status is not dropped status"
LINES = "outputLines"


def new_script(target: Optional[str] = None) -> Script:
    """Empty script addressed to the configured document (or *target*)."""
    return Script(target=target or get_settings().document)


# --- Resolution --------------------------------------------------------------

@dataclass(frozen=True)
class Target:
    """A named entity the script has to find before it changes anything."""

    kind: EntityKind
    name: str
    var: str
    label: Optional[str] = None
    scope: Optional[str] = None
    track_location: bool = False
    incomplete_only: bool = False

    def statements(self) -> List[Statement]:
        return locate(
            self.kind,
            self.name,
            self.var,
            scope=self.scope,
            track_location=self.track_location,
            incomplete_only=self.incomplete_only,
        )

    def guard(self) -> Statement:
        return AssertFound(self.var, self.label or self.kind.label, self.name)


@dataclass(frozen=True)
class IdTarget:
    """An entity addressed by its opaque id instead of its name."""

    element: str
    identifier: str
    var: str
    label: str

    def statements(self) -> List[Statement]:
        return [
            SetVar(self.var, MISSING),
            Try([SetVar(self.var, f"first flattened {self.element} whose id is {literal(self.identifier)}")]),
        ]

    def guard(self) -> Statement:
        return AssertFound(self.var, self.label, self.identifier)


def resolve_targets(script: Script, *targets: Any) -> Script:
    """Add every target's resolution, then every guard."""
    for target in targets:
        script.add(*target.statements())
    for target in targets:
        script.add(target.guard())
    return script


def project_target(name: str, var: str = "targetProject", **options: Any) -> Target:
    return Target(EntityKind.PROJECT, name, var, **options)


def folder_target(name: str, var: str = "targetFolder", **options: Any) -> Target:
    return Target(EntityKind.FOLDER, name, var, **options)


def tag_target(name: str, var: str = "targetTag", **options: Any) -> Target:
    return Target(EntityKind.TAG, name, var, **options)


def task_targets(
    task_name: str,
    project: Optional[str] = None,
    var: str = "targetTask",
    project_var: str = "targetProject",
    incomplete_only: bool = False,
) -> List[Target]:
    """The task, preceded by its project when a project name narrows the search."""
    targets: List[Target] = []
    scope = None
    if project:
        targets.append(project_target(project, project_var))
        scope = project_var
    targets.append(
        Target(EntityKind.TASK, task_name, var, scope=scope, incomplete_only=incomplete_only)
    )
    return targets


# --- Assignments -------------------------------------------------------------

def value_expr(script: Script, value: Any) -> str:
    if isinstance(value, bool):
        return bool_literal(value)
    if isinstance(value, (int, float)):
        return number_literal(value)
    if isinstance(value, datetime):
        return script.date(value)
    return literal(str(value))


def assign_fields(script: Script, target: str, fields: Sequence[Tuple[str, Any]]) -> Script:
    """One ``set <field> of <target>`` per supplied value; ``None`` is skipped."""
    for field_name, value in fields:
        if value is None:
            continue
        script.add(AssignField(target, field_name, value_expr(script, value)))
    return script


def properties(script: Script, fields: Sequence[Tuple[str, Any]]) -> str:
    """``{name:"x", note:"y"}`` record for ``make new``; ``None`` values are left out."""
    pairs = [f"{key}:{value_expr(script, value)}" for key, value in fields if value is not None]
    return "{" + ", ".join(pairs) + "}"


def confirm(*parts: str) -> Return:
    return Return(concat(*parts))


def with_id(var: str) -> Return:
    """``<name> (ID: <id>)`` confirmation for a freshly created entity."""
    return confirm(f"name of {var}", literal(" (ID: "), f"id of {var}", literal(")"))


# --- Queries -----------------------------------------------------------------

def completion_filter(include_completed: bool) -> str:
    return "" if include_completed else INCOMPLETE


def collect(expr: str, lines: str = LINES) -> Statement:
    return SetVar(f"end of {lines}", expr)


def start_lines(lines: str = LINES) -> Statement:
    return SetVar(lines, "{}")


def return_lines(lines: str = LINES, prefix: Optional[str] = None) -> List[Statement]:
    """Join *lines* with linefeeds and return them."""
    joined = "outputText"
    statements: List[Statement] = [
        SetVar("AppleScript's text item delimiters", "linefeed"),
        SetVar(joined, f"{lines} as text"),
        SetVar("AppleScript's text item delimiters", '""'),
    ]
    statements.append(Return(concat(prefix, joined) if prefix else joined))
    return statements


ProjectVisitor = Callable[[str, str], List[Statement]]


def each_project(visit: ProjectVisitor, filters: str = "", var: str = "proj") -> List[Statement]:
    """Visit top-level projects, then the projects of every folder down to depth 3.

    *visit* receives the project variable and an expression for its location
    (``"Top Level"`` or ``"A > B"``).
    """
    statements: List[Statement] = [
        Repeat(var, f"(every project{filters})", visit(var, literal(TOP_LEVEL)))
    ]
    statements.extend(_each_folder_project(visit, filters, var, 1, None, []))
    return statements


def _each_folder_project(
    visit: ProjectVisitor,
    filters: str,
    var: str,
    depth: int,
    parent: Optional[str],
    ancestors: List[str],
) -> List[Statement]:
    loop_var = FOLDER_LOOP_VARS[depth - 1]
    path = ancestors + [loop_var]
    collection = "every folder" if parent is None else f"folders of {parent}"
    body: List[Statement] = [
        Repeat(var, f"(projects of {loop_var}{filters})", visit(var, path_expr(path)))
    ]
    if depth < len(FOLDER_LOOP_VARS):
        body.extend(_each_folder_project(visit, filters, var, depth + 1, loop_var, path))
    return [Repeat(loop_var, collection, body)]


def project_filters(include_completed: bool) -> str:
    if include_completed:
        return ""
    return whose(INCOMPLETE, NOT_DROPPED)


def task_line(task: str, info: str = "taskInfo") -> List[Statement]:
    """``Name [Project: P] [Context: T]`` (or ``[Inbox]``) for one task."""
    container = "taskProject"
    primary = "taskTag"
    return [
        SetVar(info, f"name of {task}"),
        Try(
            [
                SetVar(container, f"containing project of {task}"),
                If(
                    f"{container} is {MISSING}",
                    [SetVar(info, concat(info, literal(" [Inbox]")))],
                    [SetVar(info, concat(info, literal(" [Project: "), f"name of {container}", literal("]")))],
                ),
            ],
            [SetVar(info, concat(info, literal(" [Inbox]")))],
        ),
        Try(
            [
                SetVar(primary, f"primary tag of {task}"),
                If(
                    f"{primary} is not {MISSING}",
                    [SetVar(info, concat(info, literal(" [Context: "), f"name of {primary}", literal("]")))],
                ),
            ]
        ),
    ]


def tag_condition(task: str, tag_name: Optional[str]) -> Optional[str]:
    """In-loop predicate matching a task's primary tag by exact name."""
    if not tag_name:
        return None
    return (
        f"primary tag of {task} is not {MISSING} "
        f"and name of primary tag of {task} is {literal(tag_name)}"
    )


def location_of(target: Target) -> str:
    return location_var(target.var)
