"""Locate named projects, folders, tags and tasks in the OmniFocus hierarchy.

OmniFocus has no generic recursive lookup, so every search is an explicit
ordered list of candidate scopes:

1. the document's top-level collection;
2. a depth-first walk of the containers (folders, or tags per root tag),
   bounded to a fixed depth, stopping at the first match.

:py:data:`SEARCH_PLANS` defines that order once. :py:func:`resolve` applies it
to an in-memory :class:`~.data_models.Document`; :py:func:`locate` emits the
statements that apply it inside a compiled script. Names compare by exact
equality.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, List, Optional, Sequence, Tuple

from .data_models import Document, FolderNode, ProjectNode, TaskNode
from .script_builder import (
    MISSING,
    ExitRepeat,
    ExitRepeatIf,
    If,
    Repeat,
    SetVar,
    Statement,
    Try,
    concat,
    literal,
    whose,
)

TOP_LEVEL = "Top Level"
PATH_SEPARATOR = " > "


class EntityKind(str, Enum):
    PROJECT = "project"
    FOLDER = "folder"
    TAG = "tag"
    TASK = "task"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class Probe(str, Enum):
    MEMBER = "member"  # look for a named child element of each container
    SELF = "self"      # compare each visited container's own name


@dataclass(frozen=True)
class SearchPlan:
    kind: EntityKind
    element: str
    container: str
    max_depth: int
    probe: Probe
    loop_vars: Tuple[str, ...]

    @property
    def elements(self) -> str:
        return self.element + "s"

    @property
    def containers(self) -> str:
        return self.container + "s"


SEARCH_PLANS = {
    EntityKind.PROJECT: SearchPlan(
        EntityKind.PROJECT, "project", "folder", 3, Probe.MEMBER,
        ("fld", "subfld", "nestedSubfld"),
    ),
    EntityKind.FOLDER: SearchPlan(
        EntityKind.FOLDER, "folder", "folder", 2, Probe.MEMBER,
        ("fld", "subfld"),
    ),
    EntityKind.TAG: SearchPlan(
        EntityKind.TAG, "tag", "tag", 5, Probe.SELF,
        ("tag1", "tag2", "tag3", "tag4", "tag5"),
    ),
}

FOLDER_LOOP_VARS = SEARCH_PLANS[EntityKind.PROJECT].loop_vars
TAG_LOOP_VARS = SEARCH_PLANS[EntityKind.TAG].loop_vars


# --- In-memory resolution ----------------------------------------------------

@dataclass(frozen=True)
class Scope:
    candidates: Sequence[Any]
    path: Tuple[str, ...]


@dataclass(frozen=True)
class Match:
    node: Any
    path: Tuple[str, ...]

    @property
    def location(self) -> str:
        return PATH_SEPARATOR.join(self.path) if self.path else TOP_LEVEL


def _plan_for(kind: EntityKind) -> SearchPlan:
    try:
        return SEARCH_PLANS[kind]
    except KeyError:
        raise ValueError(f"No hierarchical search plan for {kind.value}") from None


def iter_candidate_scopes(kind: EntityKind, document: Document) -> Iterator[Scope]:
    """Yield the scopes searched for *kind*, in search order."""
    plan = _plan_for(kind)
    yield Scope(getattr(document, plan.elements), ())
    yield from _descend(plan, getattr(document, plan.containers), 1, ())


def _descend(plan: SearchPlan, nodes: Sequence[Any], depth: int, path: Tuple[str, ...]) -> Iterator[Scope]:
    for node in nodes:
        if plan.probe is Probe.MEMBER:
            yield Scope(getattr(node, plan.elements), path + (node.name,))
        elif depth > 1:
            yield Scope([node], path)
        if depth < plan.max_depth:
            yield from _descend(plan, getattr(node, plan.containers), depth + 1, path + (node.name,))


def resolve(
    kind: EntityKind,
    name: str,
    document: Document,
    scope: Optional[str] = None,
    incomplete_only: bool = False,
) -> Optional[Match]:
    """First entity of *kind* named *name*, or ``None`` when the search is exhausted.

    *scope* and *incomplete_only* only apply to tasks, as in :func:`locate`.
    """
    if kind is EntityKind.TASK:
        return _resolve_task(name, document, scope, incomplete_only)
    for searched in iter_candidate_scopes(kind, document):
        for candidate in searched.candidates:
            if candidate.name == name:
                return Match(candidate, searched.path)
    return None


def _all_projects(folders: Sequence[FolderNode], path: Tuple[str, ...]) -> Iterator[Tuple[ProjectNode, Tuple[str, ...]]]:
    for folder in folders:
        for project in folder.projects:
            yield project, path + (folder.name,)
        yield from _all_projects(folder.folders, path + (folder.name,))


def _first_task(tasks: Sequence[TaskNode], name: str, incomplete_only: bool) -> Optional[TaskNode]:
    for task in tasks:
        if task.name == name and not (incomplete_only and task.completed):
            return task
    return None


def _resolve_task(name: str, document: Document, project: Optional[str], incomplete_only: bool) -> Optional[Match]:
    # a task's path ends with its project; inbox tasks have an empty path
    if project is not None:
        owner = resolve(EntityKind.PROJECT, project, document)
        if owner is None:
            return None
        task = _first_task(owner.node.tasks, name, incomplete_only)
        return Match(task, owner.path + (owner.node.name,)) if task else None

    task = _first_task(document.inbox, name, incomplete_only)
    if task is not None:
        return Match(task, ())
    projects = [(p, ()) for p in document.projects]
    projects.extend(_all_projects(document.folders, ()))
    for owner, path in projects:
        task = _first_task(owner.tasks, name, incomplete_only)
        if task is not None:
            return Match(task, path + (owner.name,))
    return None


# --- Script emission ---------------------------------------------------------

def location_var(var: str) -> str:
    return var + "Location"


def locate(
    kind: EntityKind,
    name: str,
    var: str,
    scope: Optional[str] = None,
    track_location: bool = False,
    incomplete_only: bool = False,
) -> List[Statement]:
    """Statements that leave the first match in *var* (``missing value`` if none).

    *scope* only applies to tasks: the variable of an already resolved project
    to search in. With *track_location* the path of containers leading to the
    match is kept in ``<var>Location``.
    """
    if kind is EntityKind.TASK:
        return _locate_task(name, var, scope, incomplete_only)

    plan = _plan_for(kind)
    name_lit = literal(name)
    statements: List[Statement] = [SetVar(var, MISSING)]
    top_hit: List[Statement] = [SetVar(var, f"first {plan.element} whose name is {name_lit}")]
    if track_location:
        statements.append(SetVar(location_var(var), '""'))
        top_hit.append(SetVar(location_var(var), literal(TOP_LEVEL)))
    statements.append(Try(top_hit))
    statements.append(
        If(f"{var} is {MISSING}", _walk(plan, name_lit, var, 1, None, [], track_location))
    )
    return statements


def path_expr(loop_vars: Sequence[str]) -> str:
    parts: List[str] = []
    for index, loop_var in enumerate(loop_vars):
        if index:
            parts.append(literal(PATH_SEPARATOR))
        parts.append(f"name of {loop_var}")
    return concat(*parts)


def _walk(
    plan: SearchPlan,
    name_lit: str,
    var: str,
    depth: int,
    parent: Optional[str],
    ancestors: List[str],
    track_location: bool,
) -> List[Statement]:
    loop_var = plan.loop_vars[depth - 1]
    collection = f"every {plan.container}" if parent is None else f"{plan.containers} of {parent}"
    body: List[Statement] = []

    if plan.probe is Probe.MEMBER:
        hit: List[Statement] = [
            SetVar(var, f"first {plan.element} of {loop_var} whose name is {name_lit}")
        ]
        if track_location:
            hit.append(SetVar(location_var(var), path_expr(ancestors + [loop_var])))
        hit.append(ExitRepeat())
        body.append(Try(hit))
    elif depth > 1:
        hit = [SetVar(var, loop_var)]
        if track_location:
            hit.append(SetVar(location_var(var), path_expr(ancestors)))
        hit.append(ExitRepeat())
        body.append(If(f"name of {loop_var} is {name_lit}", hit))

    if depth < plan.max_depth:
        body.extend(_walk(plan, name_lit, var, depth + 1, loop_var, ancestors + [loop_var], track_location))
        body.append(ExitRepeatIf(f"{var} is not {MISSING}"))

    return [Repeat(loop_var, collection, body)]


def _locate_task(name: str, var: str, project_var: Optional[str], incomplete_only: bool) -> List[Statement]:
    filters = whose(f"name is {literal(name)}", "completed is false" if incomplete_only else "")
    statements: List[Statement] = [SetVar(var, MISSING)]
    if project_var:
        statements.append(Try([SetVar(var, f"first task of {project_var}{filters}")]))
        return statements
    statements.append(Try([SetVar(var, f"first inbox task{filters}")]))
    statements.append(
        If(f"{var} is {MISSING}", [Try([SetVar(var, f"first flattened task{filters}")])])
    )
    return statements
