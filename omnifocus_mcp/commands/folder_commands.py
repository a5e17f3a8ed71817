"""Folder tools."""

from typing import List, Optional

from ..omnifocus_api.arguments import (
    GetFolderDetailsArgs,
    ListFolderHierarchyArgs,
    ListFoldersArgs,
)
from ..omnifocus_api.compiler import (
    INCOMPLETE,
    collect,
    folder_target,
    location_of,
    new_script,
    resolve_targets,
    return_lines,
    start_lines,
)
from ..omnifocus_api.locator import FOLDER_LOOP_VARS, TOP_LEVEL, path_expr
from ..omnifocus_api.script_builder import (
    If,
    Repeat,
    Script,
    SetVar,
    Statement,
    concat,
    literal,
)
from .registry import tool


def _folder_listing(args: ListFoldersArgs, depth: int, ancestors: List[str]) -> Statement:
    var = FOLDER_LOOP_VARS[depth - 1]
    collection = "every folder" if not ancestors else f"folders of {ancestors[-1]}"
    path = ancestors + [var]

    info = path_expr(path)
    if args.include_project_counts:
        info = concat(info, literal(" ("), f"(count of projects of {var})", literal(" projects)"))
    line: Statement = collect(info)
    if not args.include_empty_folders:
        line = If(f"(count of projects of {var}) > 0", [line])

    body: List[Statement] = [line]
    if depth < len(FOLDER_LOOP_VARS):
        body.append(_folder_listing(args, depth + 1, path))
    return Repeat(var, collection, body)


@tool("list_folders", ListFoldersArgs, empty_text="No folders found")
def generate_list_folders_applescript(args: ListFoldersArgs) -> Script:
    """List folders at every level by path ("Work > Clients")."""
    script = new_script()
    script.add(start_lines(), _folder_listing(args, 1, []))
    return script.add(*return_lines())


@tool("get_folder_details", GetFolderDetailsArgs, soft_not_found=True)
def generate_get_folder_details_applescript(args: GetFolderDetailsArgs) -> Script:
    """Project counts, projects and subfolders of one folder."""
    script = new_script()
    folder = folder_target(args.folder_name, track_location=True)
    resolve_targets(script, folder)

    project_state = [
        If(
            "completed of proj is true",
            [SetVar("projectState", literal(" (completed)"))],
            [
                SetVar("openTasks", f"count of (tasks of proj whose {INCOMPLETE})"),
                If(
                    "openTasks > 0",
                    [SetVar("projectState", concat(literal(" ["), "openTasks", literal(" tasks]")))],
                    [SetVar("projectState", literal(" [No tasks]"))],
                ),
            ],
        ),
        collect(concat(literal("- "), "name of proj", "projectState")),
    ]
    script.add(
        start_lines(),
        collect(concat(literal("Folder: "), "name of targetFolder")),
        If(
            f"{location_of(folder)} is not {literal(TOP_LEVEL)}",
            [collect(concat(literal("Parent folder: "), location_of(folder)))],
        ),
        collect(concat(literal("Total projects: "), "(count of projects of targetFolder)")),
        collect(concat(literal("Active projects: "), f"(count of (projects of targetFolder whose {INCOMPLETE}))")),
        collect(concat(literal("Completed projects: "), "(count of (projects of targetFolder whose completed is true))")),
        SetVar("subfolderCount", "count of folders of targetFolder"),
        If("subfolderCount > 0", [collect(concat(literal("Subfolders: "), "subfolderCount"))]),
        collect('""'),
        collect(literal("Projects in this folder:")),
        Repeat("proj", "projects of targetFolder", project_state),
        If(
            "subfolderCount > 0",
            [
                collect('""'),
                collect(literal("Subfolders:")),
                Repeat(
                    "subfld",
                    "folders of targetFolder",
                    [
                        collect(
                            concat(
                                literal("- "),
                                "name of subfld",
                                literal(" ("),
                                "(count of projects of subfld)",
                                literal(" projects)"),
                            )
                        )
                    ],
                ),
            ],
        ),
    )
    return script.add(*return_lines())


def _project_entries(args: ListFolderHierarchyArgs, collection: str, indent: str) -> Statement:
    body: List[Statement] = [
        SetVar("projectInfo", concat(literal(indent), "name of proj")),
        If("completed of proj is true", [SetVar("projectInfo", concat("projectInfo", literal(" (completed)")))]),
    ]
    if args.include_task_counts:
        body.extend(
            [
                SetVar("openTasks", f"count of (tasks of proj whose {INCOMPLETE})"),
                If(
                    "openTasks > 0",
                    [SetVar("projectInfo", concat("projectInfo", literal(" ["), "openTasks", literal(" tasks]")))],
                ),
            ]
        )
    body.append(collect("projectInfo"))
    return Repeat("proj", collection, body)


def _folder_branch(args: ListFolderHierarchyArgs, depth: int, parent: Optional[str]) -> Statement:
    var = FOLDER_LOOP_VARS[depth - 1]
    collection = "every folder" if parent is None else f"folders of {parent}"
    indent = " " + "  " * (depth - 1)

    info = concat(literal(indent), f"name of {var}")
    if args.include_project_counts:
        info = concat(info, literal(" ("), f"(count of projects of {var})", literal(" projects)"))
    body: List[Statement] = [
        collect(info),
        _project_entries(args, f"projects of {var}", indent + "  "),
    ]
    if depth < len(FOLDER_LOOP_VARS):
        body.append(_folder_branch(args, depth + 1, var))
    if depth == 1:
        body.append(collect('""'))

    if not args.include_empty_folders:
        body = [If(f"(count of projects of {var}) > 0 or (count of folders of {var}) > 0", body)]
    return Repeat(var, collection, body)


@tool("list_folder_hierarchy", ListFolderHierarchyArgs, empty_text="No folder hierarchy found")
def generate_list_folder_hierarchy_applescript(args: ListFolderHierarchyArgs) -> Script:
    """Indented tree of folders (three levels) with their projects, then top-level projects."""
    script = new_script()
    script.add(start_lines(), _folder_branch(args, 1, None))
    script.add(
        If(
            "(count of projects) > 0",
            [collect(literal(" Top-level projects:")), _project_entries(args, "every project", "   ")],
        )
    )
    return script.add(*return_lines())
