"""Project tools: create, edit, delete, status, flags, dates, notes, links, listing."""

from typing import List, Optional, Tuple

from ..omnifocus_api.arguments import (
    ArchiveProjectArgs,
    CreateProjectArgs,
    EditProjectArgs,
    GetProjectLinkArgs,
    ListProjectsArgs,
    MoveProjectArgs,
    ProjectRef,
    SetProjectDatesArgs,
    SetProjectFlagArgs,
    SetProjectStatusArgs,
)
from ..omnifocus_api.compiler import (
    INCOMPLETE,
    assign_fields,
    collect,
    confirm,
    each_project,
    folder_target,
    location_of,
    new_script,
    project_filters,
    project_target,
    properties,
    resolve_targets,
    return_lines,
    start_lines,
    tag_target,
    with_id,
)
from ..omnifocus_api.formatter import format_project_link
from ..omnifocus_api.locator import PATH_SEPARATOR, TOP_LEVEL
from ..omnifocus_api.script_builder import (
    AssignField,
    If,
    Raw,
    Repeat,
    Script,
    SetVar,
    Statement,
    bool_literal,
    concat,
    literal,
)
from ..omnifocus_api.statuses import ProjectStatus, status_label, status_statements
from .registry import tool

# sequential / singleton action holder flags for each project type
PROJECT_TYPES = {
    "parallel": (False, False),
    "sequential": (True, False),
    "single": (False, True),
}


def _type_fields(project_type: Optional[str]) -> List[Tuple[str, Optional[bool]]]:
    if project_type is None:
        return []
    sequential, singleton = PROJECT_TYPES[project_type]
    return [("sequential", sequential), ("singleton action holder", singleton)]


@tool("create_project", CreateProjectArgs, success_prefix="Successfully created project: ")
def generate_create_project_applescript(args: CreateProjectArgs) -> Script:
    """Create a project at the top level or inside a folder."""
    script = new_script()
    if args.folder:
        resolve_targets(script, folder_target(args.folder))
    record = properties(
        script,
        [("name", args.name), ("note", args.note)] + _type_fields(args.project_type),
    )
    if args.folder:
        script.add(SetVar("newProject", f"make new project at end of projects of targetFolder with properties {record}"))
    else:
        script.add(SetVar("newProject", f"make new project with properties {record}"))
    return script.add(with_id("newProject"))


@tool("edit_project", EditProjectArgs)
def generate_edit_project_applescript(args: EditProjectArgs) -> Script:
    """Rename a project, change its note, type or tag, or move it to another folder."""
    script = new_script()
    targets = [project_target(args.project_name)]
    if args.new_folder:
        targets.append(folder_target(args.new_folder, "destinationFolder"))
    if args.new_context:
        targets.append(tag_target(args.new_context))
    resolve_targets(script, *targets)

    assign_fields(
        script,
        "targetProject",
        [("name", args.new_name), ("note", args.new_note)] + _type_fields(args.new_type),
    )
    if args.new_context:
        script.add(AssignField("targetProject", "primary tag", "targetTag"))
    if args.new_folder:
        script.add(Raw("move targetProject to end of projects of destinationFolder"))
    return script.add(confirm(literal("Project updated: "), "name of targetProject"))


@tool("delete_project", ProjectRef)
def generate_delete_project_applescript(args: ProjectRef) -> Script:
    """Delete a project and everything in it."""
    script = new_script()
    resolve_targets(script, project_target(args.project_name))
    script.add(SetVar("projectName", "name of targetProject"), Raw("delete targetProject"))
    return script.add(confirm(literal("Project deleted: "), "projectName"))


@tool("archive_project", ArchiveProjectArgs)
def generate_archive_project_applescript(args: ArchiveProjectArgs) -> Script:
    """Complete (finishing its remaining tasks) or drop a project."""
    script = new_script()
    resolve_targets(script, project_target(args.project_name))
    status = ProjectStatus(args.status)

    if status is ProjectStatus.DROPPED:
        script.add(*status_statements("targetProject", status))
        return script.add(
            confirm(
                literal("Project "),
                "name of targetProject",
                literal(f" status changed to {status_label(status)}"),
            )
        )

    script.add(
        SetVar("taskCount", "0"),
        SetVar("completedCount", "0"),
        Repeat(
            "aTask",
            "every task of targetProject",
            [
                SetVar("taskCount", "taskCount + 1"),
                If(
                    "completed of aTask is false",
                    [Raw("mark complete aTask"), SetVar("completedCount", "completedCount + 1")],
                ),
            ],
        ),
    )
    script.add(*status_statements("targetProject", status))
    return script.add(
        confirm(
            literal("Project "),
            "name of targetProject",
            literal(" - completed "),
            "completedCount",
            literal(" of "),
            "taskCount",
            literal(f" tasks, status changed to {status_label(status)}"),
        )
    )


@tool("set_project_status", SetProjectStatusArgs)
def generate_set_project_status_applescript(args: SetProjectStatusArgs) -> Script:
    """Set a project to active, on-hold, completed or dropped."""
    script = new_script()
    resolve_targets(script, project_target(args.project_name))
    script.add(SetVar("previousStatus", "(status of targetProject) as string"))
    script.add(*status_statements("targetProject", args.status))
    return script.add(
        confirm(
            literal("Project "),
            "name of targetProject",
            literal(" status changed from "),
            "previousStatus",
            literal(f" to {status_label(args.status)}"),
        )
    )


@tool("set_project_flag", SetProjectFlagArgs)
def generate_set_project_flag_applescript(args: SetProjectFlagArgs) -> Script:
    """Flag or unflag a project."""
    script = new_script()
    resolve_targets(script, project_target(args.project_name))
    assign_fields(script, "targetProject", [("flagged", args.flagged)])
    return script.add(
        confirm(
            literal("Project "),
            "name of targetProject",
            literal(f" flagged set to {bool_literal(args.flagged)}"),
        )
    )


@tool("set_project_dates", SetProjectDatesArgs)
def generate_set_project_dates_applescript(args: SetProjectDatesArgs) -> Script:
    """Set a project's due and defer dates."""
    script = new_script()
    resolve_targets(script, project_target(args.project_name))
    assign_fields(
        script,
        "targetProject",
        [("due date", args.due_date), ("defer date", args.defer_date)],
    )
    return script.add(confirm(literal("Project dates updated: "), "name of targetProject"))


@tool("move_project", MoveProjectArgs)
def generate_move_project_applescript(args: MoveProjectArgs) -> Script:
    """Confirm a project and a destination folder and explain the manual move.

    OmniFocus rejects scripted moves of projects between folders, so nothing
    is changed here.
    """
    script = new_script()
    project = project_target(args.project_name, track_location=True)
    folder = folder_target(args.to_folder, label="Destination folder", track_location=True)
    resolve_targets(script, project, folder)

    folder_location = location_of(folder)
    script.add(
        If(
            f"{folder_location} is {literal(TOP_LEVEL)}",
            [SetVar("destinationPath", "name of targetFolder")],
            [SetVar("destinationPath", concat(folder_location, literal(PATH_SEPARATOR), "name of targetFolder"))],
        )
    )
    return script.add(
        confirm(
            literal("MANUAL MOVE REQUIRED: Project "),
            "name of targetProject",
            literal(" found at ["),
            location_of(project),
            literal("]. Target folder "),
            "name of targetFolder",
            literal(" confirmed at ["),
            "destinationPath",
            literal(
                "]. OmniFocus does not support automated project moving via AppleScript. "
                "Please manually drag the project in OmniFocus from "
            ),
            location_of(project),
            literal(" to "),
            "destinationPath",
            literal("."),
        )
    )


def _project_listing(empty_only: bool):
    def visit(proj: str, location: str) -> List[Statement]:
        info = concat(
            f"name of {proj}",
            literal(" - "),
            f"((status of {proj}) as string)",
            literal(" [Location: "),
            location,
            literal("]"),
        )
        count = SetVar("incompleteTaskCount", f"count of (tasks of {proj} whose {INCOMPLETE})")
        no_tasks = collect(concat(info, literal(" [No incomplete tasks]")))
        if empty_only:
            return [count, If("incompleteTaskCount is 0", [no_tasks])]
        return [
            count,
            If(
                "incompleteTaskCount > 0",
                [collect(concat(info, literal(" ["), "incompleteTaskCount", literal(" incomplete tasks]")))],
                [no_tasks],
            ),
        ]

    return visit


@tool("list_projects", ListProjectsArgs, empty_text="No projects found")
def generate_list_projects_applescript(args: ListProjectsArgs) -> Script:
    """List projects at every folder level with status, location and open task count.

    Completed and dropped projects are left out unless includeCompleted is set
    (incompleteOnly always leaves them out).
    """
    script = new_script()
    include_completed = args.include_completed and not args.incomplete_only
    script.add(start_lines())
    script.add(*each_project(_project_listing(args.empty_projects_only), project_filters(include_completed)))
    return script.add(*return_lines())


@tool("get_project_note", ProjectRef, soft_not_found=True)
def generate_get_project_note_applescript(args: ProjectRef) -> Script:
    """Show a project's note with its status, location, type and task counts."""
    script = new_script()
    project = project_target(args.project_name, track_location=True)
    resolve_targets(script, project)
    script.add(
        start_lines(),
        collect(concat(literal("Project: "), "name of targetProject")),
        collect(concat(literal("Status: "), "((status of targetProject) as string)")),
        collect(concat(literal("Location: "), location_of(project))),
        If(
            "sequential of targetProject is true",
            [collect(literal("Type: Sequential"))],
            [
                If(
                    "singleton action holder of targetProject is true",
                    [collect(literal("Type: Single Action"))],
                    [collect(literal("Type: Parallel"))],
                )
            ],
        ),
        SetVar("totalTasks", "count of tasks of targetProject"),
        SetVar("incompleteTasks", f"count of (tasks of targetProject whose {INCOMPLETE})"),
        collect(
            concat(
                literal("Tasks: "),
                "incompleteTasks",
                literal(" incomplete / "),
                "totalTasks",
                literal(" total"),
            )
        ),
        collect('""'),
        collect(literal("--- Note Content ---")),
        SetVar("projectNote", "note of targetProject"),
        If(
            'projectNote is ""',
            [collect(literal("(No note content)"))],
            [collect("projectNote")],
        ),
    )
    return script.add(*return_lines())


@tool(
    "get_project_link",
    GetProjectLinkArgs,
    soft_not_found=True,
    postprocess=lambda text, args: format_project_link(text, args.format),
)
def generate_get_project_link_applescript(args: GetProjectLinkArgs) -> Script:
    """Deep link to a project as a URL, Markdown link or HTML anchor."""
    script = new_script()
    project = project_target(args.project_name, track_location=True)
    resolve_targets(script, project)
    separator = literal("|")
    return script.add(
        confirm(
            script.escaped("name of targetProject"),
            separator,
            script.escaped("id of targetProject"),
            separator,
            script.escaped(location_of(project)),
        )
    )
