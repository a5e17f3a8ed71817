"""Task tools: create, edit, move, complete, delete, flag, dates, notes, listing."""

from typing import List, Optional

from ..omnifocus_api.arguments import (
    CreateTaskArgs,
    EditTaskArgs,
    ListTasksArgs,
    MoveTaskArgs,
    SearchTasksArgs,
    SetTaskDatesArgs,
    SetTaskFlagArgs,
    TaskRef,
)
from ..omnifocus_api.compiler import (
    INCOMPLETE,
    IdTarget,
    assign_fields,
    collect,
    completion_filter,
    confirm,
    each_project,
    new_script,
    project_target,
    properties,
    resolve_targets,
    return_lines,
    start_lines,
    tag_condition,
    tag_target,
    task_line,
    task_targets,
    with_id,
)
from ..omnifocus_api.script_builder import (
    MISSING,
    AssignField,
    If,
    Raw,
    Repeat,
    Script,
    SetVar,
    Statement,
    Try,
    bool_literal,
    concat,
    literal,
    whose,
)
from .registry import tool


@tool("create_task", CreateTaskArgs, success_prefix="Successfully created task: ")
def generate_create_task_applescript(args: CreateTaskArgs) -> Script:
    """Create a task in the inbox or in a project, optionally tagged and dated."""
    script = new_script()
    targets = []
    if args.project:
        targets.append(project_target(args.project))
    elif args.project_id:
        targets.append(IdTarget("project", args.project_id, "targetProject", "Project"))
    if args.context:
        targets.append(tag_target(args.context))
    resolve_targets(script, *targets)

    record = properties(script, [("name", args.name), ("note", args.note)])
    if args.project or args.project_id:
        script.add(SetVar("newTask", f"make new task at end of tasks of targetProject with properties {record}"))
    else:
        script.add(SetVar("newTask", f"make new inbox task with properties {record}"))

    assign_fields(
        script,
        "newTask",
        [
            ("due date", args.due_date),
            ("defer date", args.defer_date),
            ("estimated minutes", args.estimated_minutes),
        ],
    )
    if args.context:
        script.add(AssignField("newTask", "primary tag", "targetTag"))
    return script.add(with_id("newTask"))


@tool("edit_task", EditTaskArgs)
def generate_edit_task_applescript(args: EditTaskArgs) -> Script:
    """Change any combination of a task's fields; absent fields stay as they are."""
    script = new_script()
    targets = task_targets(args.task_name, args.project)
    if args.new_project:
        targets.append(project_target(args.new_project, "destinationProject"))
    if args.new_context:
        targets.append(tag_target(args.new_context))
    resolve_targets(script, *targets)

    assign_fields(
        script,
        "targetTask",
        [
            ("name", args.new_name),
            ("note", args.new_note),
            ("due date", args.new_due_date),
            ("defer date", args.new_defer_date),
            ("flagged", args.flagged),
            ("estimated minutes", args.estimated_minutes),
        ],
    )
    if args.new_context:
        script.add(AssignField("targetTask", "primary tag", "targetTag"))
    if args.new_project:
        script.add(Raw("move targetTask to end of tasks of destinationProject"))
    return script.add(confirm(literal("Task updated: "), "name of targetTask"))


@tool("move_task", MoveTaskArgs)
def generate_move_task_applescript(args: MoveTaskArgs) -> Script:
    """Move a task (from the inbox or a project) to the end of another project."""
    script = new_script()
    targets = task_targets(args.task_name, args.from_project)
    targets.append(project_target(args.to_project, "destinationProject", label="Destination project"))
    resolve_targets(script, *targets)
    script.add(Raw("move targetTask to end of tasks of destinationProject"))
    return script.add(
        confirm(
            literal("Task moved: "),
            "name of targetTask",
            literal(" to project "),
            "name of destinationProject",
        )
    )


@tool("complete_task", TaskRef)
def generate_complete_task_applescript(args: TaskRef) -> Script:
    """Mark the first incomplete task with this name complete."""
    script = new_script()
    resolve_targets(script, *task_targets(args.task_name, args.project, incomplete_only=True))
    script.add(Raw("mark complete targetTask"))
    return script.add(confirm(literal("Task completed: "), "name of targetTask"))


@tool("delete_task", TaskRef)
def generate_delete_task_applescript(args: TaskRef) -> Script:
    """Delete a task."""
    script = new_script()
    resolve_targets(script, *task_targets(args.task_name, args.project))
    script.add(SetVar("taskName", "name of targetTask"), Raw("delete targetTask"))
    return script.add(confirm(literal("Task deleted: "), "taskName"))


@tool("set_task_flag", SetTaskFlagArgs)
def generate_set_task_flag_applescript(args: SetTaskFlagArgs) -> Script:
    """Flag or unflag a task."""
    script = new_script()
    resolve_targets(script, *task_targets(args.task_name, args.project))
    assign_fields(script, "targetTask", [("flagged", args.flagged)])
    return script.add(
        confirm(
            literal("Task flag updated: "),
            "name of targetTask",
            literal(f" (flagged: {bool_literal(args.flagged)})"),
        )
    )


@tool("set_task_dates", SetTaskDatesArgs)
def generate_set_task_dates_applescript(args: SetTaskDatesArgs) -> Script:
    """Set a task's due date, defer date and estimated duration."""
    script = new_script()
    resolve_targets(script, *task_targets(args.task_name, args.project))
    assign_fields(
        script,
        "targetTask",
        [
            ("due date", args.due_date),
            ("defer date", args.defer_date),
            ("estimated minutes", args.estimated_minutes),
        ],
    )
    return script.add(confirm(literal("Task dates updated: "), "name of targetTask"))


@tool("get_task_note", TaskRef, soft_not_found=True)
def generate_get_task_note_applescript(args: TaskRef) -> Script:
    """Show an incomplete task's note together with its project and tag."""
    script = new_script()
    resolve_targets(script, *task_targets(args.task_name, args.project, incomplete_only=True))
    script.add(
        start_lines(),
        collect(concat(literal("Task: "), "name of targetTask")),
        Try(
            [
                SetVar("taskProject", "containing project of targetTask"),
                If(
                    f"taskProject is {MISSING}",
                    [collect(literal("Location: Inbox"))],
                    [collect(concat(literal("Project: "), "name of taskProject"))],
                ),
            ],
            [collect(literal("Location: Inbox"))],
        ),
        Try(
            [
                SetVar("taskTag", "primary tag of targetTask"),
                If(f"taskTag is not {MISSING}", [collect(concat(literal("Context: "), "name of taskTag"))]),
            ]
        ),
        collect('""'),
        collect(literal("--- Note Content ---")),
        SetVar("taskNote", "note of targetTask"),
        If(
            'taskNote is ""',
            [collect(literal("(No note content)"))],
            [collect("taskNote")],
        ),
    )
    return script.add(*return_lines())


def _task_loop(collection: str, tag_name: Optional[str]) -> Statement:
    body: List[Statement] = task_line("tsk")
    condition = tag_condition("tsk", tag_name)
    if condition:
        body = [If(condition, body + [collect("taskInfo")])]
    else:
        body = body + [collect("taskInfo")]
    return Repeat("tsk", collection, body)


@tool("list_tasks", ListTasksArgs, empty_text="No tasks found", soft_not_found=True)
def generate_list_tasks_applescript(args: ListTasksArgs) -> Script:
    """List tasks, incomplete only unless includeCompleted is set.

    Without a project or inboxOnly the listing covers every project at every
    folder level, followed by the inbox.
    """
    script = new_script()
    filters = whose(completion_filter(args.include_completed))

    if args.project and not args.inbox_only:
        resolve_targets(script, project_target(args.project))
    script.add(start_lines())

    if args.inbox_only:
        script.add(_task_loop(f"(every inbox task{filters})", args.context))
    elif args.project:
        script.add(_task_loop(f"(tasks of targetProject{filters})", args.context))
    else:
        script.add(
            *each_project(lambda proj, _location: [_task_loop(f"(tasks of {proj}{filters})", args.context)])
        )
        script.add(_task_loop(f"(every inbox task{filters})", args.context))
    return script.add(*return_lines())


@tool("search_tasks", SearchTasksArgs, empty_text="No tasks found matching: {query}")
def generate_search_tasks_applescript(args: SearchTasksArgs) -> Script:
    """Find incomplete tasks whose name or note contains the query."""
    script = new_script()
    query = literal(args.query)
    filters = whose(INCOMPLETE)

    def _matches(collection: str) -> Statement:
        return Repeat(
            "tsk",
            collection,
            [
                If(
                    f"name of tsk contains {query} or note of tsk contains {query}",
                    task_line("tsk") + [collect("taskInfo")],
                )
            ],
        )

    script.add(start_lines())
    script.add(*each_project(lambda proj, _location: [_matches(f"(tasks of {proj}{filters})")]))
    script.add(_matches(f"(every inbox task{filters})"))
    return script.add(*return_lines())
