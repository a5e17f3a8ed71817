"""Perspective tools.

Perspectives belong to the front window rather than the document, so these
scripts are addressed to ``front window``.
"""

from ..omnifocus_api.arguments import (
    GetPerspectiveContentsArgs,
    NoArguments,
    SwitchPerspectiveArgs,
)
from ..omnifocus_api.compiler import (
    collect,
    confirm,
    new_script,
    return_lines,
    start_lines,
)
from ..omnifocus_api.errors import RESOLUTION_ERROR_NUMBER
from ..omnifocus_api.formatter import categorize_perspectives
from ..omnifocus_api.script_builder import (
    MISSING,
    ExitRepeat,
    Fail,
    If,
    Repeat,
    Return,
    Script,
    SetVar,
    Tell,
    Try,
    concat,
    literal,
)
from .registry import tool

WINDOW = "front window"
MAX_PERSPECTIVE_ITEMS = 100

# (class name fragment, label), checked in order
ITEM_TYPES = (
    ("project", "[Project]"),
    ("task", "[Task]"),
    ("folder", "[Folder]"),
    ("tag", "[Tag]"),
)


@tool("list_perspectives", NoArguments, postprocess=lambda text, _args: categorize_perspectives(text))
def generate_list_perspectives_applescript(args: NoArguments) -> Script:
    """Built-in and custom perspective names."""
    script = new_script()
    script.add(start_lines(), Repeat("perspName", "perspective names", [collect("perspName")]))
    return script.add(*return_lines())


@tool("get_current_perspective", NoArguments, success_prefix="Current perspective: ")
def generate_get_current_perspective_applescript(args: NoArguments) -> Script:
    """Name of the perspective shown in the front window."""
    script = new_script(WINDOW)
    return script.add(
        Try(
            [Return("perspective name")],
            [Return(literal("No perspective selected (possibly in a custom view)"))],
        )
    )


@tool("switch_perspective", SwitchPerspectiveArgs)
def generate_switch_perspective_applescript(args: SwitchPerspectiveArgs) -> Script:
    """Show another perspective in the front window."""
    script = new_script(WINDOW)
    script.add(SetVar("perspective name", literal(args.perspective_name)))
    return script.add(confirm(literal("Successfully switched to perspective: "), "perspective name"))


def _classify_item(item_types=ITEM_TYPES) -> If:
    """``itemType`` label chosen from ``itemClass``; unknown classes keep their own name."""
    fragment, label = item_types[0]
    body = [SetVar("itemType", literal(label))]
    if fragment == "task":
        body.append(
            Try(
                [
                    If(
                        f"containing project of itemValue is {MISSING}",
                        [SetVar("itemType", literal("[Inbox Task]"))],
                    )
                ]
            )
        )
    if len(item_types) == 1:
        orelse = [SetVar("itemType", concat(literal("["), "itemClass", literal("]")))]
    else:
        orelse = [_classify_item(item_types[1:])]
    return If(f"itemClass contains {literal(fragment)}", body, orelse)


@tool("get_perspective_contents", GetPerspectiveContentsArgs)
def generate_get_perspective_contents_applescript(args: GetPerspectiveContentsArgs) -> Script:
    """Items visible in a perspective (the current one unless a name is given).

    Switching and reading happen in the same script; at most 100 items are
    listed.
    """
    script = new_script(WINDOW)
    if args.perspective_name:
        script.add(SetVar("perspective name", literal(args.perspective_name)))
    script.add(
        Try(
            [SetVar("perspectiveName", "perspective name")],
            [Fail(literal("No perspective selected"), RESOLUTION_ERROR_NUMBER)],
        ),
        start_lines(),
        SetVar("itemCount", "0"),
        SetVar("truncated", "false"),
    )

    task_details = [
        Try(
            [
                If(
                    f"primary tag of itemValue is not {MISSING}",
                    [SetVar("itemInfo", concat("itemInfo", literal(" @"), "name of primary tag of itemValue"))],
                )
            ]
        ),
        Try(
            [
                If(
                    f"due date of itemValue is not {MISSING}",
                    [
                        SetVar(
                            "itemInfo",
                            concat("itemInfo", literal(" (Due: "), "((due date of itemValue) as string)", literal(")")),
                        )
                    ],
                )
            ]
        ),
        Try(
            [
                If(
                    "flagged of itemValue is true",
                    [SetVar("itemInfo", concat("itemInfo", literal(" [Flagged]")))],
                )
            ]
        ),
    ]
    item = Try(
        [
            SetVar("itemValue", "value of treeItem"),
            SetVar("itemClass", "(class of itemValue) as string"),
            _classify_item(),
            SetVar("itemInfo", concat("name of itemValue", literal(" "), "itemType")),
            If('itemClass contains "task"', task_details),
            collect("itemInfo"),
            SetVar("itemCount", "itemCount + 1"),
        ]
    )
    script.add(
        Tell(
            "content",
            [
                Repeat(
                    "treeItem",
                    "every tree",
                    [
                        If(
                            f"itemCount >= {MAX_PERSPECTIVE_ITEMS}",
                            [SetVar("truncated", "true"), ExitRepeat()],
                        ),
                        item,
                    ],
                )
            ],
        ),
        If(
            "itemCount is 0",
            [Return(concat(literal("No items visible in perspective: "), "perspectiveName"))],
        ),
        If(
            "truncated",
            [collect(concat('""', "linefeed", literal(f"... (showing first {MAX_PERSPECTIVE_ITEMS} items)")))],
        ),
    )
    return script.add(
        *return_lines(
            prefix=concat(
                literal("Perspective: "),
                "perspectiveName",
                "linefeed",
                literal("Items: "),
                "itemCount",
                "linefeed",
                "linefeed",
            )
        )
    )
