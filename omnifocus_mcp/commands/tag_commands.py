"""Tag (context) tools."""

from typing import List, Optional

from ..omnifocus_api.arguments import (
    CreateContextArgs,
    GetTagDetailsArgs,
    ListContextsArgs,
    ListTagsArgs,
)
from ..omnifocus_api.compiler import (
    INCOMPLETE,
    collect,
    new_script,
    resolve_targets,
    return_lines,
    start_lines,
    tag_target,
    with_id,
)
from ..omnifocus_api.locator import TAG_LOOP_VARS
from ..omnifocus_api.script_builder import (
    If,
    Repeat,
    Script,
    SetVar,
    Statement,
    concat,
    literal,
    whose,
)
from .registry import tool

TAG_INDENT = "  "
VISIBLE = "hidden is false"


@tool("create_context", CreateContextArgs, success_prefix="Successfully created context: ")
def generate_create_context_applescript(args: CreateContextArgs) -> Script:
    """Create a tag, nested under a parent tag when one is named."""
    script = new_script()
    record = "{name:" + literal(args.name) + "}"
    if args.parent:
        resolve_targets(script, tag_target(args.parent, "parentTag"))
        script.add(SetVar("newTag", f"make new tag at end of tags of parentTag with properties {record}"))
    else:
        script.add(SetVar("newTag", f"make new tag with properties {record}"))
    return script.add(with_id("newTag"))


@tool("list_contexts", ListContextsArgs, empty_text="No contexts found")
def generate_list_contexts_applescript(args: ListContextsArgs) -> Script:
    """List every tag at any depth; hidden tags only with includeInactive."""
    script = new_script()
    script.add(start_lines())
    if args.include_inactive:
        body: List[Statement] = [
            If(
                "hidden of ctx is true",
                [collect(concat("name of ctx", literal(" (inactive)")))],
                [collect("name of ctx")],
            )
        ]
        script.add(Repeat("ctx", "every flattened tag", body))
    else:
        script.add(Repeat("ctx", f"(every flattened tag{whose(VISIBLE)})", [collect("name of ctx")]))
    return script.add(*return_lines())


def _tag_level(args: ListTagsArgs, depth: int, parent: Optional[str]) -> Statement:
    var = TAG_LOOP_VARS[depth - 1]
    filters = "" if args.include_inactive else whose(VISIBLE)
    collection = f"(every tag{filters})" if parent is None else f"(tags of {parent}{filters})"

    body: List[Statement] = [SetVar("tagInfo", concat(literal(TAG_INDENT * (depth - 1)), f"name of {var}"))]
    if args.include_usage_stats:
        body.append(
            SetVar(
                "tagInfo",
                concat(
                    "tagInfo",
                    literal(" ("),
                    f"(count of (flattened tasks whose primary tag is {var} and {INCOMPLETE}))",
                    literal(" tasks)"),
                ),
            )
        )
    if args.include_inactive:
        body.append(If(f"hidden of {var} is true", [SetVar("tagInfo", concat("tagInfo", literal(" [hidden]")))]))
    body.append(collect("tagInfo"))
    if depth < len(TAG_LOOP_VARS):
        body.append(_tag_level(args, depth + 1, var))
    return Repeat(var, collection, body)


@tool("list_tags_hierarchy", ListTagsArgs, empty_text="No tags found")
def generate_list_tags_hierarchy_applescript(args: ListTagsArgs) -> Script:
    """Indented tag tree, five levels deep."""
    script = new_script()
    script.add(start_lines(), _tag_level(args, 1, None))
    return script.add(*return_lines())


@tool("get_tag_details", GetTagDetailsArgs, soft_not_found=True)
def generate_get_tag_details_applescript(args: GetTagDetailsArgs) -> Script:
    """Visibility and task counts for one tag."""
    script = new_script()
    resolve_targets(script, tag_target(args.tag_name))
    tagged = "flattened tasks whose primary tag is targetTag"
    script.add(
        start_lines(),
        collect(concat(literal("Tag: "), "name of targetTag")),
        collect(concat(literal("Hidden: "), "((hidden of targetTag) as string)")),
        collect(concat(literal("Active tasks: "), f"(count of ({tagged} and {INCOMPLETE}))")),
        collect(concat(literal("Completed tasks: "), f"(count of ({tagged} and completed is true))")),
        collect(concat(literal("Remaining tasks: "), "(remaining task count of targetTag)")),
        collect(concat(literal("Available tasks: "), "(available task count of targetTag)")),
    )
    return script.add(*return_lines())
