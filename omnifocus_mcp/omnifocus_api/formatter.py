"""
Map raw script output to the tool result envelope.

List output is passed through as-is: one record per line with ``[Key: value]``
annotations. Composite single-record output (a project's name, id and
location) is ``|``-joined with ``\\`` and ``|`` escaped inside each field by
the script, so :func:`split_record` can take it apart unambiguously.
"""

import html
from typing import Any, Callable, Dict, List, Optional

from .errors import ErrorKind, Result

Envelope = Dict[str, Any]

RECORD_SEPARATOR = "|"
ESCAPE = "\\"

OMNIFOCUS_URL = "omnifocus:///task/{id}"

LINK_FORMATS = ("url", "markdown", "html")

BUILT_IN_PERSPECTIVES = (
    "Inbox",
    "Projects",
    "Tags",
    "Flagged",
    "Review",
    "Forecast",
    "Completed",
    "Changed",
    "Nearby",
)


def text_response(text: str, is_error: bool = False) -> Envelope:
    """Build the ``{"content": [...], "isError": ...}`` envelope."""
    return {"content": [{"type": "text", "text": text}], "isError": is_error}


def response_text(envelope: Envelope) -> str:
    return "\n".join(item.get("text", "") for item in envelope.get("content", []))


def format_error(detail: str, script_path: Optional[str] = None) -> Envelope:
    text = f"Error: {detail}"
    if script_path:
        text += f"\nScript kept at: {script_path}"
    return text_response(text, is_error=True)


def format_result(
    result: Result,
    success_prefix: str = "",
    empty_text: Optional[str] = None,
    soft_not_found: bool = False,
    postprocess: Optional[Callable[[str], str]] = None,
) -> Envelope:
    """Render a runner result for the caller.

    Query tools pass ``soft_not_found`` so a missing target reads as a plain
    answer instead of a failure.
    """
    if not result.ok:
        if soft_not_found and result.kind is ErrorKind.RESOLUTION:
            return text_response(result.detail)
        return format_error(result.detail, result.script_path)

    text = result.text
    if not text and empty_text is not None:
        return text_response(empty_text)
    if postprocess is not None:
        text = postprocess(text)
    return text_response(f"{success_prefix}{text}")


# --- Composite records -------------------------------------------------------

def split_record(line: str) -> List[str]:
    """Split a ``|``-joined record, undoing the ``\\|`` and ``\\\\`` escapes."""
    fields: List[str] = []
    current: List[str] = []
    chars = iter(line)
    for char in chars:
        if char == ESCAPE:
            current.append(next(chars, ESCAPE))
        elif char == RECORD_SEPARATOR:
            fields.append("".join(current))
            current = []
        else:
            current.append(char)
    fields.append("".join(current))
    return fields


def _markdown_label(text: str) -> str:
    return text.replace("\\", "\\\\").replace("[", "\\[").replace("]", "\\]")


def build_project_link(name: str, project_id: str, fmt: str = "markdown") -> str:
    """Render the project deep link as a plain URL, Markdown link or HTML anchor."""
    url = OMNIFOCUS_URL.format(id=project_id)
    if fmt == "url":
        return url
    if fmt == "html":
        return f'<a href="{html.escape(url)}">{html.escape(name)}</a>'
    if fmt == "markdown":
        return f"[{_markdown_label(name)}]({url})"
    raise ValueError(f"Unknown link format: {fmt}")


def format_project_link(record: str, fmt: str = "markdown") -> str:
    fields = split_record(record)
    if len(fields) != 3:
        raise ValueError(f"Malformed project record: {record!r}")
    name, project_id, location = fields
    return (
        "Project Link Generated:\n"
        f"Name: {name}\n"
        f"Location: {location}\n"
        f"URL: {OMNIFOCUS_URL.format(id=project_id)}\n"
        "\n"
        f"{fmt.upper()} Format:\n"
        f"{build_project_link(name, project_id, fmt)}"
    )


# --- Perspectives ------------------------------------------------------------

def categorize_perspectives(text: str) -> str:
    names = [line.strip() for line in text.splitlines() if line.strip()]
    built_in = [name for name in names if name in BUILT_IN_PERSPECTIVES]
    custom = [name for name in names if name not in BUILT_IN_PERSPECTIVES]
    return (
        "Built-in Perspectives:\n"
        + "\n".join(built_in)
        + "\n\nCustom Perspectives:\n"
        + "\n".join(custom)
        + f"\n\nTotal: {len(names)} perspectives"
    )
