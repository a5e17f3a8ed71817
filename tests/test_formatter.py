import pytest

from omnifocus_mcp.omnifocus_api.errors import Err, ErrorKind, Ok
from omnifocus_mcp.omnifocus_api.formatter import (
    build_project_link,
    categorize_perspectives,
    format_project_link,
    format_result,
    response_text,
    split_record,
    text_response,
)


def test_text_response_envelope():
    assert text_response("hello") == {"content": [{"type": "text", "text": "hello"}], "isError": False}
    assert response_text(text_response("a", is_error=True)) == "a"


class TestSplitRecord:
    def test_plain_fields(self):
        assert split_record("Ops|abc|Top Level") == ["Ops", "abc", "Top Level"]

    def test_escaped_separator_and_backslash(self):
        assert split_record("a\\|b|1|c\\\\d") == ["a|b", "1", "c\\d"]

    def test_empty_fields(self):
        assert split_record("||") == ["", "", ""]


class TestProjectLink:
    def test_url(self):
        assert build_project_link("Ops", "abc", "url") == "omnifocus:///task/abc"

    def test_markdown_escapes_brackets(self):
        assert build_project_link("A [B]", "abc", "markdown") == "[A \\[B\\]](omnifocus:///task/abc)"

    def test_html_escapes_name(self):
        assert (
            build_project_link("R&D <x>", "abc", "html")
            == '<a href="omnifocus:///task/abc">R&amp;D &lt;x&gt;</a>'
        )

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            build_project_link("Ops", "abc", "pdf")

    def test_record_with_separator_in_name(self):
        text = format_project_link("Ops\\|Infra|abc123|Work > Clients", "url")
        assert "Name: Ops|Infra" in text
        assert "Location: Work > Clients" in text
        assert "URL: omnifocus:///task/abc123" in text
        assert text.endswith("URL Format:\nomnifocus:///task/abc123")

    def test_malformed_record(self):
        with pytest.raises(ValueError):
            format_project_link("only|two", "url")


class TestFormatResult:
    def test_success_prefix(self):
        envelope = format_result(Ok("Buy milk (ID: a1)"), success_prefix="Successfully created task: ")
        assert response_text(envelope) == "Successfully created task: Buy milk (ID: a1)"
        assert envelope["isError"] is False

    def test_bracket_annotations_pass_through(self):
        line = "Call Bob [Project: A|B] [Context: Phone]"
        assert response_text(format_result(Ok(line))) == line

    def test_empty_text(self):
        assert response_text(format_result(Ok(""), empty_text="No tasks found")) == "No tasks found"

    def test_resolution_error(self):
        envelope = format_result(Err(ErrorKind.RESOLUTION, "Project not found: X"))
        assert envelope["isError"] is True
        assert response_text(envelope) == "Error: Project not found: X"

    def test_soft_not_found(self):
        envelope = format_result(Err(ErrorKind.RESOLUTION, "Project not found: X"), soft_not_found=True)
        assert envelope == text_response("Project not found: X")

    def test_soft_not_found_keeps_other_errors(self):
        envelope = format_result(Err(ErrorKind.EXECUTION, "boom"), soft_not_found=True)
        assert envelope["isError"] is True

    def test_kept_script_path_is_reported(self):
        envelope = format_result(Err(ErrorKind.EXECUTION, "boom", "/tmp/omnifocus-1.applescript"))
        assert response_text(envelope) == "Error: boom\nScript kept at: /tmp/omnifocus-1.applescript"


def test_categorize_perspectives():
    text = categorize_perspectives("Inbox\nMy Focus\nForecast\n")
    assert text == (
        "Built-in Perspectives:\nInbox\nForecast\n\n"
        "Custom Perspectives:\nMy Focus\n\n"
        "Total: 3 perspectives"
    )
