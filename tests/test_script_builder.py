from datetime import datetime

from omnifocus_mcp.omnifocus_api.script_builder import (
    AssertFound,
    AssignField,
    Fail,
    If,
    Repeat,
    Return,
    Script,
    SetVar,
    Try,
    whose,
)
from omnifocus_mcp.omnifocus_api.utils import escape_applescript_string, quote


class TestEscaping:
    def test_quotes_and_backslashes(self):
        assert escape_applescript_string('say "hi" \\ bye') == 'say \\"hi\\" \\\\ bye'

    def test_empty_and_none(self):
        assert escape_applescript_string("") == ""
        assert escape_applescript_string(None) == ""

    def test_quote(self):
        assert quote('a"b') == '"a\\"b"'


def test_whose():
    assert whose() == ""
    assert whose("", "") == ""
    assert whose("completed is false") == " whose completed is false"
    assert whose("a", "", "b") == " whose a and b"


def test_nested_blocks_are_indented():
    statement = If(
        "x is 1",
        [Repeat("item", "every task", [SetVar("y", "2")])],
        [Try([Return("3")], [Fail('"bad"')])],
    )
    assert statement.render(0) == [
        "if x is 1 then",
        "    repeat with item in every task",
        "        set y to 2",
        "    end repeat",
        "else",
        "    try",
        "        return 3",
        "    on error",
        '        error "bad" number 1422',
        "    end try",
        "end if",
    ]


def test_assert_found_raises_resolution_error_number():
    lines = AssertFound("targetTag", "Tag", "Errands").render(0)
    assert lines[0] == "if targetTag is missing value then"
    assert lines[1].strip() == 'error "Tag not found: Errands" number 1404'


def test_script_wraps_body_in_tell_blocks():
    script = Script()
    script.add(AssignField("targetTask", "flagged", "true"), Return('"done"'))
    lines = script.render().splitlines()
    assert lines[0] == 'tell application "OmniFocus"'
    assert lines[1] == "    tell front document"
    assert lines[2] == "        set flagged of targetTask to true"
    assert lines[-1] == "end tell"


def test_date_handler_is_added_once():
    script = Script()
    first = script.date(datetime(2025, 6, 1, 14, 30))
    script.date(datetime(2025, 7, 2))
    assert first == "my makeDate(2025, 6, 1, 14, 30, 0)"
    text = script.render()
    assert text.startswith("on makeDate(")
    assert text.count("on makeDate(") == 1


def test_escaped_field_handler():
    script = Script()
    assert script.escaped("name of proj") == "my escapeField(name of proj)"
    assert "on escapeField(theText)" in script.render()
