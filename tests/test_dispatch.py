from types import SimpleNamespace

import pytest

from omnifocus_mcp.commands import call_tool
from omnifocus_mcp.omnifocus_api.formatter import response_text


@pytest.fixture(autouse=True)
def script_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("OFMCP_SCRIPT_DIR", str(tmp_path))
    monkeypatch.delenv("OFMCP_OSASCRIPT", raising=False)
    return tmp_path


@pytest.fixture
def runner(monkeypatch):
    """Fake osascript; set ``runner.result`` to change what it reports."""
    state = SimpleNamespace(calls=[], result=SimpleNamespace(returncode=0, stdout="", stderr=""))

    def _fake_run(cmd, capture_output=True, text=True, check=False):
        with open(cmd[1], encoding="utf-8") as fh:
            state.calls.append(fh.read())
        return state.result

    monkeypatch.setattr("subprocess.run", _fake_run)
    return state


def _fails_with(stderr):
    return SimpleNamespace(returncode=1, stdout="", stderr=stderr)


def test_unknown_tool_never_runs_a_script(runner):
    response = call_tool("nope", {})
    assert response["isError"] is True
    assert response_text(response) == "Error: Unknown tool: nope"
    assert runner.calls == []


def test_invalid_arguments_never_run_a_script(runner):
    response = call_tool("set_project_status", {"projectName": "Old", "status": "paused"})
    assert response["isError"] is True
    assert "Invalid arguments for set_project_status" in response_text(response)
    assert runner.calls == []


def test_successful_call(runner):
    runner.result = SimpleNamespace(returncode=0, stdout="Task completed: Pay rent\n", stderr="")
    response = call_tool("complete_task", {"taskName": "Pay rent"})
    assert response == {"content": [{"type": "text", "text": "Task completed: Pay rent"}], "isError": False}
    assert "mark complete targetTask" in runner.calls[0]


def test_success_prefix(runner):
    runner.result = SimpleNamespace(returncode=0, stdout="Buy milk (ID: a1)", stderr="")
    response = call_tool("create_task", {"name": "Buy milk"})
    assert response_text(response) == "Successfully created task: Buy milk (ID: a1)"


def test_resolution_failure_is_an_error(runner, script_dir):
    runner.result = _fails_with("x:1:2: execution error: Task not found: Pay rent (1404)")
    response = call_tool("complete_task", {"taskName": "Pay rent"})
    assert response["isError"] is True
    text = response_text(response)
    assert text.startswith("Error: Task not found: Pay rent")
    assert "Script kept at: " + str(script_dir) in text


def test_query_tools_report_missing_targets_softly(runner):
    runner.result = _fails_with("x:1:2: execution error: Project not found: Garden (1404)")
    response = call_tool("get_project_note", {"projectName": "Garden"})
    assert response == {"content": [{"type": "text", "text": "Project not found: Garden"}], "isError": False}


def test_empty_search(runner):
    response = call_tool("search_tasks", {"query": "milk"})
    assert response_text(response) == "No tasks found matching: milk"


def test_project_link(runner):
    runner.result = SimpleNamespace(returncode=0, stdout="Ops\\|Infra|abc|Top Level", stderr="")
    response = call_tool("get_project_link", {"projectName": "Ops|Infra", "format": "html"})
    text = response_text(response)
    assert '<a href="omnifocus:///task/abc">Ops|Infra</a>' in text
    assert "Location: Top Level" in text


def test_malformed_output_is_reported(runner):
    runner.result = SimpleNamespace(returncode=0, stdout="garbage", stderr="")
    response = call_tool("get_project_link", {"projectName": "Ops"})
    assert response["isError"] is True
    assert "Failed to format the result of get_project_link" in response_text(response)


def test_perspectives_are_categorized(runner):
    runner.result = SimpleNamespace(returncode=0, stdout="Inbox\nWeekly\n", stderr="")
    text = response_text(call_tool("list_perspectives"))
    assert "Custom Perspectives:\nWeekly" in text
    assert text.endswith("Total: 2 perspectives")


def test_unwritable_script_directory_is_an_error_response(runner, monkeypatch, tmp_path):
    monkeypatch.setenv("OFMCP_SCRIPT_DIR", str(tmp_path / "does-not-exist"))
    response = call_tool("list_tasks", {})
    assert response["isError"] is True
    assert response_text(response).startswith("Error: Could not write the script file")
    assert runner.calls == []


def test_runner_permission_error_is_an_error_response(monkeypatch):
    def _fake_run(cmd, capture_output=True, text=True, check=False):
        raise PermissionError(13, "Permission denied", cmd[0])

    monkeypatch.setattr("subprocess.run", _fake_run)
    response = call_tool("list_tasks", {})
    assert response["isError"] is True
    assert "Permission denied" in response_text(response)
    assert "Script kept at: " in response_text(response)
