"""
Test suite for the main CLI interface.
"""

import json
from unittest.mock import patch

from typer.testing import CliRunner

from omnifocus_mcp.ofmcp import app
from omnifocus_mcp.omnifocus_api.formatter import text_response

runner = CliRunner()


class TestCLI:
    """Test cases for the main CLI application."""

    def test_cli_help(self):
        """Test that the CLI shows help information."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "OmniFocus tools" in result.stdout

    def test_cli_version(self):
        """Test that the CLI shows version information."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "1.0.0" in result.stdout

    def test_tools_lists_every_tool(self):
        result = runner.invoke(app, ["tools"])
        assert result.exit_code == 0
        assert "create_task" in result.stdout

    def test_compile_prints_script(self):
        """Compiling never runs anything."""
        with patch("subprocess.run") as mock_run:
            result = runner.invoke(app, ["compile", "complete_task", "--args", '{"taskName": "Pay rent"}'])
        assert result.exit_code == 0
        assert "mark complete targetTask" in result.stdout
        mock_run.assert_not_called()

    def test_compile_unknown_tool(self):
        result = runner.invoke(app, ["compile", "nope"])
        assert result.exit_code == 1

    def test_compile_rejects_invalid_json(self):
        result = runner.invoke(app, ["compile", "complete_task", "--args", "{not json"])
        assert result.exit_code != 0

    @patch("omnifocus_mcp.ofmcp.call_tool")
    def test_call_prints_response(self, mock_call):
        mock_call.return_value = text_response("Task completed: Pay rent")
        result = runner.invoke(app, ["call", "complete_task", "-a", '{"taskName": "Pay rent"}'])
        assert result.exit_code == 0
        assert "Task completed: Pay rent" in result.stdout
        mock_call.assert_called_once_with("complete_task", {"taskName": "Pay rent"})

    @patch("omnifocus_mcp.ofmcp.call_tool")
    def test_call_json_output(self, mock_call):
        mock_call.return_value = text_response("No tasks found")
        result = runner.invoke(app, ["call", "list_tasks", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout) == text_response("No tasks found")

    @patch("omnifocus_mcp.ofmcp.call_tool")
    def test_call_error_sets_exit_code(self, mock_call):
        mock_call.return_value = text_response("Error: Task not found: Pay rent", is_error=True)
        result = runner.invoke(app, ["call", "complete_task", "-a", '{"taskName": "Pay rent"}'])
        assert result.exit_code == 1
        assert "Task not found" in result.stdout


class TestCLIErrors:
    """Test error handling in CLI commands."""

    def test_invalid_command(self):
        """Test that invalid commands show helpful error messages."""
        result = runner.invoke(app, ["nonexistent-command"])
        assert result.exit_code != 0
