#!/usr/bin/env python3
"""Command-line front end for the OmniFocus tool set.

``ofmcp tools`` lists the available tools, ``ofmcp compile`` prints the
script a call would run and ``ofmcp call`` runs it against OmniFocus.
"""
import json
from typing import Any, Dict, Optional

import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .commands import TOOLS, call_tool, compile_script
from .omnifocus_api.errors import OmniFocusError
from .omnifocus_api.formatter import response_text
from .utils.config import load_env_vars
from .utils.logger import configure_logging

# Load environment variables
load_env_vars()

app = typer.Typer(
    name="ofmcp",
    help="OmniFocus tools - compile and run OmniFocus operations from the command line.",
    no_args_is_help=True,
)

console = Console()


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"ofmcp {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log compiled scripts (DEBUG level)."),
):
    """OmniFocus tools - compile and run OmniFocus operations."""
    configure_logging("DEBUG" if verbose else None)


def _parse_arguments(raw: Optional[str]) -> Dict[str, Any]:
    if not raw:
        return {}
    try:
        arguments = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise typer.BadParameter(f"--args is not valid JSON: {exc}") from None
    if not isinstance(arguments, dict):
        raise typer.BadParameter("--args must be a JSON object")
    return arguments


@app.command("tools")
def list_tools():
    """List every available tool."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Tool")
    table.add_column("Description")
    for name in sorted(TOOLS):
        table.add_row(name, TOOLS[name].description)
    console.print(table)


@app.command("compile")
def compile_command(
    tool: str = typer.Argument(..., help="Tool name, e.g. create_task."),
    args: Optional[str] = typer.Option(None, "--args", "-a", help="Tool arguments as a JSON object."),
):
    """Print the script a tool call would run, without running it."""
    try:
        script = compile_script(tool, _parse_arguments(args))
    except OmniFocusError as exc:
        typer.echo(f"Error: {exc.detail}", err=True)
        raise typer.Exit(code=1)
    typer.echo(script)


@app.command("call")
def call_command(
    tool: str = typer.Argument(..., help="Tool name, e.g. list_tasks."),
    args: Optional[str] = typer.Option(None, "--args", "-a", help="Tool arguments as a JSON object."),
    json_output: bool = typer.Option(False, "--json", help="Print the full response envelope as JSON."),
):
    """Run a tool against OmniFocus and print its response."""
    response = call_tool(tool, _parse_arguments(args))
    if json_output:
        typer.echo(json.dumps(response, indent=2))
    else:
        typer.echo(response_text(response))
    if response["isError"]:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
