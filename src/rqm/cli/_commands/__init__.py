"""RQM CLI commands."""
# pyright: reportUnusedCallResult=false

from typing import TYPE_CHECKING

from ._check import check_command
from ._context import CLIContext, OutputFormat
from ._graph import graph_command
from ._list import list_command
from ._shared import (
    ExitCode,
    FormattableData,
    exit_with_error,
    format_json,
    format_table,
    format_yaml,
    get_error_console,
    load_document,
)
from ._validate import validate_command

if TYPE_CHECKING:
    from cyclopts import App

__all__ = [
    "CLIContext",
    "ExitCode",
    "FormattableData",
    "OutputFormat",
    "check_command",
    "exit_with_error",
    "format_json",
    "format_table",
    "format_yaml",
    "get_error_console",
    "graph_command",
    "list_command",
    "load_document",
    "register_commands",
    "validate_command",
]


def register_commands(app: "App") -> None:
    app.command(validate_command, name="validate")
    app.command(check_command, name="check")
    app.command(graph_command, name="graph")
    app.command(list_command, name="list")
