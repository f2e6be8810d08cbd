# pyright: reportExplicitAny=false
"""Shared CLI utilities for commands.

- Standardized exit codes
- Generic output formatters (JSON, YAML, table)
- Document loading with consistent error reporting
"""

from enum import IntEnum
from typing import TYPE_CHECKING, Any, Never

from rich.markup import escape

from rqm.exceptions import ParseError

if TYPE_CHECKING:
    from pathlib import Path

    from rich.console import Console
    from structlog.typing import FilteringBoundLogger

    from rqm.engine import RequirementDocument

    from ._context import CLIContext

FormattableData = dict[str, Any]

__all__ = [
    "ExitCode",
    "FormattableData",
    "exit_with_error",
    "format_json",
    "format_table",
    "format_yaml",
    "get_command_logger",
    "get_error_console",
    "load_document",
]


class ExitCode(IntEnum):
    """Exit codes for RQM CLI commands."""

    SUCCESS = 0
    FAILED = 1
    """Validation errors or cycles were found."""
    LOAD_ERROR = 2
    """The file could not be read or parsed."""


def format_json(data: FormattableData, *, indent: bool = True) -> str:
    """Format data as JSON.

    Args:
        data: Dictionary to format as JSON.
        indent: Whether to pretty-print with indentation.

    Raises:
        SystemExit: With ``LOAD_ERROR`` when the data is nested deeper than
            the encoder accepts.
    """
    import orjson

    options = orjson.OPT_INDENT_2 if indent else 0
    try:
        return orjson.dumps(data, option=options).decode("utf-8")
    except orjson.JSONEncodeError as e:
        exit_with_error(f"Cannot render output as JSON: {e}")


def format_yaml(data: FormattableData) -> str:
    """Format data as YAML, keeping key order."""
    import yaml

    try:
        return yaml.safe_dump(
            data, default_flow_style=False, allow_unicode=True, sort_keys=False
        )
    except RecursionError:
        exit_with_error("Cannot render output as YAML: nesting is too deep")


def format_table(headers: list[str], rows: list[list[str]]) -> str:
    """Format rows as a Markdown table."""
    from pytablewriter import MarkdownTableWriter

    writer = MarkdownTableWriter(
        headers=headers,
        value_matrix=rows,
        margin=1,
    )
    return writer.dumps()


def get_error_console() -> "Console":
    """Get a Rich console writing to stderr."""
    from rich.console import Console

    return Console(stderr=True)


def exit_with_error(
    message: str,
    code: ExitCode = ExitCode.LOAD_ERROR,
    *,
    console: "Console | None" = None,
) -> Never:
    """Print an error message to stderr and exit with the given code.

    Raises:
        SystemExit: Always raised with the specified exit code.
    """
    if console is None:
        console = get_error_console()

    console.print(f"[red]Error:[/red] {escape(message)}")
    raise SystemExit(code)


def _describe_parse_error(path: "Path", error: ParseError) -> str:
    location = str(path)
    if error.line is not None:
        location = f"{location}:{error.line}"
        if error.column is not None:
            location = f"{location}:{error.column}"
    return f"{location}: {error.describe()}"


def load_document(path: "Path") -> "RequirementDocument":
    """Read and parse a requirement document, exiting on failure.

    Returns:
        The parsed document.

    Raises:
        SystemExit: With ExitCode.LOAD_ERROR if the file cannot be read or
            parsed.
    """
    from rqm.engine import parse_document

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        exit_with_error(f"File does not exist: {path}")
    except (OSError, UnicodeDecodeError) as e:
        exit_with_error(f"Failed to read {path}: {e}")

    try:
        return parse_document(text)
    except ParseError as e:
        exit_with_error(_describe_parse_error(path, e))


def get_command_logger(ctx: "CLIContext", command: str) -> "FilteringBoundLogger":
    """Return the context logger bound to a command name.

    Falls back to a discarding logger when the CLI was invoked without the
    global launcher, as in tests.
    """
    from rqm.utils import create_null_logger

    logger = ctx.logger if ctx.logger is not None else create_null_logger()
    return logger.bind(command=command)
