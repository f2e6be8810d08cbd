# pyright: reportUnusedFunction=false
# ruff: noqa: TC003, A002
"""List command: hierarchical display of requirements."""

from pathlib import Path
from typing import Annotated

from cyclopts import Parameter

from rqm.engine import analyze_document

from ._context import CLIContext, OutputFormat
from ._formatters import TABLE_HEADERS, format_requirement_rows, format_tree_text
from ._shared import (
    ExitCode,
    exit_with_error,
    format_json,
    format_table,
    format_yaml,
    get_command_logger,
    load_document,
)

SUPPORTED_FORMATS = (
    OutputFormat.TREE,
    OutputFormat.TABLE,
    OutputFormat.JSON,
    OutputFormat.YAML,
)


def list_command(
    file: Path,
    /,
    *,
    format: Annotated[
        OutputFormat,
        Parameter(
            name=["--format", "-f"], help="Output format (tree, table, json, yaml)"
        ),
    ] = OutputFormat.TREE,
    details: Annotated[
        bool,
        Parameter(name="--details", help="Show owner, description and tags"),
    ] = False,
    max_depth: Annotated[
        int | None,
        Parameter(name="--max-depth", help="Limit the displayed nesting depth"),
    ] = None,
) -> None:
    """List requirements in a hierarchical view

    Args:
        file: Path to the requirements YAML file.
        format: Output format (tree, table, json, yaml).
        details: Show owner, description and tags beneath each requirement.
        max_depth: Deepest level to display; unlimited by default.
    """
    if format not in SUPPORTED_FORMATS:
        exit_with_error(f"Unsupported format for list: {format}")
    if max_depth is not None and max_depth < 0:
        exit_with_error("--max-depth must be zero or greater")

    ctx = CLIContext.get_current()
    logger = get_command_logger(ctx, "list")

    document = load_document(file)
    report = analyze_document(
        document, config=ctx.config.validation, max_depth=max_depth, logger=logger
    )
    logger.info("list_completed", file=str(file), top_level=len(report.tree))

    match format:
        case OutputFormat.TABLE:
            print(format_table(TABLE_HEADERS, format_requirement_rows(report)))
        case OutputFormat.JSON:
            print(format_json(report.to_dict()))
        case OutputFormat.YAML:
            print(format_yaml(report.to_dict()))
        case _:
            print(format_tree_text(report, details=details))

    raise SystemExit(ExitCode.SUCCESS)
