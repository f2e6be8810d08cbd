# pyright: reportUnusedFunction=false
# ruff: noqa: TC003, A002
"""Graph command: adjacency listing of the requirement graph."""

from pathlib import Path
from typing import Annotated

from cyclopts import Parameter

from rqm.engine import analyze_document

from ._context import CLIContext, OutputFormat
from ._formatters import format_graph_text
from ._shared import (
    ExitCode,
    FormattableData,
    exit_with_error,
    format_json,
    format_yaml,
    get_command_logger,
    load_document,
)

SUPPORTED_FORMATS = (OutputFormat.TEXT, OutputFormat.JSON, OutputFormat.YAML)


def graph_command(
    file: Path,
    /,
    *,
    format: Annotated[
        OutputFormat,
        Parameter(name=["--format", "-f"], help="Output format (text, json, yaml)"),
    ] = OutputFormat.TEXT,
) -> None:
    """Show the requirements dependency graph

    Lists every node with its outgoing edges and warns when the graph
    contains cycles. Cycles do not change the exit code.

    Args:
        file: Path to the requirements YAML file.
        format: Output format (text, json, yaml).
    """
    if format not in SUPPORTED_FORMATS:
        exit_with_error(f"Unsupported format for graph: {format}")

    ctx = CLIContext.get_current()
    logger = get_command_logger(ctx, "graph")

    document = load_document(file)
    report = analyze_document(document, config=ctx.config.validation, logger=logger)
    logger.info(
        "graph_completed",
        file=str(file),
        nodes=len(report.nodes),
        edges=len(report.edges),
    )

    if format == OutputFormat.TEXT:
        print(format_graph_text(str(file), report.cycle_check))
        raise SystemExit(ExitCode.SUCCESS)

    data: FormattableData = {
        "file": str(file),
        "nodes": [node.to_dict() for node in report.nodes],
        "edges": [edge.to_dict() for edge in report.edges],
        "cycles": [list(cycle) for cycle in report.cycle_check.cycles],
    }
    print(format_json(data) if format == OutputFormat.JSON else format_yaml(data))
    raise SystemExit(ExitCode.SUCCESS)
