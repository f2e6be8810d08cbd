# pyright: reportUnusedFunction=false
# ruff: noqa: TC003, A002
"""Check command: circular reference detection."""

from pathlib import Path
from typing import Annotated

from cyclopts import Parameter

from rqm.engine import check_document_cycles

from ._context import CLIContext, OutputFormat
from ._formatters import format_cycles_text
from ._shared import (
    ExitCode,
    exit_with_error,
    format_json,
    format_yaml,
    get_command_logger,
    load_document,
)

SUPPORTED_FORMATS = (OutputFormat.TEXT, OutputFormat.JSON, OutputFormat.YAML)


def check_command(
    file: Path,
    /,
    *,
    format: Annotated[
        OutputFormat,
        Parameter(name=["--format", "-f"], help="Output format (text, json, yaml)"),
    ] = OutputFormat.TEXT,
) -> None:
    """Check a requirements file for circular references

    Child links and dependencies are followed together. Each cycle is
    printed as an arrow path. Exits with 1 when any cycle is found.

    Args:
        file: Path to the requirements YAML file.
        format: Output format (text, json, yaml).
    """
    if format not in SUPPORTED_FORMATS:
        exit_with_error(f"Unsupported format for check: {format}")

    ctx = CLIContext.get_current()
    logger = get_command_logger(ctx, "check")

    document = load_document(file)
    result = check_document_cycles(
        document, config=ctx.config.validation, logger=logger
    )
    logger.info(
        "check_completed",
        file=str(file),
        has_cycles=result.has_cycles,
        cycles=len(result.cycles),
    )

    if format == OutputFormat.JSON:
        print(format_json({"file": str(file), **result.to_dict()}))
    elif format == OutputFormat.YAML:
        print(format_yaml({"file": str(file), **result.to_dict()}))
    else:
        print(format_cycles_text(str(file), result))

    if result.has_cycles:
        raise SystemExit(ExitCode.FAILED)
    raise SystemExit(ExitCode.SUCCESS)
