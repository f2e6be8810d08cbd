# pyright: reportUnusedFunction=false
# ruff: noqa: TC003, A002  # Path needed at runtime for cyclopts parameter parsing
"""Validate command: structural validation of a requirement document."""

from pathlib import Path
from typing import Annotated

from cyclopts import Parameter

from rqm.config import OwnerPolicy
from rqm.engine import validate_document

from ._context import CLIContext, OutputFormat
from ._formatters import format_validation_text
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


def validate_command(
    file: Path,
    /,
    *,
    format: Annotated[
        OutputFormat,
        Parameter(name=["--format", "-f"], help="Output format (text, json, yaml)"),
    ] = OutputFormat.TEXT,
    owner_policy: Annotated[
        OwnerPolicy | None,
        Parameter(
            name="--owner-policy",
            help="Severity of unresolved owners (error, warning, ignore)",
        ),
    ] = None,
    strict: Annotated[
        bool,
        Parameter(name="--strict", help="Treat unknown fields as errors"),
    ] = False,
) -> None:
    """Validate a requirements file

    Checks the YAML syntax, the document schema, identity uniqueness within
    every scope and owner references. Exits with 1 when errors are found.

    Args:
        file: Path to the requirements YAML file.
        format: Output format (text, json, yaml).
        owner_policy: Override the configured unresolved-owner policy.
        strict: Report unknown fields as errors.
    """
    if format not in SUPPORTED_FORMATS:
        exit_with_error(f"Unsupported format for validate: {format}")

    ctx = CLIContext.get_current()
    logger = get_command_logger(ctx, "validate")

    updates: dict[str, object] = {}
    if owner_policy is not None:
        updates["owner_policy"] = owner_policy
    if strict:
        updates["strict_schema"] = True
    settings = ctx.config.validation.model_copy(update=updates)

    document = load_document(file)
    result = validate_document(document, config=settings, logger=logger)
    logger.info(
        "validate_completed",
        file=str(file),
        valid=result.valid,
        errors=len(result.errors),
        warnings=len(result.warnings),
    )

    if format == OutputFormat.TEXT:
        print(format_validation_text(str(file), result, quiet=ctx.quiet))
    else:
        data: FormattableData = {
            "file": str(file),
            **result.to_dict(include_diagnostics=True),
        }
        print(format_json(data) if format == OutputFormat.JSON else format_yaml(data))

    if not result.valid:
        raise SystemExit(ExitCode.FAILED)
    raise SystemExit(ExitCode.SUCCESS)
