# pyright: reportAny=false, reportExplicitAny=false, reportUnknownArgumentType=false, reportUnknownVariableType=false
"""Schema validation for raw requirement documents using Pydantic.

Each mapping in the document is validated against a flat schema on its own,
and nested ``requirements`` lists are walked with an explicit stack. Pydantic
errors are converted into ``SchemaViolation`` diagnostics whose paths are
relative to the document root (e.g. ``requirements[0].requirements[1].priority``).

Unknown keys are reported as warnings unless strict mode is enabled, in which
case they are errors.
"""

from collections.abc import Mapping
from datetime import date
from typing import TYPE_CHECKING, Any, ClassVar

from pydantic import BaseModel, ConfigDict, ValidationError

from ._diagnostics import Diagnostic, Severity, schema_violation
from ._models import Priority, Status
from ._parser import CHILDREN_KEY

if TYPE_CHECKING:
    from pydantic_core import ErrorDetails

    from ._models import RequirementDocument

__all__ = [
    "AliasSchema",
    "DocumentSchema",
    "RequirementSchema",
    "get_document_schema",
    "validate_schema",
]


# -----------------------------------------------------------------------------
# Pydantic Schemas
# -----------------------------------------------------------------------------


class AliasSchema(BaseModel):
    """Schema for one entry of the alias table."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="forbid")

    alias: str
    name: str
    email: str | None = None
    github: str | None = None


class RequirementSchema(BaseModel):
    """Schema for a single requirement mapping.

    ``requirements`` is deliberately shallow here: nested entries are checked
    one mapping at a time by ``validate_schema``.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="forbid")

    summary: str
    name: str | None = None
    description: str | None = None
    justification: str | None = None
    acceptance_test: str | None = None
    acceptance_test_link: str | None = None
    owner: str | None = None
    priority: Priority | None = None
    status: Status | None = None
    created_at: str | date | None = None
    updated_at: str | date | None = None
    tags: list[str] = []
    further_information: list[str] = []
    dependencies: list[str] = []
    requirements: list[Any] = []


class DocumentSchema(BaseModel):
    """Schema for the top level of a requirement document."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="forbid")

    version: str
    aliases: list[AliasSchema] = []
    requirements: list[Any]
    further_information: list[str] | None = None


# -----------------------------------------------------------------------------
# Error Conversion
# -----------------------------------------------------------------------------


def _join_path(prefix: str, loc: tuple[int | str, ...]) -> str:
    """Append a Pydantic ``loc`` tuple to a dotted document path."""
    path = prefix
    for part in loc:
        if isinstance(part, int):
            path = f"{path}[{part}]"
        elif path:
            path = f"{path}.{part}"
        else:
            path = str(part)
    return path or "<document>"


def _error_to_diagnostic(
    error: "ErrorDetails",
    prefix: str,
    *,
    strict: bool,
) -> Diagnostic:
    """Convert a single Pydantic error into a schema violation."""
    path = _join_path(prefix, tuple(error.get("loc", ())))

    if error.get("type") == "extra_forbidden":
        severity = Severity.ERROR if strict else Severity.WARNING
        return schema_violation(
            path,
            "Unknown field",
            value=error.get("input"),
            severity=severity,
        )

    message = str(error.get("msg", "Validation error"))
    return schema_violation(path, message, value=error.get("input"))


def _check(
    schema: type[BaseModel],
    data: object,
    prefix: str,
    *,
    strict: bool,
) -> list[Diagnostic]:
    try:
        _ = schema.model_validate(data)
    except ValidationError as e:
        return [_error_to_diagnostic(err, prefix, strict=strict) for err in e.errors()]
    else:
        return []


# -----------------------------------------------------------------------------
# Validation
# -----------------------------------------------------------------------------


def validate_schema(
    document: "RequirementDocument",
    *,
    strict: bool = False,
) -> list[Diagnostic]:
    """Check every field of a document's raw source against the schema.

    Args:
        document: A parsed document; its ``source`` mapping is validated.
        strict: If True, unknown keys are errors instead of warnings.

    Returns:
        Schema violation diagnostics in document order. Empty when the
        document conforms.
    """
    source = document.source
    diagnostics = _check(DocumentSchema, source, "", strict=strict)

    top = source.get(CHILDREN_KEY)
    if not isinstance(top, list):
        return diagnostics

    stack: list[tuple[Mapping[str, Any], str]] = [
        (item, f"{CHILDREN_KEY}[{i}]")
        for i, item in reversed(list(enumerate(top)))
        if isinstance(item, Mapping)
    ]
    while stack:
        data, path = stack.pop()
        diagnostics.extend(_check(RequirementSchema, data, path, strict=strict))

        nested = data.get(CHILDREN_KEY)
        if isinstance(nested, list):
            stack.extend(
                (item, f"{path}.{CHILDREN_KEY}[{i}]")
                for i, item in reversed(list(enumerate(nested)))
                if isinstance(item, Mapping)
            )

    return diagnostics


def get_document_schema() -> dict[str, Any]:
    """Get the JSON Schema for the top level of a requirement document.

    Returns:
        JSON Schema dictionary. Requirement entries are described by
        ``RequirementSchema.model_json_schema()``.
    """
    return DocumentSchema.model_json_schema()
