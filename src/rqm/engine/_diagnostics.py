"""Diagnostic records collected during validation.

Diagnostics are plain data, not exceptions. Every stage of the engine
appends to a list of diagnostics and keeps going, so a single pass reports
everything wrong with a document.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class Severity(StrEnum):
    """Diagnostic severity."""

    ERROR = "error"
    WARNING = "warning"


class DiagnosticKind(StrEnum):
    """Diagnostic categories."""

    DUPLICATE_IDENTITY = "duplicate_identity"
    SCHEMA_VIOLATION = "schema_violation"
    UNRESOLVED_OWNER = "unresolved_owner"
    DANGLING_REFERENCE = "dangling_reference"
    CYCLE_DETECTED = "cycle_detected"


ROOT_SCOPE = "requirements"
"""Scope path of the top-level requirement list."""

ALIAS_SCOPE = "aliases"
"""Scope path of the alias table."""


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A single finding about a requirement document.

    Attributes:
        kind: Diagnostic category.
        severity: Whether this is an error or a warning.
        message: Human-readable, self-contained description.
        path: Dotted document path of the offending element, if any.
        scope: Sibling scope path for duplicate identities.
        key: Identity key or reference involved, if any.
        value: The offending raw value, if any.
    """

    kind: DiagnosticKind
    severity: Severity
    message: str
    path: str | None = None
    scope: str | None = None
    key: str | None = None
    value: Any = None  # pyright: ignore[reportExplicitAny]

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def with_severity(self, severity: Severity) -> "Diagnostic":
        """Return a copy of this diagnostic with a different severity."""
        return Diagnostic(
            kind=self.kind,
            severity=severity,
            message=self.message,
            path=self.path,
            scope=self.scope,
            key=self.key,
            value=self.value,
        )


def describe_scope(scope: str, parent_key: str | None) -> str:
    """Return a readable label for a sibling scope."""
    if scope == ALIAS_SCOPE:
        return "the alias table"
    if parent_key is None:
        return "the top level"
    return f"children of '{parent_key}' ({scope})"


def duplicate_identity(
    scope: str,
    key: str,
    *,
    parent_key: str | None = None,
    path: str | None = None,
    count: int = 2,
) -> Diagnostic:
    """Build a DuplicateIdentity error for a key repeated within a scope."""
    return Diagnostic(
        kind=DiagnosticKind.DUPLICATE_IDENTITY,
        severity=Severity.ERROR,
        message=(
            f"Duplicate identity '{key}' in {describe_scope(scope, parent_key)}: "
            f"appears {count} times"
        ),
        path=path,
        scope=scope,
        key=key,
    )


def schema_violation(
    path: str,
    message: str,
    *,
    value: Any = None,  # pyright: ignore[reportExplicitAny]
    severity: Severity = Severity.ERROR,
) -> Diagnostic:
    """Build a SchemaViolation for a field that is missing or misshapen."""
    return Diagnostic(
        kind=DiagnosticKind.SCHEMA_VIOLATION,
        severity=severity,
        message=f"Schema violation at {path}: {message}",
        path=path,
        value=value,
    )


def unresolved_owner(
    value: str,
    *,
    path: str | None = None,
    severity: Severity = Severity.ERROR,
) -> Diagnostic:
    """Build an UnresolvedOwner diagnostic."""
    location = f" at {path}" if path else ""
    return Diagnostic(
        kind=DiagnosticKind.UNRESOLVED_OWNER,
        severity=severity,
        message=(
            f"Invalid owner reference{location}: '{value}' is not a valid email, "
            "GitHub username, or defined alias"
        ),
        path=path,
        key=value,
        value=value,
    )


def dangling_reference(
    key: str,
    *,
    path: str | None = None,
    source_key: str | None = None,
    severity: Severity = Severity.WARNING,
) -> Diagnostic:
    """Build a DanglingReference diagnostic for a reference matching nothing."""
    origin = f" from '{source_key}'" if source_key is not None else ""
    location = f" at {path}" if path else ""
    return Diagnostic(
        kind=DiagnosticKind.DANGLING_REFERENCE,
        severity=severity,
        message=(
            f"Dangling reference{location}: '{key}'{origin} does not match "
            "any requirement name or summary"
        ),
        path=path,
        key=key,
    )


def cycle_detected(cycle: tuple[str, ...]) -> Diagnostic:
    """Build a CycleDetected warning describing one cycle as an arrow path."""
    arrow_path = " → ".join((*cycle, cycle[0]))
    return Diagnostic(
        kind=DiagnosticKind.CYCLE_DETECTED,
        severity=Severity.WARNING,
        message=f"Circular reference detected: {arrow_path}",
        key=cycle[0],
        value=cycle,
    )
