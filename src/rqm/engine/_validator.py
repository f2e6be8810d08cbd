"""Structural validation of requirement documents.

Every check appends diagnostics and keeps going; nothing here raises for a
parseable document. The checks run in a fixed order: schema conformance,
identity uniqueness (alias table, then requirement scopes), owner
resolution, and reference resolution.
"""

from typing import TYPE_CHECKING

from rqm.config import DanglingPolicy, OwnerPolicy, ValidationConfig

from ._diagnostics import (
    ALIAS_SCOPE,
    Diagnostic,
    Severity,
    dangling_reference,
    duplicate_identity,
    unresolved_owner,
)
from ._owners import OwnerResolver
from ._schema import validate_schema

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from ._identity import IdentityIndex
    from ._models import RequirementDocument

__all__ = [
    "check_owners",
    "collect_diagnostics",
    "find_dangling_references",
    "find_duplicate_aliases",
    "find_duplicate_identities",
]


def find_duplicate_identities(index: "IdentityIndex") -> list[Diagnostic]:
    """Report each key that occurs more than once within one sibling scope.

    The reported path is that of the second occurrence.
    """
    diagnostics: list[Diagnostic] = []
    for record in index.scopes:
        for key, entries in record.duplicates().items():
            diagnostics.append(
                duplicate_identity(
                    record.scope,
                    key,
                    parent_key=record.parent_key,
                    path=entries[1].path,
                    count=len(entries),
                )
            )
    return diagnostics


def find_duplicate_aliases(document: "RequirementDocument") -> list[Diagnostic]:
    """Report each alias value defined more than once."""
    positions: dict[str, list[int]] = {}
    for i, alias in enumerate(document.aliases):
        positions.setdefault(alias.alias, []).append(i)

    return [
        duplicate_identity(
            ALIAS_SCOPE,
            alias,
            path=f"{ALIAS_SCOPE}[{seen[1]}]",
            count=len(seen),
        )
        for alias, seen in positions.items()
        if len(seen) > 1
    ]


def check_owners(
    index: "IdentityIndex",
    resolver: OwnerResolver,
    policy: OwnerPolicy = OwnerPolicy.ERROR,
) -> list[Diagnostic]:
    """Report owners that are not an alias, an email or a GitHub handle.

    Args:
        index: The identity index; every inline requirement is checked.
        resolver: Resolver bound to the document's alias table.
        policy: Severity for unresolved owners, or IGNORE to skip the check.
    """
    if policy == OwnerPolicy.IGNORE:
        return []
    severity = Severity.ERROR if policy == OwnerPolicy.ERROR else Severity.WARNING

    diagnostics: list[Diagnostic] = []
    for entry in index.entries:
        owner = entry.node.owner
        if owner is None or resolver.resolve(owner).resolved:
            continue
        diagnostics.append(
            unresolved_owner(owner, path=f"{entry.path}.owner", severity=severity)
        )
    return diagnostics


def find_dangling_references(
    index: "IdentityIndex",
    policy: DanglingPolicy = DanglingPolicy.WARNING,
) -> list[Diagnostic]:
    """Report named references and dependencies that match no requirement.

    Named references are reported first, then dependencies, each in
    document order.
    """
    if policy == DanglingPolicy.IGNORE:
        return []
    severity = Severity.ERROR if policy == DanglingPolicy.ERROR else Severity.WARNING

    diagnostics: list[Diagnostic] = [
        dangling_reference(
            use.target,
            path=use.path,
            source_key=use.parent_key,
            severity=severity,
        )
        for use in index.references
        if index.resolve(use.target) is None
    ]
    for entry in index.entries:
        for i, dependency in enumerate(entry.node.dependencies):
            if index.resolve(dependency) is None:
                diagnostics.append(
                    dangling_reference(
                        dependency,
                        path=f"{entry.path}.dependencies[{i}]",
                        source_key=entry.key,
                        severity=severity,
                    )
                )
    return diagnostics


def collect_diagnostics(
    document: "RequirementDocument",
    index: "IdentityIndex",
    *,
    config: ValidationConfig | None = None,
    logger: "FilteringBoundLogger | None" = None,
) -> list[Diagnostic]:
    """Run every structural check and gather the complete diagnostic set.

    Args:
        document: The parsed document.
        index: Identity index built from the same document.
        config: Validation policies; defaults apply when omitted.
        logger: Optional logger for per-check debug events.

    Returns:
        All diagnostics, errors and warnings mixed, in check order.
    """
    settings = config if config is not None else ValidationConfig()

    schema = validate_schema(document, strict=settings.strict_schema)
    duplicates = find_duplicate_aliases(document) + find_duplicate_identities(index)
    owners = check_owners(
        index, OwnerResolver.for_document(document), settings.owner_policy
    )
    dangling = find_dangling_references(index, settings.dangling_policy)

    if logger is not None:
        for diagnostic in owners:
            logger.debug("owner_unresolved", owner=diagnostic.key, path=diagnostic.path)
        for diagnostic in dangling:
            logger.debug(
                "reference_dangling", reference=diagnostic.key, path=diagnostic.path
            )
        logger.debug(
            "document_validated",
            schema_violations=len(schema),
            duplicate_identities=len(duplicates),
            unresolved_owners=len(owners),
            dangling_references=len(dangling),
        )

    return schema + duplicates + owners + dangling
