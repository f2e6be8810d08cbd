"""Data models for requirement documents.

This module defines the enums and frozen dataclasses that make up a parsed
requirement document. Models are faithful to the raw input: optional fields
stay ``None`` when absent and defaults (priority, status) are applied only
when results are assembled.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any, assert_never

# =============================================================================
# Enums
# =============================================================================


class Priority(StrEnum):
    """Requirement priority levels, highest first."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class Status(StrEnum):
    """Requirement lifecycle status values.

    Tracks the progression of a requirement from first draft through
    implementation, verification and eventual deprecation.
    """

    DRAFT = "draft"
    PROPOSED = "proposed"
    APPROVED = "approved"
    IMPLEMENTED = "implemented"
    VERIFIED = "verified"
    DEPRECATED = "deprecated"


DEFAULT_PRIORITY: Priority = Priority.MEDIUM
DEFAULT_STATUS: Status = Status.DRAFT


class EdgeKind(StrEnum):
    """Kinds of edges in the derived requirement graph."""

    CHILD = "child"
    DEPENDENCY = "dependency"


# =============================================================================
# Value Objects
# =============================================================================


@dataclass(frozen=True, slots=True)
class PersonAlias:
    """Person alias used to resolve requirement owners.

    Attributes:
        alias: Short alias identifier referenced by ``owner`` fields.
        name: Full name of the person.
        email: Email address.
        github: GitHub username.
    """

    alias: str
    name: str = ""
    email: str | None = None
    github: str | None = None


@dataclass(frozen=True, slots=True)
class RequirementNode:
    """A single requirement.

    ``priority`` and ``status`` hold the enum member when the raw value is
    one of the known values and the raw string otherwise, so that a bad
    value can be reported rather than silently dropped.

    Attributes:
        summary: Human-readable summary; identity fallback.
        name: Stable identifier (e.g. "RQM-001"); preferred identity key.
        description: Detailed description.
        justification: Rationale for the requirement.
        acceptance_test: Acceptance criteria text.
        acceptance_test_link: URL to acceptance test documentation.
        owner: Raw owner reference (email, @handle or alias).
        priority: Priority level, if given.
        status: Lifecycle status, if given.
        created_at: Creation timestamp, if given.
        updated_at: Last update timestamp, if given.
        tags: Tags for categorization.
        further_information: Additional notes or links.
        dependencies: Identity keys of requirements this one depends on.
        children: Nested requirement references, in declaration order.
    """

    summary: str
    name: str | None = None
    description: str | None = None
    justification: str | None = None
    acceptance_test: str | None = None
    acceptance_test_link: str | None = None
    owner: str | None = None
    priority: Priority | str | None = None
    status: Status | str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    tags: tuple[str, ...] = ()
    further_information: tuple[str, ...] = ()
    dependencies: tuple[str, ...] = ()
    children: "tuple[RequirementReference, ...]" = ()

    @property
    def key(self) -> str:
        """Identity key: ``name`` when set, otherwise ``summary``."""
        return self.name if self.name else self.summary


@dataclass(frozen=True, slots=True)
class InlineReference:
    """A child requirement fully defined at its point of use."""

    node: RequirementNode

    @property
    def key(self) -> str:
        return self.node.key


@dataclass(frozen=True, slots=True)
class NamedReference:
    """A reference by identity key to a requirement defined elsewhere."""

    target: str

    @property
    def key(self) -> str:
        return self.target


type RequirementReference = InlineReference | NamedReference


@dataclass(frozen=True, slots=True)
class RequirementDocument:
    """A parsed requirement document.

    Attributes:
        version: Schema version string.
        aliases: Person aliases used for owner resolution.
        requirements: Top-level requirement references.
        further_information: Document-level notes, if given.
        source: The raw parsed mapping, kept for schema validation.
    """

    version: str
    aliases: tuple[PersonAlias, ...] = ()
    requirements: tuple[RequirementReference, ...] = ()
    further_information: tuple[str, ...] | None = None
    source: Mapping[str, Any] = field(  # pyright: ignore[reportExplicitAny]
        default_factory=lambda: MappingProxyType({}),
        repr=False,
        compare=False,
    )

    def alias_map(self) -> dict[str, PersonAlias]:
        """Map alias values to their definitions; the first definition wins."""
        result: dict[str, PersonAlias] = {}
        for alias in self.aliases:
            _ = result.setdefault(alias.alias, alias)
        return result

    def iter_nodes(self) -> Iterator[RequirementNode]:
        """Yield every inline requirement in document pre-order."""
        stack: list[RequirementReference] = list(reversed(self.requirements))
        while stack:
            ref = stack.pop()
            if isinstance(ref, InlineReference):
                yield ref.node
                stack.extend(reversed(ref.node.children))
            elif isinstance(ref, NamedReference):
                continue
            else:
                assert_never(ref)
