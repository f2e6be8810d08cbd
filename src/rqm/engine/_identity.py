"""Identity resolution for requirement documents.

Walks a parsed document once and builds an index from identity keys to the
inline requirements that define them. Per sibling scope, the ordered list of
keys seen is recorded so that duplicate detection can run as a separate,
non-failing step.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import assert_never

from ._diagnostics import ROOT_SCOPE
from ._models import (
    InlineReference,
    NamedReference,
    RequirementDocument,
    RequirementNode,
    RequirementReference,
)
from ._parser import CHILDREN_KEY

__all__ = [
    "IdentityIndex",
    "IndexedNode",
    "NamedUse",
    "ScopeEntry",
    "ScopeRecord",
    "resolve_identities",
]


@dataclass(frozen=True, slots=True)
class IndexedNode:
    """An inline requirement together with its position in the document.

    Attributes:
        key: Identity key of the requirement.
        node: The requirement itself.
        path: Dotted document path (e.g. "requirements[0].requirements[2]").
        parent_key: Identity key of the enclosing requirement, None at the top.
        depth: Nesting depth, 0 for top-level requirements.
        scope: Path of the sibling list the requirement belongs to.
    """

    key: str
    node: RequirementNode
    path: str
    parent_key: str | None
    depth: int
    scope: str


@dataclass(frozen=True, slots=True)
class NamedUse:
    """An occurrence of a named reference in a requirement list."""

    target: str
    path: str
    parent_key: str | None


@dataclass(frozen=True, slots=True)
class ScopeEntry:
    """One key seen in a sibling scope."""

    key: str
    path: str
    inline: bool


@dataclass(frozen=True, slots=True)
class ScopeRecord:
    """The ordered keys of one sibling scope.

    Attributes:
        scope: Path of the sibling list (e.g. "requirements[0].requirements").
        parent_key: Identity key of the owning requirement, None at the top.
        entries: Keys in declaration order, inline and named alike.
    """

    scope: str
    parent_key: str | None
    entries: tuple[ScopeEntry, ...]

    @property
    def keys(self) -> tuple[str, ...]:
        return tuple(entry.key for entry in self.entries)

    def duplicates(self) -> dict[str, list[ScopeEntry]]:
        """Group entries whose key occurs more than once, in first-seen order."""
        groups: dict[str, list[ScopeEntry]] = {}
        for entry in self.entries:
            groups.setdefault(entry.key, []).append(entry)
        return {key: group for key, group in groups.items() if len(group) > 1}


@dataclass(frozen=True, slots=True)
class IdentityIndex:
    """Lookup structure from identity keys to requirement definitions.

    The first inline definition of a key wins. Later definitions with the
    same key are still listed in ``entries`` so that every node is visited,
    and they are reported through ``scopes`` when they collide.

    Attributes:
        entries: Every inline requirement in document pre-order.
        scopes: Every non-empty sibling scope in document pre-order.
        references: Every named reference in document pre-order.
    """

    entries: tuple[IndexedNode, ...]
    scopes: tuple[ScopeRecord, ...]
    references: tuple[NamedUse, ...]
    by_key: Mapping[str, IndexedNode]
    by_summary: Mapping[str, str]

    def __contains__(self, key: object) -> bool:
        return key in self.by_key

    def __len__(self) -> int:
        return len(self.by_key)

    def __iter__(self) -> Iterator[str]:
        return iter(self.by_key)

    def get(self, key: str) -> IndexedNode | None:
        """Get the defining entry for an identity key."""
        return self.by_key.get(key)

    def resolve(self, reference: str) -> str | None:
        """Resolve a reference string to an identity key.

        Identity keys are matched first, then summaries.

        Args:
            reference: A name or summary used in a reference or dependency.

        Returns:
            The identity key of the referenced requirement, or None when the
            reference matches nothing.
        """
        if reference in self.by_key:
            return reference
        return self.by_summary.get(reference)


def _scope_record(
    refs: tuple[RequirementReference, ...],
    scope: str,
    parent_key: str | None,
) -> ScopeRecord:
    entries: list[ScopeEntry] = []
    for i, ref in enumerate(refs):
        if isinstance(ref, InlineReference):
            entries.append(ScopeEntry(ref.key, f"{scope}[{i}]", inline=True))
        elif isinstance(ref, NamedReference):
            entries.append(ScopeEntry(ref.key, f"{scope}[{i}]", inline=False))
        else:
            assert_never(ref)
    return ScopeRecord(scope=scope, parent_key=parent_key, entries=tuple(entries))


def resolve_identities(document: RequirementDocument) -> IdentityIndex:
    """Build the identity index for a document.

    Never raises: duplicate keys are recorded, not rejected.

    Args:
        document: The parsed document.

    Returns:
        The identity index.
    """
    entries: list[IndexedNode] = []
    scopes: list[ScopeRecord] = []
    references: list[NamedUse] = []
    by_key: dict[str, IndexedNode] = {}
    by_summary: dict[str, str] = {}

    if document.requirements:
        scopes.append(_scope_record(document.requirements, ROOT_SCOPE, None))

    stack: list[tuple[RequirementReference, str, str | None, int, str]] = [
        (ref, f"{ROOT_SCOPE}[{i}]", None, 0, ROOT_SCOPE)
        for i, ref in reversed(list(enumerate(document.requirements)))
    ]
    while stack:
        ref, path, parent_key, depth, scope = stack.pop()

        if isinstance(ref, NamedReference):
            references.append(NamedUse(ref.target, path, parent_key))
            continue
        if not isinstance(ref, InlineReference):
            assert_never(ref)

        node = ref.node
        entry = IndexedNode(
            key=node.key,
            node=node,
            path=path,
            parent_key=parent_key,
            depth=depth,
            scope=scope,
        )
        entries.append(entry)
        _ = by_key.setdefault(entry.key, entry)
        _ = by_summary.setdefault(node.summary, entry.key)

        if node.children:
            child_scope = f"{path}.{CHILDREN_KEY}"
            scopes.append(_scope_record(node.children, child_scope, entry.key))
            stack.extend(
                (child, f"{child_scope}[{i}]", entry.key, depth + 1, child_scope)
                for i, child in reversed(list(enumerate(node.children)))
            )

    return IdentityIndex(
        entries=tuple(entries),
        scopes=tuple(scopes),
        references=tuple(references),
        by_key=MappingProxyType(by_key),
        by_summary=MappingProxyType(by_summary),
    )
