# pyright: reportExplicitAny=false
"""Result types and their assembly.

Assembly is a pure transformation of diagnostics and graph analysis into the
public result types. Priority and status defaults are applied here, never in
the data model.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, assert_never

from ._diagnostics import Diagnostic, DiagnosticKind, cycle_detected
from ._models import (
    DEFAULT_PRIORITY,
    DEFAULT_STATUS,
    InlineReference,
    NamedReference,
    Priority,
    Status,
)
from ._owners import OwnerResolution, OwnerResolver

if TYPE_CHECKING:
    from ._graph import CycleAnalysis, RequirementGraph
    from ._identity import IdentityIndex
    from ._models import RequirementDocument, RequirementNode, RequirementReference

__all__ = [
    "CycleCheckResult",
    "DocumentReport",
    "ReportEdge",
    "ReportNode",
    "TreeNode",
    "ValidationResult",
    "assemble_cycle_check",
    "assemble_report",
    "assemble_validation",
    "build_tree",
    "count_by_priority",
    "count_by_status",
    "effective_priority",
    "effective_status",
]


def _diagnostic_to_dict(diagnostic: Diagnostic) -> dict[str, Any]:
    result: dict[str, Any] = {
        "kind": str(diagnostic.kind),
        "severity": str(diagnostic.severity),
        "message": diagnostic.message,
    }
    for key, value in (
        ("path", diagnostic.path),
        ("scope", diagnostic.scope),
        ("key", diagnostic.key),
    ):
        if value is not None:
            result[key] = value
    return result


# =============================================================================
# Validation and Cycle Results
# =============================================================================


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of structural validation.

    Attributes:
        valid: True when there are no errors; warnings do not count.
        errors: Error messages in check order.
        warnings: Warning messages in check order.
        diagnostics: The underlying diagnostic records.
    """

    valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()

    def to_dict(self, *, include_diagnostics: bool = False) -> dict[str, Any]:
        result: dict[str, Any] = {
            "valid": self.valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
        }
        if include_diagnostics:
            result["diagnostics"] = [_diagnostic_to_dict(d) for d in self.diagnostics]
        return result


@dataclass(frozen=True, slots=True)
class CycleCheckResult:
    """Outcome of cycle analysis.

    Attributes:
        has_cycles: Whether any cycle was found.
        cycles: Each cycle as identity keys, starting from its back-edge target.
        graph: Successor keys per node, in node order.
        warnings: Messages for references that resolved to nothing.
        diagnostics: Cycle and dangling-reference diagnostic records.
    """

    has_cycles: bool
    cycles: tuple[tuple[str, ...], ...] = ()
    graph: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    warnings: tuple[str, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()

    def describe_cycles(self) -> list[str]:
        """Render each cycle as an arrow path (e.g. "A → B → A")."""
        return [" → ".join((*cycle, cycle[0])) for cycle in self.cycles]

    def to_dict(self) -> dict[str, Any]:
        return {
            "has_cycles": self.has_cycles,
            "cycles": [list(cycle) for cycle in self.cycles],
            "graph": {key: list(targets) for key, targets in self.graph.items()},
            "warnings": list(self.warnings),
        }


def assemble_validation(
    diagnostics: "list[Diagnostic] | tuple[Diagnostic, ...]",
) -> ValidationResult:
    """Split diagnostics into error and warning messages."""
    errors = tuple(d.message for d in diagnostics if d.is_error)
    warnings = tuple(d.message for d in diagnostics if not d.is_error)
    return ValidationResult(
        valid=not errors,
        errors=errors,
        warnings=warnings,
        diagnostics=tuple(diagnostics),
    )


def assemble_cycle_check(
    graph: "RequirementGraph",
    analysis: "CycleAnalysis",
    dangling: "list[Diagnostic] | tuple[Diagnostic, ...]" = (),
) -> CycleCheckResult:
    """Combine the graph and its cycle analysis into a CycleCheckResult."""
    cycles = tuple(cycle_detected(cycle) for cycle in analysis.cycles)
    return CycleCheckResult(
        has_cycles=analysis.has_cycles,
        cycles=analysis.cycles,
        graph=MappingProxyType({key: graph.adjacency[key] for key in graph.nodes}),
        warnings=tuple(d.message for d in dangling),
        diagnostics=cycles + tuple(dangling),
    )


# =============================================================================
# Display Tree
# =============================================================================


def effective_priority(node: "RequirementNode") -> Priority | str:
    """Return the node's priority, defaulting to medium."""
    return node.priority if node.priority is not None else DEFAULT_PRIORITY


def effective_status(node: "RequirementNode") -> Status | str:
    """Return the node's status, defaulting to draft."""
    return node.status if node.status is not None else DEFAULT_STATUS


@dataclass(frozen=True, slots=True)
class TreeNode:
    """One entry of the materialized display tree.

    Named references are leaves that show the referenced requirement's
    details when it resolves. They are never expanded, so the tree is
    finite even when the graph is cyclic.

    Attributes:
        key: Identity key (the raw reference for unresolved references).
        summary: Requirement summary, None for unresolved references.
        name: Requirement name, if any.
        priority: Effective priority.
        status: Effective status.
        owner: Owner resolution, if the requirement has an owner.
        depth: Nesting depth, 0 at the top level.
        reference: True for named references.
        resolved: False for references that matched nothing.
        truncated: True when children exist beyond the depth limit.
        in_cycle: True when the key lies on a detected cycle.
        children: Child entries in declaration order.
    """

    key: str
    summary: str | None
    name: str | None
    priority: Priority | str | None
    status: Status | str | None
    owner: OwnerResolution | None
    depth: int
    reference: bool = False
    resolved: bool = True
    truncated: bool = False
    in_cycle: bool = False
    children: "tuple[TreeNode, ...]" = ()

    def to_dict(self) -> dict[str, Any]:
        """Convert this subtree to plain data without recursion."""
        root = self._fields()
        stack: list[tuple[TreeNode, dict[str, Any]]] = [(self, root)]
        while stack:
            node, data = stack.pop()
            children: list[dict[str, Any]] = []
            data["children"] = children
            for child in node.children:
                child_data = child._fields()  # noqa: SLF001
                children.append(child_data)
                stack.append((child, child_data))
        return root

    def _fields(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "key": self.key,
            "summary": self.summary,
            "name": self.name,
            "priority": None if self.priority is None else str(self.priority),
            "status": None if self.status is None else str(self.status),
            "depth": self.depth,
            "reference": self.reference,
            "resolved": self.resolved,
            "truncated": self.truncated,
            "in_cycle": self.in_cycle,
        }
        if self.owner is not None:
            result["owner"] = {
                "value": self.owner.value,
                "kind": str(self.owner.kind),
                "display_name": self.owner.display_name,
            }
        return result


@dataclass(slots=True)
class _TreeFrame:
    ref: "RequirementReference"
    depth: int
    collector: list[TreeNode]
    children: list[TreeNode] = field(default_factory=list)
    expanded: bool = False


def build_tree(
    document: "RequirementDocument",
    index: "IdentityIndex",
    *,
    cycle_nodes: frozenset[str] = frozenset(),
    max_depth: int | None = None,
    resolver: OwnerResolver | None = None,
) -> tuple[TreeNode, ...]:
    """Materialize the document's inline structure as a display tree.

    Args:
        document: The parsed document.
        index: Identity index built from the same document.
        cycle_nodes: Keys to flag as lying on a cycle.
        max_depth: Deepest level to materialize; children below it are
            dropped and their parent is marked truncated. None is unlimited.
        resolver: Owner resolver; one bound to the document is created if
            omitted.

    Returns:
        Top-level tree entries in declaration order.
    """
    owners = resolver if resolver is not None else OwnerResolver.for_document(document)
    top: list[TreeNode] = []
    stack: list[_TreeFrame] = [
        _TreeFrame(ref, 0, top) for ref in reversed(document.requirements)
    ]

    while stack:
        frame = stack[-1]
        ref = frame.ref

        if isinstance(ref, NamedReference):
            _ = stack.pop()
            frame.collector.append(
                _reference_leaf(ref, frame.depth, index, owners, cycle_nodes)
            )
            continue
        if not isinstance(ref, InlineReference):
            assert_never(ref)

        node = ref.node
        can_expand = max_depth is None or frame.depth < max_depth
        if not frame.expanded and can_expand and node.children:
            frame.expanded = True
            stack.extend(
                _TreeFrame(child, frame.depth + 1, frame.children)
                for child in reversed(node.children)
            )
            continue

        _ = stack.pop()
        frame.collector.append(
            TreeNode(
                key=node.key,
                summary=node.summary,
                name=node.name,
                priority=effective_priority(node),
                status=effective_status(node),
                owner=None if node.owner is None else owners.resolve(node.owner),
                depth=frame.depth,
                truncated=bool(node.children) and not can_expand,
                in_cycle=node.key in cycle_nodes,
                children=tuple(frame.children),
            )
        )

    return tuple(top)


def _reference_leaf(
    ref: NamedReference,
    depth: int,
    index: "IdentityIndex",
    owners: OwnerResolver,
    cycle_nodes: frozenset[str],
) -> TreeNode:
    key = index.resolve(ref.target)
    entry = index.get(key) if key is not None else None
    if entry is None:
        return TreeNode(
            key=ref.target,
            summary=None,
            name=None,
            priority=None,
            status=None,
            owner=None,
            depth=depth,
            reference=True,
            resolved=False,
            in_cycle=ref.target in cycle_nodes,
        )

    node = entry.node
    return TreeNode(
        key=entry.key,
        summary=node.summary,
        name=node.name,
        priority=effective_priority(node),
        status=effective_status(node),
        owner=None if node.owner is None else owners.resolve(node.owner),
        depth=depth,
        reference=True,
        in_cycle=entry.key in cycle_nodes,
    )


# =============================================================================
# Full Report
# =============================================================================


def _count[E: (Priority, Status)](
    members: type[E],
    values: "list[E | str]",
) -> dict[str, int]:
    counts: dict[str, int] = {str(member): 0 for member in members}
    for value in values:
        counts[str(value)] = counts.get(str(value), 0) + 1
    return counts


def count_by_status(index: "IdentityIndex") -> dict[str, int]:
    """Count distinct requirements per effective status.

    Every status appears, with zero when unused. Unknown raw values are
    counted under their own text after the known ones.
    """
    values = [effective_status(index.by_key[key].node) for key in index.by_key]
    return _count(Status, values)


def count_by_priority(index: "IdentityIndex") -> dict[str, int]:
    """Count distinct requirements per effective priority."""
    values = [effective_priority(index.by_key[key].node) for key in index.by_key]
    return _count(Priority, values)


@dataclass(frozen=True, slots=True)
class ReportNode:
    """A graph node as shown to visualization consumers."""

    key: str
    summary: str | None
    dangling: bool
    in_cycle: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "summary": self.summary,
            "dangling": self.dangling,
            "in_cycle": self.in_cycle,
        }


@dataclass(frozen=True, slots=True)
class ReportEdge:
    """A graph edge as shown to visualization consumers."""

    source: str
    target: str
    kinds: tuple[str, ...]
    in_cycle: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source,
            "target": self.target,
            "kinds": list(self.kinds),
            "in_cycle": self.in_cycle,
        }


@dataclass(frozen=True, slots=True)
class DocumentReport:
    """Everything known about a document after a full analysis.

    Attributes:
        document: The parsed document.
        tree: Materialized display tree.
        nodes: Graph nodes in node order.
        edges: Graph edges, flagged when they lie on a cycle.
        validation: Structural validation result.
        cycle_check: Cycle analysis result.
        status_counts: Requirements per effective status.
        priority_counts: Requirements per effective priority.
    """

    document: "RequirementDocument"
    tree: tuple[TreeNode, ...]
    nodes: tuple[ReportNode, ...]
    edges: tuple[ReportEdge, ...]
    validation: ValidationResult
    cycle_check: CycleCheckResult
    status_counts: Mapping[str, int]
    priority_counts: Mapping[str, int]

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.document.version,
            "validation": self.validation.to_dict(include_diagnostics=True),
            "cycles": self.cycle_check.to_dict(),
            "tree": [node.to_dict() for node in self.tree],
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": [edge.to_dict() for edge in self.edges],
            "counts": {
                "status": dict(self.status_counts),
                "priority": dict(self.priority_counts),
            },
        }


def assemble_report(
    document: "RequirementDocument",
    index: "IdentityIndex",
    graph: "RequirementGraph",
    analysis: "CycleAnalysis",
    diagnostics: "list[Diagnostic] | tuple[Diagnostic, ...]",
    *,
    max_depth: int | None = None,
) -> DocumentReport:
    """Assemble the full report for a document.

    Args:
        document: The parsed document.
        index: Identity index built from the document.
        graph: The derived graph.
        analysis: Cycle analysis of the graph.
        diagnostics: Structural diagnostics of the document.
        max_depth: Depth limit for the display tree.
    """
    cycle_nodes = analysis.cycle_nodes
    cycle_edges = analysis.cycle_edges
    dangling = [d for d in diagnostics if d.kind == DiagnosticKind.DANGLING_REFERENCE]

    nodes: list[ReportNode] = []
    for key in graph.nodes:
        entry = index.get(key)
        nodes.append(
            ReportNode(
                key=key,
                summary=entry.node.summary if entry is not None else None,
                dangling=key in graph.dangling,
                in_cycle=key in cycle_nodes,
            )
        )

    edges = tuple(
        ReportEdge(
            source=edge.source,
            target=edge.target,
            kinds=tuple(str(kind) for kind in edge.kinds),
            in_cycle=(edge.source, edge.target) in cycle_edges,
        )
        for edge in graph.edges
    )

    cycle_check = assemble_cycle_check(graph, analysis, dangling)

    return DocumentReport(
        document=document,
        tree=build_tree(
            document, index, cycle_nodes=cycle_nodes, max_depth=max_depth
        ),
        nodes=tuple(nodes),
        edges=edges,
        validation=assemble_validation(diagnostics),
        cycle_check=cycle_check,
        status_counts=MappingProxyType(count_by_status(index)),
        priority_counts=MappingProxyType(count_by_priority(index)),
    )
