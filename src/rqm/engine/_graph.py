"""Requirement graph construction and cycle analysis.

The derived graph has one node per distinct identity key and one edge per
parent/child link or dependency. Named references and dependencies resolve
through the identity index; a reference that resolves to nothing becomes an
edge to a dangling leaf node keyed by the raw reference.

The graph is held as a rustworkx digraph for ordering and reachability.
Document walks and cycle detection use an explicit stack, so arbitrarily deep
chains are handled without touching the interpreter's recursion limit.
"""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, assert_never

import rustworkx as rx

from rqm.exceptions import CircularDependencyError, RequirementNotFoundError

from ._models import EdgeKind, InlineReference, NamedReference

if TYPE_CHECKING:
    from ._identity import IdentityIndex
    from ._models import RequirementDocument, RequirementReference

__all__ = [
    "CycleAnalysis",
    "GraphEdge",
    "RequirementGraph",
    "build_graph",
    "detect_cycles",
]

_WHITE = 0
_GRAY = 1
_BLACK = 2


@dataclass(frozen=True, slots=True)
class GraphEdge:
    """A directed edge of the requirement graph.

    Attributes:
        source: Identity key of the parent or dependent requirement.
        target: Identity key of the child or dependency.
        kinds: Every relationship this edge stands for, in first-seen order.
    """

    source: str
    target: str
    kinds: tuple[EdgeKind, ...]


@dataclass(frozen=True, slots=True)
class RequirementGraph:
    """Directed graph derived from a requirement document.

    Node order is first-encounter order in a pre-order walk of the document.
    Each node's successors are its children in declaration order followed by
    its dependencies in declaration order, without repeats.

    Attributes:
        nodes: Every identity key in the graph.
        edges: Every edge, grouped by source in node order.
        adjacency: Successor keys per node.
        dangling: Nodes created for references that matched nothing.
        digraph: The same graph as a rustworkx digraph. Node ``i`` carries
            ``nodes[i]`` and each edge carries its ``GraphEdge``.
    """

    nodes: tuple[str, ...]
    edges: tuple[GraphEdge, ...]
    adjacency: Mapping[str, tuple[str, ...]]
    dangling: frozenset[str] = frozenset()
    digraph: "rx.PyDiGraph[str, GraphEdge]" = field(
        default_factory=rx.PyDiGraph,
        repr=False,
        compare=False,
    )
    positions: Mapping[str, int] = field(
        default_factory=lambda: MappingProxyType({}),
        repr=False,
        compare=False,
    )

    def __contains__(self, key: object) -> bool:
        return key in self.adjacency

    def __len__(self) -> int:
        return len(self.nodes)

    def _require(self, key: str) -> int:
        if key not in self.adjacency:
            msg = f"Requirement '{key}' is not in the graph"
            raise RequirementNotFoundError(msg, key=key)
        return self.positions[key]

    def successors(self, key: str) -> tuple[str, ...]:
        """Get the children and dependencies of a requirement.

        Raises:
            RequirementNotFoundError: If the key is not a graph node.
        """
        _ = self._require(key)
        return self.adjacency[key]

    def predecessors(self, key: str) -> tuple[str, ...]:
        """Get the requirements that contain or depend on a requirement, in node order.

        Raises:
            RequirementNotFoundError: If the key is not a graph node.
        """
        idx = self._require(key)
        return tuple(self.nodes[i] for i in sorted(self.digraph.predecessor_indices(idx)))

    def topological_order(self) -> list[str]:
        """Order the nodes so every node precedes its successors.

        Whenever several nodes are ready at once the earliest in node order
        comes first, so the result is deterministic.

        Raises:
            CircularDependencyError: If the graph has a cycle.
        """
        width = len(str(len(self.nodes)))
        try:
            order: list[str] = rx.lexicographical_topological_sort(
                self.digraph, key=lambda key: str(self.positions[key]).zfill(width)
            )
        except rx.DAGHasCycle:
            order = []

        if len(order) < len(self.nodes):
            cycle = list(detect_cycles(self).cycles[0])
            msg = "Circular dependency detected: " + " → ".join((*cycle, cycle[0]))
            raise CircularDependencyError(msg, cycle=cycle)
        return order

    def walk(self, start: str, max_depth: int | None = None) -> Iterator[tuple[str, int]]:
        """Walk the nodes reachable from ``start`` breadth first.

        Each reachable node is yielded once with its shortest distance from
        ``start``. Nodes at the same depth come out in node order, and nodes
        deeper than ``max_depth`` are left out.

        Args:
            start: Identity key to start from (yielded at depth 0).
            max_depth: Maximum depth to yield; None is unlimited.

        Raises:
            RequirementNotFoundError: If ``start`` is not a graph node.
        """
        start_idx = self._require(start)
        yield start, 0
        lengths = rx.digraph_dijkstra_shortest_path_lengths(
            self.digraph, start_idx, lambda _edge: 1.0
        )
        reached = sorted(
            (int(length), idx) for idx, length in lengths.items() if idx != start_idx
        )
        for depth, idx in reached:
            if max_depth is not None and depth > max_depth:
                break
            yield self.nodes[idx], depth

    def to_dict(self) -> dict[str, list[str]]:
        """Return the adjacency as plain data, in node order."""
        return {key: list(self.adjacency[key]) for key in self.nodes}


class _GraphBuilder:
    """Accumulates nodes and edges while the document is walked."""

    def __init__(self, index: "IdentityIndex") -> None:
        self._index = index
        self._adjacency: dict[str, dict[str, list[EdgeKind]]] = {}
        self._dangling: set[str] = set()

    def add_node(self, key: str) -> None:
        _ = self._adjacency.setdefault(key, {})

    def resolve(self, reference: str) -> str:
        key = self._index.resolve(reference)
        if key is None:
            self._dangling.add(reference)
            return reference
        return key

    def add_edge(self, source: str, target: str, kind: EdgeKind) -> None:
        self.add_node(source)
        self.add_node(target)
        kinds = self._adjacency[source].setdefault(target, [])
        if kind not in kinds:
            kinds.append(kind)

    def build(self) -> RequirementGraph:
        nodes = tuple(self._adjacency)
        edges = tuple(
            GraphEdge(source, target, tuple(kinds))
            for source in nodes
            for target, kinds in self._adjacency[source].items()
        )

        digraph: rx.PyDiGraph[str, GraphEdge] = rx.PyDiGraph(check_cycle=False)
        indices = digraph.add_nodes_from(nodes)
        positions = dict(zip(nodes, indices, strict=True))
        _ = digraph.add_edges_from(
            [(positions[edge.source], positions[edge.target], edge) for edge in edges]
        )

        return RequirementGraph(
            nodes=nodes,
            edges=edges,
            adjacency=MappingProxyType({key: tuple(self._adjacency[key]) for key in nodes}),
            dangling=frozenset(self._dangling),
            digraph=digraph,
            positions=MappingProxyType(positions),
        )


def build_graph(document: "RequirementDocument", index: "IdentityIndex") -> RequirementGraph:
    """Build the derived requirement graph.

    Args:
        document: The parsed document.
        index: Identity index built from the same document.

    Returns:
        The graph. Duplicate definitions of a key merge into one node.
    """
    builder = _GraphBuilder(index)
    stack: list[RequirementReference] = list(reversed(document.requirements))

    while stack:
        ref = stack.pop()
        if isinstance(ref, NamedReference):
            # Only top-level named references reach here
            builder.add_node(builder.resolve(ref.target))
            continue
        if not isinstance(ref, InlineReference):
            assert_never(ref)

        node = ref.node
        key = node.key
        builder.add_node(key)
        for child in node.children:
            if isinstance(child, InlineReference):
                builder.add_edge(key, child.key, EdgeKind.CHILD)
            elif isinstance(child, NamedReference):
                builder.add_edge(key, builder.resolve(child.target), EdgeKind.CHILD)
            else:
                assert_never(child)
        for dependency in node.dependencies:
            builder.add_edge(key, builder.resolve(dependency), EdgeKind.DEPENDENCY)

        stack.extend(
            child for child in reversed(node.children) if isinstance(child, InlineReference)
        )

    return builder.build()


@dataclass(frozen=True, slots=True)
class CycleAnalysis:
    """Result of cycle detection over a requirement graph.

    Attributes:
        cycles: One entry per back edge found, each listing the keys of the
            cycle starting from the back edge's target.
        visit_order: Every node, in the order the search first reached it.
    """

    cycles: tuple[tuple[str, ...], ...]
    visit_order: tuple[str, ...]

    @property
    def has_cycles(self) -> bool:
        return bool(self.cycles)

    @property
    def cycle_nodes(self) -> frozenset[str]:
        """Every key that lies on a detected cycle."""
        return frozenset(key for cycle in self.cycles for key in cycle)

    @property
    def cycle_edges(self) -> frozenset[tuple[str, str]]:
        """Every (source, target) pair that lies on a detected cycle."""
        edges: set[tuple[str, str]] = set()
        for cycle in self.cycles:
            for i, key in enumerate(cycle):
                edges.add((key, cycle[(i + 1) % len(cycle)]))
        return frozenset(edges)


def detect_cycles(graph: RequirementGraph) -> CycleAnalysis:
    """Find cycles with an iterative white/gray/black depth-first search.

    Roots are tried in node order and successors in adjacency order. An edge
    into a gray node closes a cycle, recorded as the current path from that
    node. Black nodes are never re-entered, so each node is expanded once
    and the search is linear in the size of the graph.

    Args:
        graph: The graph to analyze.

    Returns:
        The detected cycles and the search's visit order.
    """
    color: dict[str, int] = dict.fromkeys(graph.nodes, _WHITE)
    visit_order: list[str] = []
    cycles: list[tuple[str, ...]] = []

    for root in graph.nodes:
        if color[root] != _WHITE:
            continue

        color[root] = _GRAY
        visit_order.append(root)
        path: list[str] = [root]
        position: dict[str, int] = {root: 0}
        stack: list[Iterator[str]] = [iter(graph.adjacency[root])]

        while stack:
            target = next(stack[-1], None)
            if target is None:
                finished = path.pop()
                del position[finished]
                color[finished] = _BLACK
                _ = stack.pop()
                continue

            state = color[target]
            if state == _GRAY:
                cycles.append(tuple(path[position[target] :]))
            elif state == _WHITE:
                color[target] = _GRAY
                visit_order.append(target)
                position[target] = len(path)
                path.append(target)
                stack.append(iter(graph.adjacency[target]))

    return CycleAnalysis(cycles=tuple(cycles), visit_order=tuple(visit_order))
