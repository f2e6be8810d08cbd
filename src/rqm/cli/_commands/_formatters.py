"""Text formatters for requirement commands."""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rqm.engine import (
        CycleCheckResult,
        DocumentReport,
        TreeNode,
        ValidationResult,
    )

STATUS_SYMBOLS: dict[str, str] = {
    "verified": "✔",
    "implemented": "✓",
    "approved": "○",
    "proposed": "◐",
    "draft": "◯",
    "deprecated": "✗",
}

DESCRIPTION_WIDTH = 80

TABLE_HEADERS = ["ID", "Summary", "Owner", "Priority", "Status"]


def _bullets(lines: list[str], marker: str, messages: "tuple[str, ...]") -> None:
    lines.extend(f"  {marker} {message}" for message in messages)


def format_validation_text(
    file: str,
    result: "ValidationResult",
    *,
    quiet: bool = False,
) -> str:
    """Render a validation result for the terminal."""
    lines: list[str] = []
    if not quiet:
        lines.append(f"Validating {file}...")

    if result.valid:
        if not quiet:
            lines.extend(
                [
                    "✓ YAML syntax valid",
                    "✓ Schema validation passed",
                    "✓ All identities unique within their scopes",
                    "✓ Owner references valid",
                    "",
                    "Validation successful!",
                ]
            )
    else:
        lines.extend(["", "✗ Validation failed:"])
        _bullets(lines, "-", result.errors)

    if result.warnings and not quiet:
        lines.extend(["", "Warnings:"])
        _bullets(lines, "⚠", result.warnings)

    return "\n".join(lines)


def format_cycles_text(file: str, result: "CycleCheckResult") -> str:
    """Render detected cycles as arrow paths, one block per cycle."""
    lines = [f"Checking {file} for circular references...", ""]

    if not result.has_cycles:
        lines.extend(
            [
                "✓ No circular references detected",
                "  The requirements graph is acyclic (DAG)",
            ]
        )
    else:
        lines.extend([f"✗ Found {len(result.cycles)} circular reference(s):", ""])
        for i, cycle in enumerate(result.cycles, start=1):
            lines.append(f"Cycle {i}:")
            for position, key in enumerate(cycle):
                if position == len(cycle) - 1:
                    lines.append(f"  └─ {key} → (back to {cycle[0]})")
                else:
                    lines.extend([f"  ├─ {key}", "  │  ↓"])
            lines.append("")
        lines.extend(
            [
                "⚠ Circular references can cause infinite loops during traversal.",
                "  Consider restructuring your requirements to remove cycles.",
            ]
        )

    if result.warnings:
        lines.extend(["", "Warnings:"])
        _bullets(lines, "⚠", result.warnings)

    return "\n".join(lines)


def format_graph_text(file: str, result: "CycleCheckResult") -> str:
    """Render the adjacency of the requirement graph."""
    lines = [f"Requirements Dependency Graph for {file}:", ""]

    if not result.graph:
        lines.append("  (empty graph)")
    for key, targets in result.graph.items():
        if targets:
            lines.append(f"  {key} → {', '.join(targets)}")
        else:
            lines.append(f"  {key} → (no dependencies)")

    lines.append("")
    if result.has_cycles:
        lines.append(f"⚠ Warning: Graph contains {len(result.cycles)} cycle(s)")
        lines.extend(f"  {path}" for path in result.describe_cycles())
    else:
        lines.append("✓ Graph is acyclic (DAG)")

    return "\n".join(lines)


def _first_line(text: str) -> str:
    line = text.strip().split("\n", 1)[0]
    if len(line) > DESCRIPTION_WIDTH:
        return line[: DESCRIPTION_WIDTH - 3] + "..."
    return line


def _tree_line(node: "TreeNode") -> str:
    label = node.name or ("unresolved" if not node.resolved else "unnamed")
    summary = node.summary if node.summary is not None else node.key
    symbol = STATUS_SYMBOLS.get(str(node.status), "·")
    parts = [f"{symbol} [{label}] {summary}"]
    if node.priority is not None:
        parts.append(f"({node.priority})")
    if node.reference:
        parts.append("→ ref" if node.resolved else "→ dangling")
    if node.in_cycle:
        parts.append("⟲")
    if node.truncated:
        parts.append("…")
    return " ".join(parts)


def format_tree_text(report: "DocumentReport", *, details: bool = False) -> str:
    """Render the display tree with box-drawing connectors.

    With ``details``, the owner, first description line and tags of each
    inline requirement are shown beneath it.
    """
    from rqm.engine import resolve_identities

    document = report.document
    lines = [f"Requirements (v{document.version})"]

    if document.aliases:
        lines.extend(["", "Aliases:"])
        for alias in document.aliases:
            contact = f" <{alias.email}>" if alias.email else ""
            lines.append(f"  @{alias.alias} → {alias.name}{contact}")

    lines.extend(["", "Requirements:"])
    index = resolve_identities(document)

    # (node, connector for this line, prefix for this node's own children)
    stack: list[tuple[TreeNode, str, str]] = [
        (node, "", "  ") for node in reversed(report.tree)
    ]
    while stack:
        node, connector, child_prefix = stack.pop()
        lines.append(connector + _tree_line(node))

        entry = index.get(node.key)
        if details and not node.reference and entry is not None:
            source = entry.node
            if source.owner:
                owner = node.owner.display_name if node.owner else source.owner
                lines.append(f"{child_prefix}Owner: {owner}")
            if source.description:
                description = _first_line(source.description)
                lines.append(f"{child_prefix}Description: {description}")
            if source.tags:
                lines.append(f"{child_prefix}Tags: {', '.join(source.tags)}")

        last = len(node.children) - 1
        stack.extend(
            (
                child,
                child_prefix + ("└─ " if i == last else "├─ "),
                child_prefix + ("   " if i == last else "│  "),
            )
            for i, child in reversed(list(enumerate(node.children)))
        )

    return "\n".join(lines)


def format_requirement_rows(report: "DocumentReport") -> list[list[str]]:
    """Flatten the display tree into table rows, in pre-order."""
    rows: list[list[str]] = []
    stack: list[TreeNode] = list(reversed(report.tree))
    while stack:
        node = stack.pop()
        indent = "  " * node.depth
        rows.append(
            [
                node.name or "",
                f"{indent}{node.summary if node.summary is not None else node.key}",
                node.owner.display_name if node.owner is not None else "",
                "" if node.priority is None else str(node.priority),
                "" if node.status is None else str(node.status),
            ]
        )
        stack.extend(reversed(node.children))
    return rows
