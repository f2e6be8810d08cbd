"""Requirement graph validation engine.

This package parses requirement documents, validates their structure, and
analyzes the derived requirement graph for cycles.

Example:
    >>> from rqm.engine import check_cycles
    >>> result = check_cycles(text)
    >>> result.has_cycles
    False
"""

from ._diagnostics import (
    ALIAS_SCOPE,
    ROOT_SCOPE,
    Diagnostic,
    DiagnosticKind,
    Severity,
)
from ._engine import (
    analyze,
    analyze_document,
    check_cycles,
    check_document_cycles,
    validate,
    validate_document,
)
from ._graph import (
    CycleAnalysis,
    GraphEdge,
    RequirementGraph,
    build_graph,
    detect_cycles,
)
from ._identity import (
    IdentityIndex,
    IndexedNode,
    NamedUse,
    ScopeEntry,
    ScopeRecord,
    resolve_identities,
)
from ._models import (
    DEFAULT_PRIORITY,
    DEFAULT_STATUS,
    EdgeKind,
    InlineReference,
    NamedReference,
    PersonAlias,
    Priority,
    RequirementDocument,
    RequirementNode,
    RequirementReference,
    Status,
)
from ._owners import (
    OwnerKind,
    OwnerResolution,
    OwnerResolver,
    resolve_owner,
)
from ._parser import document_to_dict, dump_document, parse_data, parse_document
from ._results import (
    CycleCheckResult,
    DocumentReport,
    ReportEdge,
    ReportNode,
    TreeNode,
    ValidationResult,
    build_tree,
    count_by_priority,
    count_by_status,
)
from ._schema import get_document_schema, validate_schema
from ._validator import collect_diagnostics

__all__ = [
    "ALIAS_SCOPE",
    "DEFAULT_PRIORITY",
    "DEFAULT_STATUS",
    "ROOT_SCOPE",
    "CycleAnalysis",
    "CycleCheckResult",
    "Diagnostic",
    "DiagnosticKind",
    "DocumentReport",
    "EdgeKind",
    "GraphEdge",
    "IdentityIndex",
    "IndexedNode",
    "InlineReference",
    "NamedReference",
    "NamedUse",
    "OwnerKind",
    "OwnerResolution",
    "OwnerResolver",
    "PersonAlias",
    "Priority",
    "ReportEdge",
    "ReportNode",
    "RequirementDocument",
    "RequirementGraph",
    "RequirementNode",
    "RequirementReference",
    "ScopeEntry",
    "ScopeRecord",
    "Severity",
    "Status",
    "TreeNode",
    "ValidationResult",
    "analyze",
    "analyze_document",
    "build_graph",
    "build_tree",
    "check_cycles",
    "check_document_cycles",
    "collect_diagnostics",
    "count_by_priority",
    "count_by_status",
    "detect_cycles",
    "document_to_dict",
    "dump_document",
    "get_document_schema",
    "parse_data",
    "parse_document",
    "resolve_identities",
    "resolve_owner",
    "validate",
    "validate_document",
    "validate_schema",
]
