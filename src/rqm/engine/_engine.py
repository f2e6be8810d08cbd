"""Public engine operations.

Each operation is a pure function of its input: parse, resolve identities,
validate, build the graph, detect cycles and assemble a result. Nothing is
cached between calls and nothing is written anywhere except to the optional
logger.
"""

from typing import TYPE_CHECKING

from rqm.config import ValidationConfig
from rqm.utils import create_null_logger

from ._graph import build_graph, detect_cycles
from ._identity import resolve_identities
from ._parser import parse_document
from ._results import (
    CycleCheckResult,
    DocumentReport,
    ValidationResult,
    assemble_cycle_check,
    assemble_report,
    assemble_validation,
)
from ._validator import collect_diagnostics, find_dangling_references

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

    from ._graph import CycleAnalysis, RequirementGraph
    from ._identity import IdentityIndex
    from ._models import RequirementDocument

__all__ = [
    "analyze",
    "analyze_document",
    "check_cycles",
    "check_document_cycles",
    "validate",
    "validate_document",
]


def _parse(text: str, logger: "FilteringBoundLogger") -> "RequirementDocument":
    document = parse_document(text)
    logger.debug(
        "document_parsed",
        version=document.version,
        top_level=len(document.requirements),
        aliases=len(document.aliases),
    )
    return document


def _index(
    document: "RequirementDocument", logger: "FilteringBoundLogger"
) -> "IdentityIndex":
    index = resolve_identities(document)
    logger.debug(
        "identities_resolved",
        requirements=len(index.entries),
        distinct_keys=len(index),
        scopes=len(index.scopes),
    )
    return index


def _analyze_graph(
    document: "RequirementDocument",
    index: "IdentityIndex",
    logger: "FilteringBoundLogger",
) -> "tuple[RequirementGraph, CycleAnalysis]":
    graph = build_graph(document, index)
    logger.debug(
        "graph_built",
        nodes=len(graph.nodes),
        edges=len(graph.edges),
        dangling=len(graph.dangling),
    )
    analysis = detect_cycles(graph)
    logger.debug("cycles_detected", count=len(analysis.cycles))
    return graph, analysis


# =============================================================================
# Document Operations
# =============================================================================


def validate_document(
    document: "RequirementDocument",
    *,
    config: ValidationConfig | None = None,
    logger: "FilteringBoundLogger | None" = None,
) -> ValidationResult:
    """Validate an already parsed document.

    See ``validate`` for details.
    """
    log = logger if logger is not None else create_null_logger()
    index = _index(document, log)
    diagnostics = collect_diagnostics(document, index, config=config, logger=log)
    return assemble_validation(diagnostics)


def check_document_cycles(
    document: "RequirementDocument",
    *,
    config: ValidationConfig | None = None,
    logger: "FilteringBoundLogger | None" = None,
) -> CycleCheckResult:
    """Check an already parsed document for cycles.

    See ``check_cycles`` for details.
    """
    settings = config if config is not None else ValidationConfig()
    log = logger if logger is not None else create_null_logger()
    index = _index(document, log)
    graph, analysis = _analyze_graph(document, index, log)
    dangling = find_dangling_references(index, settings.dangling_policy)
    return assemble_cycle_check(graph, analysis, dangling)


def analyze_document(
    document: "RequirementDocument",
    *,
    config: ValidationConfig | None = None,
    max_depth: int | None = None,
    logger: "FilteringBoundLogger | None" = None,
) -> DocumentReport:
    """Fully analyze an already parsed document.

    See ``analyze`` for details.
    """
    settings = config if config is not None else ValidationConfig()
    log = logger if logger is not None else create_null_logger()
    index = _index(document, log)
    diagnostics = collect_diagnostics(document, index, config=settings, logger=log)
    graph, analysis = _analyze_graph(document, index, log)
    return assemble_report(
        document,
        index,
        graph,
        analysis,
        diagnostics,
        max_depth=max_depth if max_depth is not None else settings.max_depth,
    )


# =============================================================================
# Text Operations
# =============================================================================


def validate(
    text: str,
    *,
    config: ValidationConfig | None = None,
    logger: "FilteringBoundLogger | None" = None,
) -> ValidationResult:
    """Validate requirement document text.

    Reports every duplicate identity, schema violation, unresolved owner
    and dangling reference in one pass. Cycles are not validation errors;
    use ``check_cycles`` for them.

    Args:
        text: YAML document text.
        config: Validation policies; defaults apply when omitted.
        logger: Optional structlog logger for debug events.

    Returns:
        The validation result; ``valid`` is True when there are no errors.

    Raises:
        ParseError: If the text cannot be parsed into a document.

    Example:
        >>> validate('version: "1.0"\\nrequirements:\\n  - summary: A').valid
        True
    """
    log = logger if logger is not None else create_null_logger()
    return validate_document(_parse(text, log), config=config, logger=log)


def check_cycles(
    text: str,
    *,
    config: ValidationConfig | None = None,
    logger: "FilteringBoundLogger | None" = None,
) -> CycleCheckResult:
    """Detect cycles in the graph of a requirement document.

    Child links and dependencies form a single edge set. References that
    match nothing become dangling leaves and are reported as warnings.

    Args:
        text: YAML document text.
        config: Validation policies; only ``dangling_policy`` is used.
        logger: Optional structlog logger for debug events.

    Returns:
        The cycle check result with the adjacency of the derived graph.

    Raises:
        ParseError: If the text cannot be parsed into a document.
    """
    log = logger if logger is not None else create_null_logger()
    return check_document_cycles(_parse(text, log), config=config, logger=log)


def analyze(
    text: str,
    *,
    config: ValidationConfig | None = None,
    max_depth: int | None = None,
    logger: "FilteringBoundLogger | None" = None,
) -> DocumentReport:
    """Produce the full report for a requirement document.

    Args:
        text: YAML document text.
        config: Validation policies; ``max_depth`` is used when the argument
            of the same name is omitted.
        max_depth: Depth limit for the display tree. Cycle detection always
            covers the whole graph regardless of this limit.
        logger: Optional structlog logger for debug events.

    Returns:
        The document report.

    Raises:
        ParseError: If the text cannot be parsed into a document.
    """
    log = logger if logger is not None else create_null_logger()
    return analyze_document(
        _parse(text, log), config=config, max_depth=max_depth, logger=log
    )
