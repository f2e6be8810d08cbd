"""RQM: requirement documents as validated graphs."""

from rqm.engine import (
    CycleCheckResult,
    DocumentReport,
    ValidationResult,
    analyze,
    check_cycles,
    validate,
)
from rqm.exceptions import (
    CircularDependencyError,
    ParseError,
    RequirementNotFoundError,
    RQMError,
)

__all__ = [
    "CircularDependencyError",
    "CycleCheckResult",
    "DocumentReport",
    "ParseError",
    "RQMError",
    "RequirementNotFoundError",
    "ValidationResult",
    "analyze",
    "check_cycles",
    "validate",
]
