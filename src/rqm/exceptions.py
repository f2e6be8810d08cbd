"""RQM exceptions."""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathlib import Path


class RQMError(Exception):
    """Base exception for RQM errors."""


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigError(RQMError):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when configuration cannot be loaded or parsed."""

    def __init__(
        self,
        message: str,
        *,
        path: "Path | None" = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize with error message and optional location context."""
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column


class ConfigValidationError(ConfigError):
    """Raised when configuration fails validation."""

    def __init__(
        self,
        message: str,
        *,
        key: str,
        value: Any,  # pyright: ignore[reportAny,reportExplicitAny]
        expected: str,
        source: str | None = None,
    ) -> None:
        """Initialize with error message and validation context."""
        super().__init__(message)
        self.key: str = key
        self.value: Any = value  # pyright: ignore[reportExplicitAny]
        self.expected: str = expected
        self.source: str | None = source


# =============================================================================
# Engine Exceptions
# =============================================================================


class EngineError(RQMError):
    """Base exception for requirement engine errors."""


class ParseError(EngineError, ValueError):
    """Raised when requirement document text cannot be parsed.

    Parse errors are the only engine failures that abort a call. Everything
    wrong with a parseable document is reported as diagnostics instead.

    Attributes:
        path: Document path of the offending element (e.g. "requirements[2]").
        line: 1-based line number reported by the YAML layer, if known.
        column: 1-based column number reported by the YAML layer, if known.
        hint: Multi-line help text describing valid formats.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        line: int | None = None,
        column: int | None = None,
        hint: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        """Initialize with error message and location context.

        Args:
            message: Human-readable error message.
            path: Document path of the offending element.
            line: 1-based line number, if known.
            column: 1-based column number, if known.
            hint: Multi-line help text describing valid formats.
            cause: The underlying exception, if any.
        """
        super().__init__(message)
        self.path: str | None = path
        self.line: int | None = line
        self.column: int | None = column
        self.hint: str | None = hint
        self.cause: Exception | None = cause

    def describe(self) -> str:
        """Return the message followed by the hint, if there is one."""
        if self.hint:
            return f"{self}\n\n{self.hint}"
        return str(self)


class RequirementNotFoundError(EngineError, KeyError):
    """Raised when a requirement key is not present in a graph.

    Attributes:
        key: The identity key that was not found.
    """

    def __init__(self, message: str, *, key: str | None = None) -> None:
        """Initialize with error message and key context.

        Args:
            message: Human-readable error message.
            key: The identity key that was not found.
        """
        super().__init__(message)
        self.key: str | None = key

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0]) if self.args else ""


class CircularDependencyError(EngineError, ValueError):
    """Raised when an ordering is requested for a cyclic graph.

    Attributes:
        cycle: List of identity keys forming the first detected cycle.
    """

    def __init__(
        self,
        message: str,
        *,
        cycle: list[str] | None = None,
    ) -> None:
        """Initialize with error message and cycle context.

        Args:
            message: Human-readable error message.
            cycle: List of identity keys forming the circular dependency.
        """
        super().__init__(message)
        self.cycle: list[str] | None = cycle
