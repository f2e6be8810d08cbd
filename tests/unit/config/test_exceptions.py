# pyright: reportAny=false
"""Unit tests for RQM exceptions.

These tests verify that exception constructors correctly store context
attributes. We don't test Python built-in behaviors (inheritance, str()).
"""

from pathlib import Path

from rqm.exceptions import (
    CircularDependencyError,
    ConfigLoadError,
    ConfigValidationError,
    ParseError,
    RequirementNotFoundError,
)


class TestConfigLoadError:
    def test_stores_location_context(self) -> None:
        error = ConfigLoadError(
            "Parse error",
            path=Path("/project/.rqm/rqm.toml"),
            line=15,
            column=8,
        )

        assert error.path == Path("/project/.rqm/rqm.toml")
        assert error.line == 15
        assert error.column == 8

    def test_context_fields_default_to_none(self) -> None:
        error = ConfigLoadError("Simple error")

        assert error.path is None
        assert error.line is None
        assert error.column is None


class TestConfigValidationError:
    def test_stores_validation_context(self) -> None:
        error = ConfigValidationError(
            "Invalid enum value",
            key="validation.owner_policy",
            value="loud",
            expected="error | warning | ignore",
            source="project",
        )

        assert error.key == "validation.owner_policy"
        assert error.value == "loud"
        assert error.expected == "error | warning | ignore"
        assert error.source == "project"


class TestParseError:
    def test_describe_appends_hint(self) -> None:
        error = ParseError("Bad owner", path="requirements[0]", hint="Use a string")

        assert error.describe() == "Bad owner\n\nUse a string"
        assert error.path == "requirements[0]"

    def test_describe_without_hint(self) -> None:
        error = ParseError("Bad YAML", line=3, column=4)

        assert error.describe() == "Bad YAML"
        assert (error.line, error.column) == (3, 4)


class TestRequirementNotFoundError:
    def test_str_is_plain_message(self) -> None:
        error = RequirementNotFoundError("Unknown requirement 'X'", key="X")

        assert str(error) == "Unknown requirement 'X'"
        assert error.key == "X"


class TestCircularDependencyError:
    def test_stores_cycle(self) -> None:
        error = CircularDependencyError("cycle", cycle=["A", "B"])

        assert error.cycle == ["A", "B"]
