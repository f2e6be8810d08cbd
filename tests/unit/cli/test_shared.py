from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

import orjson
import pytest
import yaml

from rqm.cli._commands._context import CLIContext
from rqm.config import Config
from rqm.cli._commands._shared import (
    ExitCode,
    exit_with_error,
    format_json,
    format_table,
    format_yaml,
    get_command_logger,
    load_document,
)

if TYPE_CHECKING:
    from pytest_mock import MockerFixture
    from rich.console import Console


class TestFormatters:
    def test_format_json(self) -> None:
        text = format_json({"file": "r.yml", "valid": True})

        assert orjson.loads(text) == {"file": "r.yml", "valid": True}
        assert "\n" in text

    def test_format_json_compact(self) -> None:
        assert format_json({"a": 1}, indent=False) == '{"a":1}'

    def test_format_yaml_keeps_order(self) -> None:
        text = format_yaml({"z": 1, "a": "→"})

        assert text.index("z:") < text.index("a:")
        assert yaml.safe_load(text) == {"z": 1, "a": "→"}

    def test_format_json_too_deep_exits(self) -> None:
        data: dict[str, object] = {}
        for _ in range(300):
            data = {"children": [data]}

        with pytest.raises(SystemExit) as exc_info:
            _ = format_json(data)

        assert exc_info.value.code == ExitCode.LOAD_ERROR

    def test_format_yaml_too_deep_exits(self, mocker: "MockerFixture") -> None:
        _ = mocker.patch("yaml.safe_dump", side_effect=RecursionError)

        with pytest.raises(SystemExit) as exc_info:
            _ = format_yaml({"a": 1})

        assert exc_info.value.code == ExitCode.LOAD_ERROR

    def test_format_table(self) -> None:
        text = format_table(["ID", "Summary"], [["A-1", "First"]])

        assert "ID" in text
        assert "A-1" in text
        assert "|" in text


class TestExitWithError:
    def test_prints_and_exits(self, console: "Console") -> None:
        with console.capture() as capture, pytest.raises(SystemExit) as exc_info:
            exit_with_error("bad [thing]", console=console)

        assert exc_info.value.code == ExitCode.LOAD_ERROR
        assert "Error: bad [thing]" in capture.get()


class TestLoadDocument:
    def test_loads_file(
        self,
        write_requirements: Callable[..., Path],
        sample_document: dict[str, object],
    ) -> None:
        path = write_requirements(sample_document)

        document = load_document(path)

        assert [ref.key for ref in document.requirements] == ["AUTH-001", "AUDIT-001"]

    def test_missing_file_exits(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            _ = load_document(tmp_path / "missing.yml")

        assert exc_info.value.code == ExitCode.LOAD_ERROR

    def test_parse_error_reports_location(
        self,
        write_requirements: Callable[..., Path],
        mocker: "MockerFixture",
    ) -> None:
        path = write_requirements("version: '1.0'\nrequirements: [\n")
        exit_mock = mocker.patch(
            "rqm.cli._commands._shared.exit_with_error", side_effect=SystemExit(2)
        )

        with pytest.raises(SystemExit):
            _ = load_document(path)

        message = exit_mock.call_args.args[0]
        assert message.startswith(f"{path}:")


class TestGetCommandLogger:
    def test_falls_back_to_null_logger(self) -> None:
        logger = get_command_logger(CLIContext(config=Config()), "validate")

        assert logger.info("ignored") is None
