"""Integration tests for the graph command."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import orjson
import pytest
import yaml

from tests.conftest import document, requirement


class TestGraphCommand:
    def test_text_adjacency(
        self,
        capsys: pytest.CaptureFixture[str],
        rqm_cli_with_exit_code: Callable[..., int],
        write_requirements: Callable[..., Path],
        sample_document: dict[str, Any],
    ) -> None:
        path = write_requirements(sample_document)

        exit_code = rqm_cli_with_exit_code("graph", str(path))

        out = capsys.readouterr().out
        assert exit_code == 0
        assert f"Requirements Dependency Graph for {path}:" in out
        assert "  AUTH-001 → AUTH-002, AUTH-003" in out
        assert "  AUDIT-001 → AUTH-002, AUTH-001" in out
        assert "  AUTH-003 → (no dependencies)" in out
        assert "✓ Graph is acyclic (DAG)" in out

    def test_cycles_do_not_change_exit_code(
        self,
        capsys: pytest.CaptureFixture[str],
        rqm_cli_with_exit_code: Callable[..., int],
        write_requirements: Callable[..., Path],
    ) -> None:
        path = write_requirements(
            document(requirement("Loop", name="L", dependencies=["L"]))
        )

        exit_code = rqm_cli_with_exit_code("graph", str(path))

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "⚠ Warning: Graph contains 1 cycle(s)" in out
        assert "  L → L" in out

    def test_json_edges_record_kinds(
        self,
        capsys: pytest.CaptureFixture[str],
        rqm_cli_with_exit_code: Callable[..., int],
        write_requirements: Callable[..., Path],
    ) -> None:
        path = write_requirements(
            document(
                requirement("Parent", name="P", dependencies=["C"], children=["C"]),
                requirement("Child", name="C"),
            )
        )

        exit_code = rqm_cli_with_exit_code("graph", str(path), "-f", "json")

        data = orjson.loads(capsys.readouterr().out)
        assert exit_code == 0
        assert data["file"] == str(path)
        assert [node["key"] for node in data["nodes"]] == ["P", "C"]
        assert len(data["edges"]) == 1
        assert data["edges"][0]["source"] == "P"
        assert data["edges"][0]["target"] == "C"
        assert sorted(data["edges"][0]["kinds"]) == ["child", "dependency"]

    def test_yaml_output(
        self,
        capsys: pytest.CaptureFixture[str],
        rqm_cli_with_exit_code: Callable[..., int],
        write_requirements: Callable[..., Path],
        sample_document: dict[str, Any],
    ) -> None:
        path = write_requirements(sample_document)

        exit_code = rqm_cli_with_exit_code("graph", str(path), "-f", "yaml")

        data = yaml.safe_load(capsys.readouterr().out)
        assert exit_code == 0
        assert data["cycles"] == []
