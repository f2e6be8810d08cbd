"""Shared test fixtures for RQM tests."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
import yaml
from rich.console import Console

# ---------------------------------------------------------------------------
# Helper functions for building requirement documents
# ---------------------------------------------------------------------------


def requirement(
    summary: str,
    *,
    name: str | None = None,
    dependencies: list[str] | None = None,
    children: list[Any] | None = None,
    **fields: Any,
) -> dict[str, Any]:
    """Build a requirement mapping.

    Args:
        summary: Requirement summary.
        name: Optional stable identifier.
        dependencies: Identity keys this requirement depends on.
        children: Nested requirements (mappings or reference strings).
        **fields: Any other requirement fields, passed through verbatim.

    Returns:
        The requirement as it would appear in decoded YAML.
    """
    data: dict[str, Any] = {"summary": summary}
    if name is not None:
        data["name"] = name
    data.update(fields)
    if dependencies is not None:
        data["dependencies"] = dependencies
    if children is not None:
        data["requirements"] = children
    return data


def document(
    *requirements: Any,
    aliases: list[dict[str, Any]] | None = None,
    version: str = "1.0",
) -> dict[str, Any]:
    """Build a requirement document mapping from requirement entries."""
    data: dict[str, Any] = {"version": version}
    if aliases is not None:
        data["aliases"] = aliases
    data["requirements"] = list(requirements)
    return data


def to_yaml(data: dict[str, Any]) -> str:
    """Serialize a document mapping to YAML text."""
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)


def nested_chain(length: int) -> dict[str, Any]:
    """Build a document whose requirements nest ``length`` levels deep.

    Built bottom up without recursion, so it can exceed the recursion limit.
    """
    node = requirement(f"Level {length - 1}", name=f"N{length - 1}")
    for level in range(length - 2, -1, -1):
        node = requirement(f"Level {level}", name=f"N{level}", children=[node])
    return document(node)


def nested_chain_text(length: int) -> str:
    """Write a ``length``-level nested document as flow-style YAML text.

    Requirement ``i`` is named ``N{i}``. The text is assembled directly because
    the YAML dumper recurses once per nesting level.
    """
    opening = "".join(
        f"{{summary: Level {level}, name: N{level}, requirements: [" for level in range(length - 1)
    )
    leaf = f"{{summary: Level {length - 1}, name: N{length - 1}}}"
    closing = "]}" * (length - 1)
    return f'version: "1.0"\nrequirements: [{opening}{leaf}{closing}]\n'


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def console() -> Console:
    return Console(
        width=70,
        force_terminal=True,
        highlight=False,
        color_system=None,
        legacy_windows=False,
    )


@pytest.fixture
def write_requirements(tmp_path: Path) -> Callable[..., Path]:
    """Return a function writing a document mapping or text to a YAML file."""

    def _write(content: dict[str, Any] | str, filename: str = "requirements.yml") -> Path:
        path = tmp_path / filename
        text = content if isinstance(content, str) else to_yaml(content)
        _ = path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sample_document() -> dict[str, Any]:
    """A small valid document with aliases, nesting and shared references."""
    return document(
        requirement(
            "User Authentication",
            name="AUTH-001",
            owner="@alice",
            priority="high",
            status="approved",
            description="Users must be able to log in.\nSecond line.",
            tags=["security", "core"],
            children=[
                requirement(
                    "Password Login",
                    name="AUTH-002",
                    owner="alice@example.com",
                    status="implemented",
                ),
                requirement("Session Timeout", name="AUTH-003", owner="bob"),
            ],
        ),
        requirement(
            "Audit Logging",
            name="AUDIT-001",
            owner="carol@example.com",
            priority="medium",
            dependencies=["AUTH-001"],
            children=["Password Login"],
        ),
        aliases=[
            {"alias": "bob", "name": "Bob Builder", "email": "bob@example.com"},
        ],
    )
