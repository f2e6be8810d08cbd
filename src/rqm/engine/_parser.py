# pyright: reportAny=false, reportUnknownVariableType=false, reportUnknownArgumentType=false
"""YAML parsing and serialization for requirement documents.

Parsing is purely structural: it turns text into a ``RequirementDocument``
and fails only when the overall shape is unusable (bad YAML, wrong top-level
type, missing ``version`` or ``requirements``, or a requirement entry that is
neither a string nor a mapping with a ``summary``). Field values of the wrong
shape are kept as close to the raw input as possible and reported later by
schema validation.

Nested requirements are built with an explicit work stack, so document depth
is not bounded by the interpreter's recursion limit.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from types import MappingProxyType
from typing import Any, assert_never

import yaml

from rqm.exceptions import ParseError

from ._models import (
    InlineReference,
    NamedReference,
    PersonAlias,
    Priority,
    RequirementDocument,
    RequirementNode,
    RequirementReference,
    Status,
)

__all__ = [
    "document_to_dict",
    "dump_document",
    "parse_data",
    "parse_document",
]

CHILDREN_KEY = "requirements"
"""Mapping key holding a requirement's nested children."""

REFERENCE_HINT = """\
Hint: A requirement in a 'requirements' list has an invalid format.

Valid formats:
  1. String reference (the name or summary of another requirement):
     - "Parent Requirement Summary"

  2. Full requirement object:
     - summary: "Requirement summary"
       description: "Description text"
       requirements: [...]  # optional nested requirements

Common issues:
  - Missing 'summary' field in a requirement object
  - Using a number or list instead of a string for a reference
  - Incorrect indentation in nested requirements"""

MISSING_FIELD_HINT = """\
Hint: Required field '{field}' is missing.

Minimal example:
  version: "1.0"
  requirements:
    - summary: "My requirement"

Full example:
  version: "1.0"
  requirements:
    - summary: "User Authentication"
      name: "AUTH-001"
      description: "System must authenticate users"
      owner: "user@example.com\""""

SUMMARY_HINT = """\
Hint: A requirement summary must be a string.

Example:
  - summary: "User Authentication"
    name: "AUTH-001"

Common issues:
  - Using a list or mapping as the summary
  - Leaving the summary empty (`summary:` with no value)"""

NESTING_HINT = """\
Hint: The document is nested too deeply to be read.

Deep hierarchies can usually be flattened by defining requirements at the
top level and referring to them by name from their parents."""

SYNTAX_HINT = """\
Hint: Check the YAML syntax and structure.

Common issues:
  - Incorrect indentation (YAML uses 2 spaces)
  - Missing colon after field names
  - Using tabs instead of spaces
  - Unclosed quotes

Example of correct structure:
  version: "1.0"
  requirements:
    - summary: "Requirement 1"
      description: "Description here\""""

_SCALAR_TYPES = (str, int, float, bool)

# libyaml builds nodes without recursing once per nesting level
_LOADER = yaml.CSafeLoader if yaml.__with_libyaml__ else yaml.SafeLoader
_DUMPER = yaml.CSafeDumper if yaml.__with_libyaml__ else yaml.SafeDumper


# =============================================================================
# Value Coercion
# =============================================================================


def _scalar_text(value: object) -> str | None:
    """Return a scalar value as text, or None for absent/non-scalar values."""
    if isinstance(value, str):
        return value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, _SCALAR_TYPES):
        return str(value)
    return None


def _text_tuple(value: object) -> tuple[str, ...]:
    """Return the scalar items of a list as text; anything else is empty."""
    if not isinstance(value, list):
        return ()
    items = (_scalar_text(item) for item in value)
    return tuple(item for item in items if item is not None)


def _enum_or_raw[E: StrEnum](enum_type: type[E], value: object) -> E | str | None:
    """Return the enum member for a known value, the raw text otherwise."""
    text = _scalar_text(value)
    if text is None:
        return None
    try:
        return enum_type(text)
    except ValueError:
        return text


# =============================================================================
# Parsing
# =============================================================================


def _is_inline(raw: object) -> bool:
    return isinstance(raw, Mapping) and raw.get("summary") is not None


def _build_node(
    data: Mapping[str, Any],  # pyright: ignore[reportExplicitAny]
    path: str,
    children: tuple[RequirementReference, ...],
) -> RequirementNode:
    summary = _scalar_text(data["summary"])
    if summary is None:
        msg = f"Requirement summary at {path}.summary must be a string"
        raise ParseError(msg, path=f"{path}.summary", hint=SUMMARY_HINT)

    return RequirementNode(
        summary=summary,
        name=_scalar_text(data.get("name")),
        description=_scalar_text(data.get("description")),
        justification=_scalar_text(data.get("justification")),
        acceptance_test=_scalar_text(data.get("acceptance_test")),
        acceptance_test_link=_scalar_text(data.get("acceptance_test_link")),
        owner=_scalar_text(data.get("owner")),
        priority=_enum_or_raw(Priority, data.get("priority")),
        status=_enum_or_raw(Status, data.get("status")),
        created_at=_scalar_text(data.get("created_at")),
        updated_at=_scalar_text(data.get("updated_at")),
        tags=_text_tuple(data.get("tags")),
        further_information=_text_tuple(data.get("further_information")),
        dependencies=_text_tuple(data.get("dependencies")),
        children=children,
    )


@dataclass(slots=True)
class _NodeFrame:
    """A requirement mapping whose children are still being built."""

    data: Mapping[str, Any]  # pyright: ignore[reportExplicitAny]
    path: str
    collector: list[RequirementReference]
    children: list[RequirementReference] = field(default_factory=list)


type _WorkItem = tuple[object, str, list[RequirementReference]] | _NodeFrame


def _parse_references(items: list[Any], path: str) -> tuple[RequirementReference, ...]:  # pyright: ignore[reportExplicitAny]
    """Build requirement references from a raw list, depth first.

    Each mapping is pushed twice: once to schedule its children and once,
    below them, to assemble the node after all children are built.
    """
    top: list[RequirementReference] = []
    stack: list[_WorkItem] = [
        (item, f"{path}[{i}]", top) for i, item in reversed(list(enumerate(items)))
    ]

    while stack:
        entry = stack.pop()
        if isinstance(entry, _NodeFrame):
            node = _build_node(entry.data, entry.path, tuple(entry.children))
            entry.collector.append(InlineReference(node))
            continue

        raw, item_path, collector = entry
        if isinstance(raw, str):
            collector.append(NamedReference(raw))
            continue
        if not _is_inline(raw):
            if isinstance(raw, Mapping):
                kind = "mapping without 'summary'"
            else:
                kind = type(raw).__name__
            msg = (
                f"Invalid requirement reference at {item_path}: expected a string "
                f"or a mapping with 'summary', got {kind}"
            )
            raise ParseError(msg, path=item_path, hint=REFERENCE_HINT)

        frame = _NodeFrame(data=raw, path=item_path, collector=collector)  # pyright: ignore[reportArgumentType]
        stack.append(frame)
        nested = raw.get(CHILDREN_KEY)  # pyright: ignore[reportAttributeAccessIssue]
        if isinstance(nested, list):
            child_path = f"{item_path}.{CHILDREN_KEY}"
            stack.extend(
                (child, f"{child_path}[{i}]", frame.children)
                for i, child in reversed(list(enumerate(nested)))
            )

    return tuple(top)


def _parse_aliases(value: object) -> tuple[PersonAlias, ...]:
    if not isinstance(value, list):
        return ()
    aliases: list[PersonAlias] = []
    for entry in value:
        if not isinstance(entry, Mapping):
            continue
        alias = _scalar_text(entry.get("alias"))
        if alias is None:
            continue
        aliases.append(
            PersonAlias(
                alias=alias,
                name=_scalar_text(entry.get("name")) or "",
                email=_scalar_text(entry.get("email")),
                github=_scalar_text(entry.get("github")),
            )
        )
    return tuple(aliases)


def _require(data: Mapping[str, Any], key: str) -> Any:  # pyright: ignore[reportExplicitAny]
    value = data.get(key)
    if value is None:
        msg = f"Missing required field '{key}'"
        raise ParseError(
            msg, path=key, hint=MISSING_FIELD_HINT.format(field=key)
        )
    return value


def parse_data(data: object) -> RequirementDocument:
    """Build a requirement document from already-decoded data.

    Args:
        data: The decoded document, normally a mapping from YAML or JSON.

    Returns:
        The parsed requirement document.

    Raises:
        ParseError: If the top-level value is not a mapping, ``version`` or
            ``requirements`` is missing, ``requirements`` is not a list, or a
            requirement entry cannot be classified.
    """
    if not isinstance(data, Mapping):
        kind = "nothing" if data is None else type(data).__name__
        msg = f"Expected a mapping at the top level, got {kind}"
        raise ParseError(msg, hint=SYNTAX_HINT)

    version = _scalar_text(_require(data, "version"))
    if version is None:
        msg = "Field 'version' must be a string"
        raise ParseError(msg, path="version", hint=SYNTAX_HINT)

    requirements = _require(data, CHILDREN_KEY)
    if not isinstance(requirements, list):
        msg = (
            f"Field '{CHILDREN_KEY}' must be a list, "
            f"got {type(requirements).__name__}"
        )
        raise ParseError(msg, path=CHILDREN_KEY, hint=REFERENCE_HINT)

    further = data.get("further_information")
    return RequirementDocument(
        version=version,
        aliases=_parse_aliases(data.get("aliases")),
        requirements=_parse_references(requirements, CHILDREN_KEY),
        further_information=None if further is None else _text_tuple(further),
        source=MappingProxyType(dict(data)),
    )


def parse_document(text: str) -> RequirementDocument:
    """Parse requirement document text.

    Args:
        text: YAML (or JSON) document text.

    Returns:
        The parsed requirement document.

    Raises:
        ParseError: If the text is not valid YAML or the document structure
            is unusable.

    Example:
        >>> doc = parse_document('version: "1.0"\\nrequirements:\\n  - summary: A')
        >>> doc.requirements[0].key
        'A'
    """
    try:
        data = yaml.load(text, Loader=_LOADER)  # noqa: S506
    except yaml.MarkedYAMLError as e:
        mark = e.problem_mark or e.context_mark
        line = mark.line + 1 if mark is not None else None
        column = mark.column + 1 if mark is not None else None
        msg = f"YAML parsing error: {e}"
        raise ParseError(
            msg, line=line, column=column, hint=SYNTAX_HINT, cause=e
        ) from e
    except yaml.YAMLError as e:
        msg = f"YAML parsing error: {e}"
        raise ParseError(msg, hint=SYNTAX_HINT, cause=e) from e
    except RecursionError as e:
        msg = "YAML parsing error: document nesting exceeds the parser's depth limit"
        raise ParseError(msg, hint=NESTING_HINT, cause=e) from e

    return parse_data(data)


# =============================================================================
# Serialization
# =============================================================================


def _node_fields(node: RequirementNode) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    result: dict[str, Any] = {"summary": node.summary}  # pyright: ignore[reportExplicitAny]
    optional: list[tuple[str, object]] = [
        ("name", node.name),
        ("description", node.description),
        ("justification", node.justification),
        ("acceptance_test", node.acceptance_test),
        ("acceptance_test_link", node.acceptance_test_link),
        ("owner", node.owner),
        ("priority", node.priority),
        ("status", node.status),
        ("created_at", node.created_at),
        ("updated_at", node.updated_at),
    ]
    for key, value in optional:
        if value is not None:
            result[key] = str(value)
    for key, items in (
        ("tags", node.tags),
        ("further_information", node.further_information),
        ("dependencies", node.dependencies),
    ):
        if items:
            result[key] = list(items)
    return result


def _references_to_list(refs: tuple[RequirementReference, ...]) -> list[Any]:  # pyright: ignore[reportExplicitAny]
    top: list[Any] = []  # pyright: ignore[reportExplicitAny]
    stack: list[tuple[RequirementReference, list[Any]]] = [  # pyright: ignore[reportExplicitAny]
        (ref, top) for ref in reversed(refs)
    ]
    while stack:
        ref, collector = stack.pop()
        if isinstance(ref, NamedReference):
            collector.append(ref.target)
        elif isinstance(ref, InlineReference):
            entry = _node_fields(ref.node)
            collector.append(entry)
            if ref.node.children:
                nested: list[Any] = []  # pyright: ignore[reportExplicitAny]
                entry[CHILDREN_KEY] = nested
                stack.extend((child, nested) for child in reversed(ref.node.children))
        else:
            assert_never(ref)
    return top


def document_to_dict(document: RequirementDocument) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
    """Convert a document to plain data, omitting absent and empty fields."""
    result: dict[str, Any] = {"version": document.version}  # pyright: ignore[reportExplicitAny]
    if document.aliases:
        aliases: list[dict[str, str]] = []
        for alias in document.aliases:
            entry = {"alias": alias.alias}
            if alias.name:
                entry["name"] = alias.name
            if alias.email is not None:
                entry["email"] = alias.email
            if alias.github is not None:
                entry["github"] = alias.github
            aliases.append(entry)
        result["aliases"] = aliases
    result[CHILDREN_KEY] = _references_to_list(document.requirements)
    if document.further_information is not None:
        result["further_information"] = list(document.further_information)
    return result


def dump_document(document: RequirementDocument) -> str:
    """Serialize a document back to YAML text.

    Args:
        document: The document to serialize.

    Returns:
        YAML text that parses back to an equivalent document.
    """
    return yaml.dump(
        document_to_dict(document),
        Dumper=_DUMPER,
        default_flow_style=False,
        allow_unicode=True,
        sort_keys=False,
    )
