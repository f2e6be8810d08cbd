# pyright: reportPrivateUsage=false
from typing import TYPE_CHECKING

import pytest

from rqm.engine import (
    InlineReference,
    NamedReference,
    PersonAlias,
    Priority,
    Status,
    document_to_dict,
    dump_document,
    parse_data,
    parse_document,
)
from rqm.exceptions import ParseError
from tests.conftest import document, nested_chain, requirement, to_yaml

if TYPE_CHECKING:
    from pytest_mock import MockerFixture


class TestParseDocument:
    def test_parses_inline_and_named_references(self) -> None:
        text = to_yaml(
            document(
                requirement("Parent", name="P-1", children=["Other", requirement("Child")]),
                "Other",
            )
        )

        doc = parse_document(text)

        parent, other = doc.requirements
        assert isinstance(parent, InlineReference)
        assert isinstance(other, NamedReference)
        assert other.target == "Other"
        named, inline = parent.node.children
        assert named == NamedReference("Other")
        assert isinstance(inline, InlineReference)
        assert inline.node.summary == "Child"

    def test_identity_key_prefers_name(self) -> None:
        doc = parse_data(document(requirement("Login", name="AUTH-1"), requirement("Logout")))

        assert [ref.key for ref in doc.requirements] == ["AUTH-1", "Logout"]

    def test_empty_name_falls_back_to_summary(self) -> None:
        doc = parse_data(document(requirement("Login", name="")))

        assert doc.requirements[0].key == "Login"

    def test_parses_all_requirement_fields(self) -> None:
        text = """\
version: "1.0"
requirements:
  - summary: Full
    name: F-1
    description: Desc
    justification: Why
    acceptance_test: Test it
    acceptance_test_link: https://example.com/test
    owner: "@octo"
    priority: critical
    status: verified
    created_at: 2024-01-15
    updated_at: "2024-02-01T10:00:00Z"
    tags: [a, b]
    further_information: [note]
    dependencies: [F-2]
"""
        node = parse_document(text).requirements[0]

        assert isinstance(node, InlineReference)
        n = node.node
        assert n.name == "F-1"
        assert n.description == "Desc"
        assert n.justification == "Why"
        assert n.acceptance_test == "Test it"
        assert n.acceptance_test_link == "https://example.com/test"
        assert n.owner == "@octo"
        assert n.priority is Priority.CRITICAL
        assert n.status is Status.VERIFIED
        assert n.created_at == "2024-01-15"
        assert n.updated_at == "2024-02-01T10:00:00Z"
        assert n.tags == ("a", "b")
        assert n.further_information == ("note",)
        assert n.dependencies == ("F-2",)

    def test_keeps_unknown_enum_values_raw(self) -> None:
        doc = parse_data(document(requirement("A", priority="urgent", status="done")))

        node = doc.requirements[0]
        assert isinstance(node, InlineReference)
        assert node.node.priority == "urgent"
        assert not isinstance(node.node.priority, Priority)
        assert node.node.status == "done"

    def test_numeric_version_becomes_text(self) -> None:
        doc = parse_document("version: 1.0\nrequirements: []\n")

        assert doc.version == "1.0"

    def test_parses_aliases(self) -> None:
        doc = parse_data(
            document(
                aliases=[
                    {"alias": "jd", "name": "Jane Doe", "email": "jane@example.com"},
                    {"alias": "bob", "name": "Bob", "github": "bobgh"},
                ]
            )
        )

        assert doc.aliases == (
            PersonAlias("jd", "Jane Doe", email="jane@example.com"),
            PersonAlias("bob", "Bob", github="bobgh"),
        )
        assert doc.alias_map()["bob"].github == "bobgh"

    def test_further_information_absent_is_none(self) -> None:
        assert parse_data(document()).further_information is None

    def test_further_information_present(self) -> None:
        data = document()
        data["further_information"] = ["see wiki"]

        assert parse_data(data).further_information == ("see wiki",)

    def test_empty_requirement_list_is_allowed(self) -> None:
        doc = parse_document('version: "1.0"\nrequirements: []\n')

        assert doc.requirements == ()

    def test_keeps_raw_source_mapping(self) -> None:
        doc = parse_data(document(requirement("A", extra="x")))

        assert doc.source["requirements"][0]["extra"] == "x"

    def test_iter_nodes_is_pre_order(self) -> None:
        doc = parse_data(
            document(
                requirement("A", children=[requirement("B", children=[requirement("C")])]),
                requirement("D"),
            )
        )

        assert [node.summary for node in doc.iter_nodes()] == ["A", "B", "C", "D"]

    def test_parses_deep_nesting_without_recursion(self) -> None:
        doc = parse_data(nested_chain(3000))

        assert sum(1 for _ in doc.iter_nodes()) == 3000


class TestParseErrors:
    def test_invalid_yaml_reports_location(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            _ = parse_document('version: "1.0"\nrequirements:\n  - summary: "open\n')

        error = exc_info.value
        assert error.line is not None
        assert error.column is not None
        assert "YAML parsing error" in str(error)
        assert error.hint is not None
        assert "Check the YAML syntax" in error.hint

    def test_empty_text_is_rejected(self) -> None:
        with pytest.raises(ParseError, match="got nothing"):
            _ = parse_document("")

    def test_top_level_list_is_rejected(self) -> None:
        with pytest.raises(ParseError, match="got list"):
            _ = parse_document("- a\n- b\n")

    def test_missing_version(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            _ = parse_document("requirements: []\n")

        assert exc_info.value.path == "version"
        assert "Missing required field 'version'" in str(exc_info.value)
        assert "Required field 'version' is missing" in exc_info.value.describe()

    def test_missing_requirements(self) -> None:
        with pytest.raises(ParseError, match="'requirements'") as exc_info:
            _ = parse_document('version: "1.0"\n')

        assert exc_info.value.path == "requirements"

    def test_requirements_must_be_a_list(self) -> None:
        with pytest.raises(ParseError, match="must be a list, got str"):
            _ = parse_document('version: "1.0"\nrequirements: nope\n')

    def test_number_reference_is_rejected(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            _ = parse_data(document(42))

        assert exc_info.value.path == "requirements[0]"
        assert "got int" in str(exc_info.value)
        assert exc_info.value.hint is not None
        assert "Valid formats" in exc_info.value.hint

    def test_mapping_without_summary_is_rejected(self) -> None:
        with pytest.raises(ParseError, match="mapping without 'summary'"):
            _ = parse_data(document({"name": "X"}))

    def test_nested_error_path(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            _ = parse_data(document(requirement("A", children=["ok", ["bad"]])))

        assert exc_info.value.path == "requirements[0].requirements[1]"

    def test_non_scalar_summary_is_rejected(self) -> None:
        with pytest.raises(ParseError) as exc_info:
            _ = parse_data(document({"summary": {"nested": True}}))

        assert exc_info.value.path == "requirements[0].summary"
        assert exc_info.value.hint is not None
        assert "summary must be a string" in exc_info.value.hint

    def test_parser_recursion_becomes_parse_error(self, mocker: "MockerFixture") -> None:
        _ = mocker.patch("rqm.engine._parser.yaml.load", side_effect=RecursionError)

        with pytest.raises(ParseError) as exc_info:
            _ = parse_document("version: '1.0'\nrequirements: []\n")

        assert "depth limit" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, RecursionError)

    def test_describe_without_hint_is_message(self) -> None:
        error = ParseError("boom")

        assert error.describe() == "boom"


class TestSerialization:
    def test_document_to_dict_omits_absent_fields(self) -> None:
        doc = parse_data(document(requirement("A", name="A-1", children=["B"])))

        assert document_to_dict(doc) == {
            "version": "1.0",
            "requirements": [
                {"summary": "A", "name": "A-1", "requirements": ["B"]},
            ],
        }

    def test_dump_then_parse_preserves_document(
        self, sample_document: dict[str, object]
    ) -> None:
        original = parse_data(sample_document)

        assert parse_document(dump_document(original)) == original

    def test_dump_keeps_dates_as_text(self) -> None:
        doc = parse_document(
            'version: "1.0"\nrequirements:\n  - summary: A\n    created_at: 2024-01-15\n'
        )

        reparsed = parse_document(dump_document(doc))

        node = reparsed.requirements[0]
        assert isinstance(node, InlineReference)
        assert node.node.created_at == "2024-01-15"
