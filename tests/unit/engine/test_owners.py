import pytest

from rqm.engine import OwnerKind, OwnerResolver, PersonAlias, parse_data, resolve_owner
from rqm.engine._owners import is_email, is_github_handle
from tests.conftest import document

ALIASES = {
    "jd": PersonAlias("jd", "Jane Doe", email="jane@example.com"),
    "@team": PersonAlias("@team", ""),
}


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("jane@example.com", True),
        ("a@b", True),
        ("@jane", False),
        ("jane", False),
        ("", False),
    ],
)
def test_is_email(value: str, expected: bool) -> None:
    assert is_email(value) is expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("@jane", True),
        ("@", False),
        ("jane", False),
        ("jane@example.com", False),
    ],
)
def test_is_github_handle(value: str, expected: bool) -> None:
    assert is_github_handle(value) is expected


class TestResolveOwner:
    def test_alias_match(self) -> None:
        resolution = resolve_owner("jd", ALIASES)

        assert resolution.kind == OwnerKind.ALIAS
        assert resolution.alias == ALIASES["jd"]
        assert resolution.resolved
        assert resolution.display_name == "Jane Doe"

    def test_alias_takes_precedence_over_handle(self) -> None:
        resolution = resolve_owner("@team", ALIASES)

        assert resolution.kind == OwnerKind.ALIAS
        assert resolution.display_name == "@team"

    def test_email(self) -> None:
        resolution = resolve_owner("bob@example.com", ALIASES)

        assert resolution.kind == OwnerKind.EMAIL
        assert resolution.alias is None
        assert resolution.display_name == "bob@example.com"

    def test_github_handle(self) -> None:
        assert resolve_owner("@octocat", ALIASES).kind == OwnerKind.GITHUB

    def test_unresolved(self) -> None:
        resolution = resolve_owner("somebody", ALIASES)

        assert resolution.kind == OwnerKind.UNRESOLVED
        assert not resolution.resolved

    def test_alias_match_is_exact(self) -> None:
        assert resolve_owner("JD", ALIASES).kind == OwnerKind.UNRESOLVED


class TestOwnerResolver:
    def test_binds_to_document_aliases(self) -> None:
        doc = parse_data(document(aliases=[{"alias": "bob", "name": "Bob"}]))

        resolver = OwnerResolver.for_document(doc)

        assert resolver.resolve("bob").kind == OwnerKind.ALIAS
        assert resolver.resolve("alice").kind == OwnerKind.UNRESOLVED

    def test_memoizes_results(self) -> None:
        resolver = OwnerResolver(ALIASES)

        assert resolver.resolve("jd") is resolver.resolve("jd")

    def test_first_duplicate_alias_wins(self) -> None:
        doc = parse_data(
            document(
                aliases=[
                    {"alias": "bob", "name": "Bob One"},
                    {"alias": "bob", "name": "Bob Two"},
                ]
            )
        )

        assert OwnerResolver.for_document(doc).resolve("bob").display_name == "Bob One"
