"""Owner reference resolution.

An owner is resolved against the document's alias table first, then
classified by shape: an email address or a GitHub handle. Anything else is
unresolved. The alias table is always passed in explicitly.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import StrEnum

from ._models import PersonAlias, RequirementDocument

__all__ = [
    "OwnerKind",
    "OwnerResolution",
    "OwnerResolver",
    "is_email",
    "is_github_handle",
    "resolve_owner",
]


class OwnerKind(StrEnum):
    """How an owner reference was resolved."""

    ALIAS = "alias"
    EMAIL = "email"
    GITHUB = "github"
    UNRESOLVED = "unresolved"


@dataclass(frozen=True, slots=True)
class OwnerResolution:
    """The outcome of resolving one owner reference.

    Attributes:
        value: The raw owner string.
        kind: How the owner was resolved.
        alias: The matching alias definition, for ``OwnerKind.ALIAS``.
    """

    value: str
    kind: OwnerKind
    alias: PersonAlias | None = None

    @property
    def resolved(self) -> bool:
        return self.kind != OwnerKind.UNRESOLVED

    @property
    def display_name(self) -> str:
        """Full name for aliases that define one, the raw value otherwise."""
        if self.alias is not None and self.alias.name:
            return self.alias.name
        return self.value


def is_email(value: str) -> bool:
    """Check whether a string is email-shaped (contains '@', not leading)."""
    return "@" in value and not value.startswith("@")


def is_github_handle(value: str) -> bool:
    """Check whether a string is a GitHub handle (leading '@')."""
    return value.startswith("@") and len(value) > 1


def resolve_owner(value: str, aliases: Mapping[str, PersonAlias]) -> OwnerResolution:
    """Resolve a raw owner string.

    Args:
        value: The owner reference.
        aliases: Alias table keyed by alias value.

    Returns:
        The resolution, with ``kind`` set to ``OwnerKind.UNRESOLVED`` when
        the value matches no alias and has neither accepted shape.
    """
    alias = aliases.get(value)
    if alias is not None:
        return OwnerResolution(value, OwnerKind.ALIAS, alias)
    if is_email(value):
        return OwnerResolution(value, OwnerKind.EMAIL)
    if is_github_handle(value):
        return OwnerResolution(value, OwnerKind.GITHUB)
    return OwnerResolution(value, OwnerKind.UNRESOLVED)


class OwnerResolver:
    """Resolves owners against one document's alias table.

    Results are memoized per raw value for the lifetime of the resolver.
    """

    def __init__(self, aliases: Mapping[str, PersonAlias]) -> None:
        self._aliases: Mapping[str, PersonAlias] = aliases
        self._cache: dict[str, OwnerResolution] = {}

    @classmethod
    def for_document(cls, document: RequirementDocument) -> "OwnerResolver":
        """Create a resolver bound to a document's alias table."""
        return cls(document.alias_map())

    def resolve(self, value: str) -> OwnerResolution:
        cached = self._cache.get(value)
        if cached is None:
            cached = resolve_owner(value, self._aliases)
            self._cache[value] = cached
        return cached
