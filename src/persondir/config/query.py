"""Predicate building configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from persondir.domain.model import CaseCanonicalizationMode, QueryType

from .env import env_enum, env_flag, env_optional

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_USERNAME_ATTRIBUTE: Final[str] = "username"
DEFAULT_CASE_CANONICALIZATION_MODE: Final = CaseCanonicalizationMode.LOWER

DEFAULT_CANONICALIZATION_TEMPLATES: Final[Mapping[CaseCanonicalizationMode, str]] = (
    MappingProxyType(
        {
            CaseCanonicalizationMode.LOWER: "lower({0})",
            CaseCanonicalizationMode.UPPER: "upper({0})",
            CaseCanonicalizationMode.NONE: "{0}",
        }
    )
)


@dataclass(frozen=True, slots=True, kw_only=True)
class QueryConfig:
    """How query criteria are turned into a backend predicate.

    ``case_insensitive_data_attributes`` registers data-layer attributes whose
    references are wrapped in a case-folding function; a ``None`` mode falls
    back to ``default_case_canonicalization_mode``. Setting
    ``canonicalization_templates`` to ``None`` or an empty mapping disables
    all wrapping, even for registered attributes.
    """

    query_type: QueryType = QueryType.AND
    case_insensitive_data_attributes: Mapping[str, CaseCanonicalizationMode | None] | None = None
    canonicalization_templates: Mapping[CaseCanonicalizationMode, str] | None = field(
        default_factory=lambda: DEFAULT_CANONICALIZATION_TEMPLATES
    )
    default_case_canonicalization_mode: CaseCanonicalizationMode = (
        DEFAULT_CASE_CANONICALIZATION_MODE
    )
    wildcard_data_attributes: bool = False
    wildcarded_data_attribute_exclusions: frozenset[str] = frozenset()
    allow_username_wildcards: bool = True
    username_data_attribute: str | None = None
    username_attribute: str = DEFAULT_USERNAME_ATTRIBUTE

    @property
    def configured_username_data_attribute(self) -> str:
        """Username data attribute, falling back to the application username attribute."""

        if self.username_data_attribute is None:
            return self.username_attribute
        return self.username_data_attribute


def case_insensitive_attributes(
    names: Mapping[str, CaseCanonicalizationMode | None] | list[str] | tuple[str, ...] | None,
) -> Mapping[str, CaseCanonicalizationMode | None] | None:
    """Normalise a collection of attribute names into a mode mapping with default modes."""

    if not names:
        return None
    if isinstance(names, (list, tuple)):
        return MappingProxyType(dict.fromkeys(names))
    return MappingProxyType(dict(names))


def get_query_config() -> QueryConfig:
    username_data_attribute = env_optional("PERSONDIR_USERNAME_DATA_ATTRIBUTE")
    username_attribute = env_optional("PERSONDIR_USERNAME_ATTRIBUTE")
    exclusions = env_optional("PERSONDIR_WILDCARD_EXCLUSIONS")
    return QueryConfig(
        query_type=env_enum("PERSONDIR_QUERY_TYPE", QueryType, QueryType.AND),
        wildcard_data_attributes=env_flag("PERSONDIR_WILDCARD_DATA_ATTRIBUTES", default=False),
        wildcarded_data_attribute_exclusions=frozenset(
            name.strip() for name in (exclusions or "").split(",") if name.strip()
        ),
        allow_username_wildcards=env_flag("PERSONDIR_ALLOW_USERNAME_WILDCARDS", default=True),
        username_data_attribute=username_data_attribute,
        username_attribute=username_attribute or DEFAULT_USERNAME_ATTRIBUTE,
    )
