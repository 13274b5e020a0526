"""Attribute mapping configuration for a single person attribute source."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from .errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from persondir.domain.model import CaseCanonicalizationMode

type AttributeMapping = Mapping[str, tuple[str, ...]]


@dataclass(frozen=True, slots=True, kw_only=True)
class SourceConfig:
    """Name mappings and result canonicalization for one source.

    ``query_attribute_mapping`` maps application attribute names to the
    data-layer attributes they are queried as; ``result_attribute_mapping``
    maps data-layer attributes back to application names. Build both with
    :func:`attribute_mapping`.
    """

    query_attribute_mapping: AttributeMapping | None = None
    result_attribute_mapping: AttributeMapping | None = None
    use_all_query_attributes: bool = True
    require_all_query_attributes: bool = False
    case_insensitive_query_attributes: Mapping[str, CaseCanonicalizationMode | None] | None = None
    case_insensitive_result_attributes: Mapping[str, CaseCanonicalizationMode | None] | None = None
    username_case_canonicalization_mode: CaseCanonicalizationMode | None = None

    def __post_init__(self) -> None:
        if self.require_all_query_attributes and not self.query_attribute_mapping:
            raise ConfigurationError(
                "require_all_query_attributes needs a non-empty query_attribute_mapping"
            )


def attribute_mapping(
    mapping: Mapping[str, str | Iterable[str] | None],
) -> AttributeMapping:
    """Normalise ``name -> target(s)`` into ``name -> tuple``; ``None`` maps a name to itself."""

    normalized: dict[str, tuple[str, ...]] = {}
    for name, targets in mapping.items():
        if not name:
            raise ConfigurationError("Attribute mapping keys must not be blank")
        if targets is None:
            normalized[name] = (name,)
        elif isinstance(targets, str):
            normalized[name] = (targets,)
        else:
            normalized[name] = tuple(targets)
    return MappingProxyType(normalized)
