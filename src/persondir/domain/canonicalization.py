"""Case canonicalization of data-layer references and attribute values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from persondir.domain.model import CaseCanonicalizationMode

if TYPE_CHECKING:
    from collections.abc import Mapping

    from persondir.config.query import QueryConfig


@dataclass(frozen=True, slots=True)
class CaseCanonicalizer:
    """Wrap case-insensitive attribute references in a case-folding function.

    Wrapping is strictly template driven: a missing or empty template mapping
    leaves every reference untouched, and so does a mode without a template.
    """

    case_insensitive_attributes: Mapping[str, CaseCanonicalizationMode | None] | None
    templates: Mapping[CaseCanonicalizationMode, str] | None
    default_mode: CaseCanonicalizationMode = CaseCanonicalizationMode.LOWER

    @classmethod
    def from_config(cls, config: QueryConfig) -> CaseCanonicalizer:
        return cls(
            case_insensitive_attributes=config.case_insensitive_data_attributes,
            templates=config.canonicalization_templates,
            default_mode=config.default_case_canonicalization_mode,
        )

    def canonicalize(self, attribute_name: str) -> str:
        attributes = self.case_insensitive_attributes
        if not attributes or attribute_name not in attributes:
            return attribute_name
        if not self.templates:
            return attribute_name
        mode = attributes[attribute_name] or self.default_mode
        template = self.templates.get(mode)
        if template is None:
            return attribute_name
        return template.format(attribute_name)


def canonicalize_value(value: object, mode: CaseCanonicalizationMode | None) -> object:
    """Case-fold a string value; anything else passes through unchanged."""

    if not isinstance(value, str):
        return value
    match mode:
        case CaseCanonicalizationMode.LOWER:
            return value.lower()
        case CaseCanonicalizationMode.UPPER:
            return value.upper()
        case _:
            return value


def canonicalize_values(
    attributes: Mapping[str, list[object]],
    modes: Mapping[str, CaseCanonicalizationMode | None] | None,
    *,
    default_mode: CaseCanonicalizationMode = CaseCanonicalizationMode.LOWER,
) -> dict[str, list[object]]:
    """Return a copy of ``attributes`` with registered attributes' values case-folded."""

    if not modes:
        return {name: list(values) for name, values in attributes.items()}
    canonicalized: dict[str, list[object]] = {}
    for name, values in attributes.items():
        if name not in modes:
            canonicalized[name] = list(values)
            continue
        mode = modes[name] or default_mode
        canonicalized[name] = [canonicalize_value(value, mode) for value in values]
    return canonicalized
