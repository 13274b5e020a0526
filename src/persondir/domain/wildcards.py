"""Wildcard injection for predicate values.

A ``*`` embedded in a query value is a user-specified wildcard and is
translated to the backend's native token for both attribute roles, except
that username values only honour it when username wildcards are allowed.
Username values are never wrapped automatically; data values are wrapped at
both ends when ``wildcard_data_attributes`` is enabled and the attribute is
not excluded.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Final, NamedTuple

from persondir.domain.model import AttributeRole

if TYPE_CHECKING:
    from persondir.config.query import QueryConfig

WILDCARD_MARKER: Final[str] = "*"


class FormattedValue(NamedTuple):
    value: str
    used_wildcard: bool


@dataclass(frozen=True, slots=True)
class WildcardPolicy:
    wildcard_token: str
    wildcard_data_attributes: bool = False
    wildcarded_data_attribute_exclusions: frozenset[str] = frozenset()
    allow_username_wildcards: bool = True

    @classmethod
    def from_config(cls, config: QueryConfig, *, wildcard_token: str) -> WildcardPolicy:
        return cls(
            wildcard_token=wildcard_token,
            wildcard_data_attributes=config.wildcard_data_attributes,
            wildcarded_data_attribute_exclusions=config.wildcarded_data_attribute_exclusions,
            allow_username_wildcards=config.allow_username_wildcards,
        )

    def format(
        self,
        role: AttributeRole,
        raw_value: str,
        *,
        attribute_name: str | None = None,
    ) -> FormattedValue:
        has_marker = WILDCARD_MARKER in raw_value
        if role is AttributeRole.USERNAME:
            if has_marker and self.allow_username_wildcards:
                return self._translated(raw_value)
            return FormattedValue(raw_value, used_wildcard=False)

        if has_marker:
            return self._translated(raw_value)
        if self.wildcard_data_attributes and not self._is_excluded(attribute_name):
            token = self.wildcard_token
            return FormattedValue(f"{token}{raw_value}{token}", used_wildcard=True)
        return FormattedValue(raw_value, used_wildcard=False)

    def _translated(self, raw_value: str) -> FormattedValue:
        return FormattedValue(
            raw_value.replace(WILDCARD_MARKER, self.wildcard_token), used_wildcard=True
        )

    def _is_excluded(self, attribute_name: str | None) -> bool:
        return attribute_name is not None and (
            attribute_name in self.wildcarded_data_attribute_exclusions
        )
