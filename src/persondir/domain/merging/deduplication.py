"""Deduplication policies for non-duplicating attribute merges.

Each :class:`DeduplicationMode` resolves to one policy object exposing three
hooks, called in this order while a source map is merged into a target map:

1. ``process_value`` for every source value of an attribute
2. ``post_process_attribute`` once per source attribute with values
3. ``post_process_all`` once after all source attributes were merged

Values are duplicates when equal by ``==`` (``None`` equals ``None``); the
first occurrence wins.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Final, Protocol

if TYPE_CHECKING:
    from collections.abc import Set as AbstractSet

    from persondir.domain.model import AttributeMap, AttributeValues


class DeduplicationPolicy(Protocol):
    def process_value(
        self, attribute_name: str, target_values: AttributeValues, value: object
    ) -> None: ...

    def post_process_attribute(self, attribute_name: str, merged_values: AttributeValues) -> None:
        ...

    def post_process_all(
        self, target: AttributeMap, merged_attribute_names: AbstractSet[str]
    ) -> None: ...


def deduplicate(values: AttributeValues) -> None:
    """Drop later duplicates from ``values`` in place, keeping first-occurrence order."""

    unique: list[object] = []
    for value in values:
        if value not in unique:
            unique.append(value)
    values[:] = unique


class SourceValuesDeduplication:
    """Suppress duplicates introduced by the source; pre-existing target duplicates stay."""

    def process_value(
        self, attribute_name: str, target_values: AttributeValues, value: object
    ) -> None:
        _ = attribute_name
        if value not in target_values:
            target_values.append(value)

    def post_process_attribute(self, attribute_name: str, merged_values: AttributeValues) -> None:
        _ = (attribute_name, merged_values)

    def post_process_all(
        self, target: AttributeMap, merged_attribute_names: AbstractSet[str]
    ) -> None:
        _ = (target, merged_attribute_names)


class CollidingTargetAttributesDeduplication(SourceValuesDeduplication):
    """Additionally deduplicate every attribute the source touched."""

    def post_process_attribute(self, attribute_name: str, merged_values: AttributeValues) -> None:
        _ = attribute_name
        deduplicate(merged_values)


class AllTargetAttributesDeduplication(CollidingTargetAttributesDeduplication):
    """Additionally deduplicate target attributes the source never touched."""

    def post_process_all(
        self, target: AttributeMap, merged_attribute_names: AbstractSet[str]
    ) -> None:
        for attribute_name, values in target.items():
            if attribute_name in merged_attribute_names:
                continue
            deduplicate(values)


class DeduplicationMode(StrEnum):
    SOURCE_VALUES = "source_values"
    COLLIDING_TARGET_ATTRIBUTES = "colliding_target_attributes"
    ALL_TARGET_ATTRIBUTES = "all_target_attributes"

    @property
    def policy(self) -> DeduplicationPolicy:
        return _POLICIES[self]


_POLICIES: Final[dict[DeduplicationMode, DeduplicationPolicy]] = {
    DeduplicationMode.SOURCE_VALUES: SourceValuesDeduplication(),
    DeduplicationMode.COLLIDING_TARGET_ATTRIBUTES: CollidingTargetAttributesDeduplication(),
    DeduplicationMode.ALL_TARGET_ATTRIBUTES: AllTargetAttributesDeduplication(),
}

DEFAULT_DEDUPLICATION_MODE: Final = DeduplicationMode.COLLIDING_TARGET_ATTRIBUTES
