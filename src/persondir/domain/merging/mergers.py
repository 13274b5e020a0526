"""Attribute mergers combining results from several person attribute sources.

``merge_attributes`` merges one person's source attribute map into a target
map, mutating and returning the target. ``merge_results`` merges two result
lists person by person, matching on username.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Protocol

from persondir.domain.model import PersonAttributes

from .deduplication import DEFAULT_DEDUPLICATION_MODE, DeduplicationMode

if TYPE_CHECKING:
    from collections.abc import Iterable
    from collections.abc import Set as AbstractSet

    from persondir.domain.model import AttributeMap

log = logging.getLogger(__name__)


class AttributeMerger(Protocol):
    """Strategy for combining attribute maps and person results."""

    def merge_attributes(self, target: AttributeMap, source: AttributeMap) -> AttributeMap: ...

    def merge_results(
        self,
        target: list[PersonAttributes],
        source: Iterable[PersonAttributes],
    ) -> list[PersonAttributes]: ...

    def merge_available_query_attributes(
        self,
        target: set[str] | None,
        source: AbstractSet[str] | None,
    ) -> set[str] | None: ...

    def merge_possible_user_attribute_names(
        self,
        target: set[str] | None,
        source: AbstractSet[str] | None,
    ) -> set[str] | None: ...


class BaseAdditiveAttributeMerger(ABC):
    """Shared username matching and attribute-name union for additive mergers.

    With ``case_sensitive_usernames=False`` people whose names differ only in
    case are treated as one person, and the merged record is named with the
    lower-cased username regardless of which side it came from. Target people
    that already share a username are folded together before the source is
    merged in.
    """

    def __init__(self, *, case_sensitive_usernames: bool = True) -> None:
        self.case_sensitive_usernames = case_sensitive_usernames

    def merge_attributes(self, target: AttributeMap, source: AttributeMap) -> AttributeMap:
        return self._merge_person_attributes(target, source)

    def merge_results(
        self,
        target: list[PersonAttributes],
        source: Iterable[PersonAttributes],
    ) -> list[PersonAttributes]:
        positions = self._collapse(target)
        for person in source:
            key = self._username_key(person.name)
            position = positions.get(key)
            if position is None:
                positions[key] = len(target)
                target.append(person)
                continue
            target[position] = self._merged_person(target[position], person)
        return target

    def _collapse(self, target: list[PersonAttributes]) -> dict[str, int]:
        """Fold target people sharing a username key into the first of them."""

        positions: dict[str, int] = {}
        collapsed: list[PersonAttributes] = []
        for person in target:
            key = self._username_key(person.name)
            position = positions.get(key)
            if position is None:
                positions[key] = len(collapsed)
                collapsed.append(person)
            else:
                collapsed[position] = self._merged_person(collapsed[position], person)
        target[:] = collapsed
        return positions

    def _merged_person(
        self, existing: PersonAttributes, person: PersonAttributes
    ) -> PersonAttributes:
        merged_attributes = self.merge_attributes(
            {name: list(values) for name, values in existing.attributes.items()},
            person.attributes,
        )
        if self.case_sensitive_usernames:
            merged = PersonAttributes(existing.name, merged_attributes)
        else:
            merged = PersonAttributes.case_insensitive(existing.name, merged_attributes)
        log.debug("Merged attributes of colliding person %r", merged.name)
        return merged

    def merge_available_query_attributes(
        self,
        target: set[str] | None,
        source: AbstractSet[str] | None,
    ) -> set[str] | None:
        return _union_unless_unknown(target, source)

    def merge_possible_user_attribute_names(
        self,
        target: set[str] | None,
        source: AbstractSet[str] | None,
    ) -> set[str] | None:
        return _union_unless_unknown(target, source)

    def _username_key(self, name: str) -> str:
        return name if self.case_sensitive_usernames else name.lower()

    @abstractmethod
    def _merge_person_attributes(
        self, target: AttributeMap, source: AttributeMap
    ) -> AttributeMap: ...


def _union_unless_unknown(
    target: set[str] | None,
    source: AbstractSet[str] | None,
) -> set[str] | None:
    # None means "unknown", which absorbs any known set
    if target is None or source is None:
        return None
    target |= source
    return target


class MultivaluedAttributeMerger(BaseAdditiveAttributeMerger):
    """Append source values after target values, keeping every duplicate."""

    def _merge_person_attributes(self, target: AttributeMap, source: AttributeMap) -> AttributeMap:
        for name, values in source.items():
            merged = target.setdefault(name, [])
            if values is None:
                continue
            merged.extend(values)
        return target


class ReplacingAttributeMerger(BaseAdditiveAttributeMerger):
    """Source attributes replace colliding target attributes wholesale."""

    def _merge_person_attributes(self, target: AttributeMap, source: AttributeMap) -> AttributeMap:
        for name, values in source.items():
            target[name] = list(values) if values is not None else []
        return target


class NoncollidingAttributeAdder(BaseAdditiveAttributeMerger):
    """Only add source attributes the target does not have yet."""

    def _merge_person_attributes(self, target: AttributeMap, source: AttributeMap) -> AttributeMap:
        for name, values in source.items():
            if name not in target:
                target[name] = list(values) if values is not None else []
        return target


class NonDuplicatingMultivaluedAttributeMerger(BaseAdditiveAttributeMerger):
    """Multivalued merge filtered through a deduplication policy.

    Passing ``deduplication_mode=None`` selects
    :data:`~persondir.domain.merging.deduplication.DEFAULT_DEDUPLICATION_MODE`.
    """

    def __init__(
        self,
        *,
        deduplication_mode: DeduplicationMode | None = None,
        case_sensitive_usernames: bool = True,
    ) -> None:
        super().__init__(case_sensitive_usernames=case_sensitive_usernames)
        self.deduplication_mode = deduplication_mode or DEFAULT_DEDUPLICATION_MODE

    def _merge_person_attributes(self, target: AttributeMap, source: AttributeMap) -> AttributeMap:
        policy = self.deduplication_mode.policy
        merged_names: set[str] = set()
        for name, values in source.items():
            merged = target.setdefault(name, [])
            if values is None:
                continue
            for value in values:
                merged_names.add(name)
                policy.process_value(name, merged, value)
            policy.post_process_attribute(name, merged)

        policy.post_process_all(target, merged_names)
        return target
