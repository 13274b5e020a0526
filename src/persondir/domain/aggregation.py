"""Resolve people across several attribute sources and merge their results."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from persondir.domain.merging import MultivaluedAttributeMerger
from persondir.domain.ports import IncorrectResultSizeError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from persondir.domain.merging import AttributeMerger
    from persondir.domain.model import PersonAttributes
    from persondir.domain.ports import PersonAttributeDao
    from persondir.domain.predicate import Query

log = logging.getLogger(__name__)


class MergingPersonAttributeSource:
    """Query every child source in order and fold the results with a merger.

    Sources are queried sequentially; a backend failure in any source
    propagates to the caller.
    """

    def __init__(
        self,
        sources: Sequence[PersonAttributeDao],
        *,
        merger: AttributeMerger | None = None,
        username_attribute: str = "username",
    ) -> None:
        if not sources:
            raise ValueError("MergingPersonAttributeSource needs at least one source")
        self.sources = tuple(sources)
        self.merger = merger or MultivaluedAttributeMerger()
        self.username_attribute = username_attribute

    def get_people(self, query: Query) -> list[PersonAttributes]:
        merged: list[PersonAttributes] = []
        for source in self.sources:
            people = source.get_people(query)
            log.debug("%r returned %d person(s)", source, len(people))
            merged = self.merger.merge_results(merged, people)
        return merged

    def get_person(self, username: str) -> PersonAttributes | None:
        people = self.get_people({self.username_attribute: [username]})
        if not people:
            return None
        if len(people) > 1:
            raise IncorrectResultSizeError(username, len(people))
        return people[0]

    @property
    def available_query_attributes(self) -> set[str] | None:
        merged: set[str] | None = set()
        for source in self.sources:
            merged = self.merger.merge_available_query_attributes(
                merged, source.available_query_attributes
            )
        return merged

    @property
    def possible_user_attribute_names(self) -> set[str] | None:
        merged: set[str] | None = set()
        for source in self.sources:
            merged = self.merger.merge_possible_user_attribute_names(
                merged, source.possible_user_attribute_names
            )
        return merged
