"""Query one backing store for people and their attributes.

Pipeline for :meth:`PersonAttributeSource.get_people`:

1. case-fold values of case-insensitive query attributes
2. map application attribute names to data-layer names
3. short-circuit when required attributes are missing (no backend call)
4. build the predicate and hand it to the backend executor
5. map raw records to ``(username, attributes)`` and group them per person
6. map data-layer names back to application names and case-fold results
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from persondir.config.query import QueryConfig
from persondir.config.source import SourceConfig
from persondir.domain.canonicalization import canonicalize_value, canonicalize_values
from persondir.domain.merging import MultivaluedAttributeMerger
from persondir.domain.model import PersonAttributes
from persondir.domain.ports import IncorrectResultSizeError
from persondir.domain.predicate import PredicateBuilder
from persondir.domain.wildcards import WILDCARD_MARKER

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from persondir.domain.merging import AttributeMerger
    from persondir.domain.model import AttributeMap
    from persondir.domain.ports import BackendExecutor, BackendRecord, RecordMapper
    from persondir.domain.predicate import PredicateDialect, Query

log = logging.getLogger(__name__)


class PersonAttributeSource:
    """Person attribute DAO composed from a dialect, an executor and a record mapper."""

    def __init__(
        self,
        *,
        executor: BackendExecutor,
        record_mapper: RecordMapper,
        dialect: PredicateDialect,
        query_config: QueryConfig | None = None,
        source_config: SourceConfig | None = None,
        row_merger: AttributeMerger | None = None,
        name: str | None = None,
    ) -> None:
        self.executor = executor
        self.record_mapper = record_mapper
        self.query_config = query_config or QueryConfig()
        self.source_config = source_config or SourceConfig()
        self.builder = PredicateBuilder(self.query_config, dialect)
        self.row_merger = row_merger or MultivaluedAttributeMerger()
        self.name = name or type(executor).__name__

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"

    @property
    def available_query_attributes(self) -> set[str] | None:
        mapping = self.source_config.query_attribute_mapping
        if mapping:
            return set(mapping)
        return None

    @property
    def possible_user_attribute_names(self) -> set[str] | None:
        mapping = self.source_config.result_attribute_mapping
        if mapping is None:
            return None
        return {target for targets in mapping.values() for target in targets}

    def get_person(self, username: str) -> PersonAttributes | None:
        people = self.get_people({self.query_config.username_attribute: [username]})
        if not people:
            return None
        if len(people) > 1:
            raise IncorrectResultSizeError(username, len(people))
        return people[0]

    def get_people(self, query: Query) -> list[PersonAttributes]:
        data_query = self._data_query(query)
        if data_query is None:
            log.debug("%s: insufficient query attributes in %s, skipping backend", self, query)
            return []

        predicate = self.builder.build(data_query)
        records = self.executor(predicate)
        people = self._people_from_records(records, self._query_username(query))
        log.debug("%s: resolved %d person(s)", self, len(people))
        return people

    def _data_query(self, query: Query) -> dict[str, list[object | None]] | None:
        """Return the data-layer query, or ``None`` when a required attribute is absent."""

        config = self.source_config
        query = self._canonicalized_query(query)
        mapping = config.query_attribute_mapping
        if not mapping:
            if not config.use_all_query_attributes:
                return {}
            return {name: list(values) for name, values in query.items()}

        data_query: dict[str, list[object | None]] = {}
        for name, data_names in mapping.items():
            values = query.get(name)
            if not _has_usable_value(values):
                if config.require_all_query_attributes:
                    return None
                continue
            for data_name in data_names:
                data_query.setdefault(data_name, []).extend(values or ())
        return data_query

    def _canonicalized_query(self, query: Query) -> dict[str, list[object | None]]:
        modes = self.source_config.case_insensitive_query_attributes
        return canonicalize_values(
            {name: list(values) for name, values in query.items()},
            modes,
            default_mode=self.query_config.default_case_canonicalization_mode,
        )

    def _query_username(self, query: Query) -> str | None:
        """Username named by the query, unless it is absent, blank or wildcarded."""

        for value in query.get(self.query_config.username_attribute, ()):
            if value is None:
                continue
            username = str(value)
            if not username.strip():
                continue
            if WILDCARD_MARKER in username:
                return None
            return username
        return None

    def _people_from_records(
        self,
        records: Iterable[BackendRecord],
        query_username: str | None,
    ) -> list[PersonAttributes]:
        grouped: dict[str, AttributeMap] = {}
        for record in records:
            username, attributes = self.record_mapper(record)
            name = _resolve_username(username, query_username)
            if name is None:
                log.warning("%s: dropping record without a username: %s", self, record)
                continue
            existing = grouped.get(name)
            if existing is None:
                grouped[name] = {key: list(values) for key, values in attributes.items()}
            else:
                self.row_merger.merge_attributes(existing, attributes)

        return [self._person(name, attributes) for name, attributes in grouped.items()]

    def _person(self, name: str, attributes: AttributeMap) -> PersonAttributes:
        config = self.source_config
        mapped = canonicalize_values(
            self._result_attributes(attributes),
            config.case_insensitive_result_attributes,
            default_mode=self.query_config.default_case_canonicalization_mode,
        )
        username = canonicalize_value(name, config.username_case_canonicalization_mode)
        return PersonAttributes(str(username), mapped)

    def _result_attributes(self, attributes: AttributeMap) -> AttributeMap:
        mapping = self.source_config.result_attribute_mapping
        if mapping is None:
            return attributes
        mapped: AttributeMap = {}
        for data_name, values in attributes.items():
            for name in mapping.get(data_name, ()):
                mapped.setdefault(name, []).extend(values)
        return mapped


def _has_usable_value(values: Sequence[object | None] | None) -> bool:
    if not values:
        return False
    return any(value is not None and str(value).strip() for value in values)


def _resolve_username(record_username: str | None, query_username: str | None) -> str | None:
    # the query's casing wins when both name the same person
    if record_username is None:
        return query_username
    if query_username is not None and query_username.lower() == record_username.lower():
        return query_username
    return record_username
