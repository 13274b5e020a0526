"""Application orchestration entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from persondir.adapters.sqlalchemy import (
    SingleRowMapper,
    SqlAlchemyQueryExecutor,
    configured_engine,
    is_started,
    startup,
)
from persondir.config import get_merge_config, get_query_config
from persondir.domain.aggregation import MergingPersonAttributeSource
from persondir.domain.merging import NonDuplicatingMultivaluedAttributeMerger
from persondir.domain.person_source import PersonAttributeSource
from persondir.domain.predicate import SqlDialect

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.engine import Engine

    from persondir.config import MergeConfig, QueryConfig, SourceConfig
    from persondir.domain.model import PersonAttributes
    from persondir.domain.ports import PersonAttributeDao, RecordMapper
    from persondir.domain.predicate import Query


log = getLogger(__name__)


def build_sql_person_source(
    query_template: str,
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    query_config: QueryConfig | None = None,
    source_config: SourceConfig | None = None,
    record_mapper: RecordMapper | None = None,
    username_column: str | None = None,
) -> PersonAttributeSource:
    """Build a SQL-backed attribute source.

    Without an explicit ``engine`` the adapter's shared engine is used. It is
    (re)initialised from ``database_uri`` when given, otherwise created from
    ``DATABASE_URI`` on first use.
    """

    if engine is None:
        if database_uri is not None:
            engine = startup(database_uri=database_uri, force=True)
        else:
            engine = configured_engine() if is_started() else startup()
    effective_query_config = query_config or get_query_config()
    mapper = record_mapper or SingleRowMapper(
        username_column or effective_query_config.configured_username_data_attribute
    )
    return PersonAttributeSource(
        executor=SqlAlchemyQueryExecutor(engine, query_template),
        record_mapper=mapper,
        dialect=SqlDialect(),
        query_config=effective_query_config,
        source_config=source_config,
        name="sql",
    )


def build_merging_source(
    sources: Sequence[PersonAttributeDao],
    *,
    merge_config: MergeConfig | None = None,
    username_attribute: str | None = None,
) -> MergingPersonAttributeSource:
    """Combine ``sources`` with a non-duplicating merger configured from ``merge_config``."""

    config = merge_config or get_merge_config()
    merger = NonDuplicatingMultivaluedAttributeMerger(
        deduplication_mode=config.deduplication_mode,
        case_sensitive_usernames=config.case_sensitive_usernames,
    )
    return MergingPersonAttributeSource(
        sources,
        merger=merger,
        username_attribute=username_attribute or get_query_config().username_attribute,
    )


def resolve_people(source: PersonAttributeDao, query: Query) -> list[PersonAttributes]:
    """Resolve the people matching ``query`` and log a summary."""

    log.info("Resolving people for %s using %r", dict(query), source)
    people = source.get_people(query)
    log.info("Resolved %d person(s)", len(people))
    return people
