from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine  # noqa: TC002
from sqlalchemy.pool import StaticPool

from persondir.adapters.sqlalchemy import SingleRowMapper, SqlAlchemyQueryExecutor, shutdown
from persondir.config import SourceConfig, attribute_mapping
from persondir.domain.person_source import PersonAttributeSource
from persondir.domain.predicate import SqlDialect

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

    from persondir.config import QueryConfig

PERSON_QUERY = "SELECT netid, name, email FROM person WHERE {0}"

PEOPLE = (
    {"netid": "awp9", "name": "Andrew", "email": "andrew.petro@example.edu"},
    {"netid": "atest", "name": "Andrew", "email": "andrew.test@example.edu"},
    {"netid": "susan", "name": "Susan", "email": "susan.helena@example.edu"},
)


def _case_sensitive_like(dbapi_connection: object, _connection_record: object) -> None:
    cursor = dbapi_connection.cursor()  # type: ignore[attr-defined]
    cursor.execute("PRAGMA case_sensitive_like = ON")
    cursor.close()


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(engine, "connect", _case_sensitive_like)
    with engine.begin() as connection:
        connection.execute(
            text("CREATE TABLE person (netid VARCHAR(8), name VARCHAR(50), email VARCHAR(50))")
        )
        connection.execute(
            text("INSERT INTO person (netid, name, email) VALUES (:netid, :name, :email)"),
            list(PEOPLE),
        )
    try:
        yield engine
    finally:
        shutdown()
        engine.dispose()


@pytest.fixture
def person_mappings() -> dict[str, object]:
    return {
        "query_attribute_mapping": attribute_mapping(
            {"username": "netid", "firstName": "name", "emailAddr": "email"}
        ),
        "result_attribute_mapping": attribute_mapping(
            {"netid": "username", "name": "firstName", "email": "emailAddr"}
        ),
        "use_all_query_attributes": False,
    }


@pytest.fixture
def make_sql_source(
    sqlite_engine: Engine,
    person_mappings: dict[str, object],
) -> Callable[..., PersonAttributeSource]:
    def factory(
        query_config: QueryConfig | None = None,
        **source_options: object,
    ) -> PersonAttributeSource:
        options = {**person_mappings, **source_options}
        return PersonAttributeSource(
            executor=SqlAlchemyQueryExecutor(sqlite_engine, PERSON_QUERY),
            record_mapper=SingleRowMapper("netid"),
            dialect=SqlDialect(),
            query_config=query_config,
            source_config=SourceConfig(**options),  # type: ignore[arg-type]
        )

    return factory
