"""Execute SQL predicates through SQLAlchemy."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Final

from sqlalchemy.exc import SQLAlchemyError

from persondir.config import ConfigurationError
from persondir.domain.ports import BackendAccessError
from persondir.domain.predicate import PLACEHOLDER

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from persondir.domain.ports import BackendRecord
    from persondir.domain.predicate import Predicate

WHERE_PLACEHOLDER: Final[str] = "{0}"
UNFILTERED_CONDITION: Final[str] = "1 = 1"
_QMARK = re.compile(re.escape(PLACEHOLDER))

log = logging.getLogger(__name__)

type DriverParameters = tuple[object, ...] | dict[str, object]


class SqlAlchemyQueryExecutor:
    """Substitute a predicate into a query template and run it.

    ``query_template`` is plain SQL with a single ``{0}`` where the generated
    condition goes, for example ``SELECT * FROM person WHERE {0}``. A query
    without usable criteria runs the template with an always-true condition.
    """

    def __init__(self, engine: Engine, query_template: str) -> None:
        if not query_template or not query_template.strip():
            raise ConfigurationError("query_template must not be blank")
        if WHERE_PLACEHOLDER not in query_template:
            raise ConfigurationError(
                f"query_template must contain the {WHERE_PLACEHOLDER} condition placeholder"
            )
        self.engine = engine
        self.query_template = query_template

    def __call__(self, predicate: Predicate | None) -> list[BackendRecord]:
        if predicate is None:
            condition, arguments = UNFILTERED_CONDITION, ()
        else:
            condition, arguments = predicate.text, predicate.arguments
        statement = self.query_template.replace(WHERE_PLACEHOLDER, condition)
        driver_statement, parameters = _driver_statement(
            self.query_template, condition, arguments, self.engine.dialect.paramstyle
        )

        try:
            with self.engine.connect() as connection:
                result = connection.exec_driver_sql(driver_statement, parameters)
                rows: list[BackendRecord] = [dict(row._mapping) for row in result]  # noqa: SLF001
        except SQLAlchemyError as exc:
            raise BackendAccessError(f"Failed to execute {statement!r}: {exc}") from exc

        log.debug(
            "Executed %r with arguments %s and got %d row(s)", statement, list(arguments), len(rows)
        )
        return rows


def _driver_statement(
    template: str,
    condition: str,
    arguments: tuple[object, ...],
    paramstyle: str,
) -> tuple[str, DriverParameters]:
    """Rewrite the condition's ``?`` placeholders into the DBAPI driver's style.

    Only ``condition`` is rewritten; a ``?`` inside the template's own SQL is
    left alone.
    """

    match paramstyle:
        case "qmark":
            return template.replace(WHERE_PLACEHOLDER, condition), arguments
        case "format" | "pyformat":
            rewritten = _QMARK.sub("%s", condition.replace("%", "%%"))
            escaped = template.replace("%", "%%")
            return escaped.replace(WHERE_PLACEHOLDER, rewritten), arguments
        case "numeric":
            counter = iter(range(1, len(arguments) + 1))
            rewritten = _QMARK.sub(lambda _match: f":{next(counter)}", condition)
            return template.replace(WHERE_PLACEHOLDER, rewritten), arguments
        case "named":
            counter = iter(range(len(arguments)))
            rewritten = _QMARK.sub(lambda _match: f":p{next(counter)}", condition)
            return (
                template.replace(WHERE_PLACEHOLDER, rewritten),
                {f"p{index}": value for index, value in enumerate(arguments)},
            )
        case _:
            raise ConfigurationError(f"Unsupported DBAPI paramstyle: {paramstyle}")
