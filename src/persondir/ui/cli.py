# ruff: noqa: T201

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from persondir.app import build_sql_person_source, resolve_people
from persondir.common.logging import configure_logging
from persondir.config import ConfigurationError, get_query_config
from persondir.domain.model import QueryType
from persondir.domain.ports import BackendAccessError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from persondir.config import QueryConfig
    from persondir.domain.model import PersonAttributes

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Resolve person attributes")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log built predicates and executed statements",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    query = subparsers.add_parser("query", help="Query a SQL attribute source")
    query.add_argument(
        "--template",
        type=str,
        required=True,
        help="SQL query with a single {0} where the generated condition goes",
    )
    query.add_argument(
        "--join",
        type=str,
        choices=[member.value for member in QueryType],
        help="Operator joining criteria (defaults to config)",
    )
    query.add_argument(
        "--wildcard-data-attributes",
        action="store_true",
        default=None,
        help="Match non-username attributes as substrings",
    )
    query.add_argument(
        "--username-attribute",
        type=str,
        help="Attribute naming the username (defaults to config)",
    )
    query.add_argument(
        "--database-uri",
        type=str,
        help="SQLAlchemy database URI (defaults to DATABASE_URI)",
    )
    query.add_argument(
        "criteria",
        nargs="+",
        metavar="ATTRIBUTE=VALUE",
        help="Query criterion; repeat an attribute to query several values",
    )
    return parser.parse_args(list(argv))


def _parse_criteria(criteria: Sequence[str]) -> dict[str, list[object | None]]:
    query: dict[str, list[object | None]] = {}
    for criterion in criteria:
        name, separator, value = criterion.partition("=")
        if not separator or not name.strip():
            raise ValueError(f"Invalid criterion (expected ATTRIBUTE=VALUE): {criterion}")
        query.setdefault(name.strip(), []).append(value)
    return query


def _query_config(args: argparse.Namespace) -> QueryConfig:
    config = get_query_config()
    overrides: dict[str, object] = {}
    if args.join is not None:
        overrides["query_type"] = QueryType(args.join)
    if args.wildcard_data_attributes is not None:
        overrides["wildcard_data_attributes"] = args.wildcard_data_attributes
    if args.username_attribute is not None:
        overrides["username_attribute"] = args.username_attribute
    return dataclasses.replace(config, **overrides)


def _format_person(person: PersonAttributes) -> str:
    lines = [person.name]
    for name, values in sorted(person.attributes.items()):
        rendered = ", ".join("<null>" if value is None else str(value) for value in values)
        lines.append(f"  {name}: {rendered}")
    return "\n".join(lines)


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        configure_logging(
            level=logging.DEBUG if parsed_args.verbose else logging.INFO,
            echo_sql=parsed_args.verbose,
        )
        query = _parse_criteria(parsed_args.criteria)
        source = build_sql_person_source(
            parsed_args.template,
            query_config=_query_config(parsed_args),
            database_uri=parsed_args.database_uri,
        )
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        people = resolve_people(source, query)
    except BackendAccessError:
        log.exception("Backend access failed")
        sys.exit(1)
    except Exception:
        log.exception("Fatal error during query")
        sys.exit(1)

    for person in people:
        print(_format_person(person))


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
