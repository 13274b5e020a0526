"""Logging setup for the persondir command line and embedding applications."""

from __future__ import annotations

import logging

SQL_LOGGER = "sqlalchemy.engine"


def configure_logging(
    *,
    level: int = logging.INFO,
    force: bool = False,
    echo_sql: bool = False,
) -> None:
    """Configure the root logger for persondir output.

    SQLAlchemy's engine logger stays at WARNING unless ``echo_sql`` is set, in
    which case every statement sent to an attribute database is logged.
    ``force=True`` replaces handlers installed earlier.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    logging.getLogger(SQL_LOGGER).setLevel(logging.INFO if echo_sql else logging.WARNING)
