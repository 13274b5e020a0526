"""Process-wide SQLAlchemy engine lifecycle for SQL-backed attribute sources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError

from persondir.config import InvalidConfigurationValueError, get_database_config

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


class StartupError(RuntimeError):
    """Raised when the SQLAlchemy adapter is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    engine: Engine | None = None


_STATE = _AdapterState()


def startup(
    *,
    engine: Engine | None = None,
    database_uri: str | None = None,
    force: bool = False,
) -> Engine:
    """Initialise the shared engine; ``DATABASE_URI`` is used when nothing is passed.

    A URI that SQLAlchemy cannot parse or has no driver for raises
    :class:`~persondir.config.InvalidConfigurationValueError`.
    """

    if _STATE.engine is not None and not force:
        raise StartupError(
            "SQLAlchemy adapter already initialised. Pass force=True to reconfigure."
        )

    resolved_engine = engine or _create_engine(database_uri or get_database_config().uri)
    if _STATE.engine is not None and _STATE.engine is not resolved_engine:
        _STATE.engine.dispose()
    _STATE.engine = resolved_engine
    return resolved_engine


def _create_engine(uri: str) -> Engine:
    try:
        return create_engine(uri, future=True)
    except SQLAlchemyError as exc:
        raise InvalidConfigurationValueError("database URI", uri, str(exc)) from exc


def configured_engine() -> Engine:
    """Return the engine currently managed by the adapter."""

    if _STATE.engine is None:
        raise StartupError(
            "SQLAlchemy adapter not initialised. Call persondir.adapters.sqlalchemy."
            "engine.startup() before building SQL attribute sources."
        )
    return _STATE.engine


def is_started() -> bool:
    """Return whether the adapter has been initialised."""

    return _STATE.engine is not None


def shutdown() -> None:
    """Dispose the managed engine and reset state (primarily for tests)."""

    if _STATE.engine is not None:
        _STATE.engine.dispose()
    _STATE.engine = None
