"""SQLAlchemy adapter package for persondir."""

from __future__ import annotations

from .engine import StartupError, configured_engine, is_started, shutdown, startup
from .executor import SqlAlchemyQueryExecutor
from .mappers import MultiRowMapper, SingleRowMapper

__all__ = [
    "MultiRowMapper",
    "SingleRowMapper",
    "SqlAlchemyQueryExecutor",
    "StartupError",
    "configured_engine",
    "is_started",
    "shutdown",
    "startup",
]
