"""Ports consumed and exposed by the person-directory domain."""

from __future__ import annotations

from .backend import (
    BackendAccessError,
    BackendExecutor,
    BackendRecord,
    MappedRecord,
    RecordMapper,
)
from .sources import IncorrectResultSizeError, PersonAttributeDao

__all__ = [
    "BackendAccessError",
    "BackendExecutor",
    "BackendRecord",
    "IncorrectResultSizeError",
    "MappedRecord",
    "PersonAttributeDao",
    "RecordMapper",
]
