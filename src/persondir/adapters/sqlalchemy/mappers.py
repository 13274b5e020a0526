"""Row mappers turning SQL result rows into person attribute records."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

    from persondir.domain.model import AttributeMap
    from persondir.domain.ports import BackendRecord, MappedRecord


def _username(record: BackendRecord, column: str | None) -> str | None:
    if column is None:
        return None
    value = record.get(column)
    if value is None:
        return None
    return str(value)


@dataclass(frozen=True, slots=True)
class SingleRowMapper:
    """One row per person: every column becomes a single-valued attribute."""

    username_column: str | None = None

    def __call__(self, record: BackendRecord) -> MappedRecord:
        attributes: AttributeMap = {column: [value] for column, value in record.items()}
        return _username(record, self.username_column), attributes


@dataclass(frozen=True, slots=True)
class MultiRowMapper:
    """One row per attribute value, named by a name column and valued by a value column.

    ``name_value_columns`` maps each attribute-name column to its value
    column, so ``{"attr_name": "attr_value"}`` turns the row
    ``(username="awp9", attr_name="mail", attr_value="a@x")`` into
    ``{"mail": ["a@x"]}``.
    """

    username_column: str
    name_value_columns: Mapping[str, str] = field(default_factory=dict[str, str])

    def __call__(self, record: BackendRecord) -> MappedRecord:
        attributes: AttributeMap = {}
        for name_column, value_column in self.name_value_columns.items():
            name = record.get(name_column)
            if name is None:
                continue
            attributes.setdefault(str(name), []).append(record.get(value_column))
        return _username(record, self.username_column), attributes
