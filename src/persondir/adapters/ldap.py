"""Directory-service adapter: LDAP filters out, directory entries in.

The adapter does not bind to a directory itself. It takes a ``search``
callable (for example a thin wrapper around an ``ldap3`` connection's
``search`` plus its ``entries``) that receives a rendered RFC 4515 filter
and returns the matching entries as attribute mappings.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from persondir.domain.ports import BackendAccessError
from persondir.domain.predicate import LdapFilterDialect

if TYPE_CHECKING:
    from collections.abc import Callable

    from persondir.domain.model import AttributeMap
    from persondir.domain.ports import BackendRecord, MappedRecord
    from persondir.domain.predicate import Predicate

type DirectorySearch = Callable[[str], Iterable[BackendRecord]]

MATCH_ALL_FILTER: Final[str] = "(objectClass=*)"

log = logging.getLogger(__name__)


class LdapSearchExecutor:
    """Render predicates as LDAP filters and run them through ``search``.

    ``base_filter`` restricts every search, e.g. ``(objectClass=person)``; it
    is AND-ed with the rendered predicate, whose own criteria are combined with
    the operator they were built with. ``error_types`` lists the
    exceptions of the underlying client that signal a directory failure.
    """

    def __init__(
        self,
        search: DirectorySearch,
        *,
        base_filter: str | None = None,
        error_types: tuple[type[Exception], ...] = (OSError,),
    ) -> None:
        self.search = search
        self.base_filter = base_filter
        self.error_types = error_types
        self.dialect = LdapFilterDialect()

    def filter_for(self, predicate: Predicate | None) -> str:
        rendered = self.dialect.render(predicate) if predicate is not None else None
        if self.base_filter and rendered:
            return f"(&{self.base_filter}{rendered})"
        return rendered or self.base_filter or MATCH_ALL_FILTER

    def __call__(self, predicate: Predicate | None) -> list[BackendRecord]:
        search_filter = self.filter_for(predicate)
        try:
            entries = list(self.search(search_filter))
        except self.error_types as exc:
            raise BackendAccessError(f"Directory search {search_filter!r} failed: {exc}") from exc
        log.debug("Directory search %s returned %d entry(ies)", search_filter, len(entries))
        return entries


@dataclass(frozen=True, slots=True)
class LdapEntryMapper:
    """Map a directory entry (scalar or multi-valued attributes) to a person record."""

    username_attribute: str = "uid"

    def __call__(self, record: BackendRecord) -> MappedRecord:
        attributes: AttributeMap = {
            name: _as_values(value) for name, value in record.items()
        }
        username_values = _lookup(attributes, self.username_attribute)
        username = str(username_values[0]) if username_values else None
        return username, attributes


def _as_values(value: object) -> list[object]:
    match value:
        case None:
            return []
        case str() | bytes():
            return [value]
        case Mapping():
            return [value]
        case Iterable():
            return list(value)
        case _:
            return [value]


def _lookup(attributes: AttributeMap, name: str) -> list[object]:
    # directory attribute names are case-insensitive
    lowered = name.lower()
    for key, values in attributes.items():
        if key.lower() == lowered:
            return values
    return []
