"""Ports for executing predicates against a backing store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from persondir.domain.model import AttributeMap
    from persondir.domain.predicate import Predicate

type BackendRecord = Mapping[str, object]
type MappedRecord = tuple[str | None, AttributeMap]


class BackendAccessError(RuntimeError):
    """Raised when a backing store cannot be queried.

    Distinct from an empty result, which is never an error.
    """


@runtime_checkable
class BackendExecutor(Protocol):
    """Run a finalized predicate and return raw backend records.

    ``predicate`` is ``None`` when the query carried no usable criteria and
    the whole record set is to be searched unfiltered.
    """

    def __call__(self, predicate: Predicate | None) -> Iterable[BackendRecord]: ...


@runtime_checkable
class RecordMapper(Protocol):
    """Convert one raw backend record into ``(username, attributes)``.

    The username is ``None`` when the record does not identify a person by
    itself; callers fall back to the username of the query.
    """

    def __call__(self, record: BackendRecord) -> MappedRecord: ...
