"""Ports for resolving people and their attributes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from persondir.domain.model import PersonAttributes
    from persondir.domain.predicate import Query


class IncorrectResultSizeError(RuntimeError):
    """Raised when a single-person lookup matches more than one person."""

    def __init__(self, username: str, actual: int) -> None:
        self.username = username
        self.actual = actual
        super().__init__(f"Expected at most one person for {username!r}, found {actual}")


@runtime_checkable
class PersonAttributeDao(Protocol):
    """Source of person attributes."""

    def get_people(self, query: Query) -> list[PersonAttributes]: ...

    def get_person(self, username: str) -> PersonAttributes | None: ...

    @property
    def available_query_attributes(self) -> set[str] | None: ...

    @property
    def possible_user_attribute_names(self) -> set[str] | None: ...
