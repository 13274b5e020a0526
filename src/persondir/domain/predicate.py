"""Build backend search predicates from attribute queries.

A :class:`Predicate` is an immutable value: every append returns a new one,
so a chain is private to the query that built it. Fragment text and bound
arguments always line up, the n-th placeholder in ``text`` belongs to the
n-th entry of ``arguments``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Final, Protocol

from persondir.domain.canonicalization import CaseCanonicalizer
from persondir.domain.model import AttributeRole, QueryType
from persondir.domain.wildcards import WildcardPolicy

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from persondir.config.query import QueryConfig

type Query = Mapping[str, Sequence[object | None]]

PLACEHOLDER: Final[str] = "?"
_PLACEHOLDER_PATTERN = re.compile(re.escape(PLACEHOLDER))

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Predicate:
    """Accumulated predicate text with positional bound arguments.

    ``query_type`` is the operator the criteria were joined with, kept for
    dialects that only combine criteria when rendering.
    """

    text: str = ""
    arguments: tuple[str, ...] = ()
    patterns: tuple[bool, ...] = ()
    query_type: QueryType = QueryType.AND

    @property
    def criteria_count(self) -> int:
        return len(self.arguments)

    def extended(self, text: str, argument: str, *, pattern: bool) -> Predicate:
        return Predicate(
            text=text,
            arguments=(*self.arguments, argument),
            patterns=(*self.patterns, pattern),
            query_type=self.query_type,
        )


class PredicateDialect(Protocol):
    """Backend-specific rendering of criteria."""

    wildcard_token: str
    wraps_references: bool

    def criterion(self, reference: str | None, *, pattern: bool) -> str: ...

    def join(self, text: str, fragment: str, query_type: QueryType) -> str: ...

    def render(self, predicate: Predicate) -> str: ...


class SqlDialect:
    """``column = ?`` / ``column LIKE ?`` fragments joined by ``AND``/``OR``."""

    wildcard_token = "%"
    wraps_references = True

    def criterion(self, reference: str | None, *, pattern: bool) -> str:
        if reference is None:
            return PLACEHOLDER
        operator = "LIKE" if pattern else "="
        return f"{reference} {operator} {PLACEHOLDER}"

    def join(self, text: str, fragment: str, query_type: QueryType) -> str:
        if not text:
            return fragment
        return f"{text} {query_type.value} {fragment}"

    def render(self, predicate: Predicate) -> str:
        return predicate.text


_LDAP_ESCAPES: Final[dict[str, str]] = {
    "\\": r"\5c",
    "*": r"\2a",
    "(": r"\28",
    ")": r"\29",
    "\x00": r"\00",
}


def escape_filter_value(value: str, *, keep_wildcards: bool = False) -> str:
    """Escape an assertion value per RFC 4515, optionally leaving ``*`` intact."""

    return "".join(
        char if keep_wildcards and char == "*" else _LDAP_ESCAPES.get(char, char)
        for char in value
    )


class LdapFilterDialect:
    """``(attr=value)`` fragments combined into an ``(&...)``/``(|...)`` filter.

    Attribute descriptions are never wrapped in case-folding functions;
    directory matching rules decide case sensitivity.
    """

    wildcard_token = "*"
    wraps_references = False

    def criterion(self, reference: str | None, *, pattern: bool) -> str:
        _ = pattern
        if reference is None:
            return PLACEHOLDER
        return f"({reference}={PLACEHOLDER})"

    def join(self, text: str, fragment: str, query_type: QueryType) -> str:
        _ = query_type
        return f"{text}{fragment}"

    def render(self, predicate: Predicate) -> str:
        escaped = iter(
            escape_filter_value(argument, keep_wildcards=pattern)
            for argument, pattern in zip(predicate.arguments, predicate.patterns, strict=True)
        )
        text = _PLACEHOLDER_PATTERN.sub(lambda _match: next(escaped), predicate.text)
        if predicate.criteria_count <= 1:
            return text
        operator = "&" if predicate.query_type is QueryType.AND else "|"
        return f"({operator}{text})"


class PredicateBuilder:
    """Fold query criteria into a :class:`Predicate` for one dialect."""

    def __init__(self, config: QueryConfig, dialect: PredicateDialect) -> None:
        self.config = config
        self.dialect = dialect
        self.canonicalizer = CaseCanonicalizer.from_config(config)
        if not dialect.wraps_references:
            if config.case_insensitive_data_attributes:
                log.debug(
                    "%s folds case natively, not wrapping %s",
                    type(dialect).__name__,
                    sorted(config.case_insensitive_data_attributes),
                )
            self.canonicalizer = replace(self.canonicalizer, templates=None)
        self.wildcards = WildcardPolicy.from_config(config, wildcard_token=dialect.wildcard_token)

    def role_for(self, attribute_name: str | None) -> AttributeRole:
        username_attribute = self.config.configured_username_data_attribute
        if attribute_name is not None and attribute_name.lower() == username_attribute.lower():
            return AttributeRole.USERNAME
        return AttributeRole.DATA

    def append(
        self,
        predicate: Predicate | None,
        attribute_name: str | None,
        values: Iterable[object | None],
    ) -> Predicate | None:
        """Append one criterion per non-blank value; blanks contribute nothing."""

        role = self.role_for(attribute_name)
        for value in values:
            raw_value = str(value) if value is not None else None
            if raw_value is None or not raw_value.strip():
                continue
            formatted = self.wildcards.format(role, raw_value, attribute_name=attribute_name)
            reference = (
                self.canonicalizer.canonicalize(attribute_name)
                if attribute_name is not None
                else None
            )
            fragment = self.dialect.criterion(reference, pattern=formatted.used_wildcard)
            current = predicate or Predicate(query_type=self.config.query_type)
            text = self.dialect.join(current.text, fragment, self.config.query_type)
            predicate = current.extended(
                text, formatted.value, pattern=formatted.used_wildcard
            )
        return predicate

    def build(self, query: Query) -> Predicate | None:
        """Return the predicate for ``query`` or ``None`` when every value was blank."""

        predicate: Predicate | None = None
        for attribute_name, values in query.items():
            predicate = self.append(predicate, attribute_name, values)
        if predicate is None:
            log.debug("Query %s has no usable criteria; searching unfiltered", dict(query))
        else:
            log.debug(
                "Built predicate %r with %d argument(s)",
                predicate.text,
                predicate.criteria_count,
            )
        return predicate

    def render(self, predicate: Predicate) -> str:
        return self.dialect.render(predicate)
