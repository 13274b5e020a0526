"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class AttributeRole(StrEnum):
    """Role of a data-layer attribute inside a search predicate."""

    USERNAME = "username"
    DATA = "data"


class CaseCanonicalizationMode(StrEnum):
    NONE = "none"
    LOWER = "lower"
    UPPER = "upper"


class QueryType(StrEnum):
    """Logical operator joining the criteria of one predicate."""

    AND = "AND"
    OR = "OR"
