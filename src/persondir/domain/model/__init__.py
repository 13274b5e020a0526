"""Domain model for person attribute resolution."""

from __future__ import annotations

from .enums import AttributeRole, CaseCanonicalizationMode, QueryType
from .person import AttributeMap, AttributeValues, PersonAttributes

__all__ = [
    "AttributeMap",
    "AttributeRole",
    "AttributeValues",
    "CaseCanonicalizationMode",
    "PersonAttributes",
    "QueryType",
]
