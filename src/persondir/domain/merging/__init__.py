"""Attribute merging strategies and their deduplication policies."""

from __future__ import annotations

from .deduplication import (
    DEFAULT_DEDUPLICATION_MODE,
    AllTargetAttributesDeduplication,
    CollidingTargetAttributesDeduplication,
    DeduplicationMode,
    DeduplicationPolicy,
    SourceValuesDeduplication,
    deduplicate,
)
from .mergers import (
    AttributeMerger,
    BaseAdditiveAttributeMerger,
    MultivaluedAttributeMerger,
    NoncollidingAttributeAdder,
    NonDuplicatingMultivaluedAttributeMerger,
    ReplacingAttributeMerger,
)

__all__ = [
    "DEFAULT_DEDUPLICATION_MODE",
    "AllTargetAttributesDeduplication",
    "AttributeMerger",
    "BaseAdditiveAttributeMerger",
    "CollidingTargetAttributesDeduplication",
    "DeduplicationMode",
    "DeduplicationPolicy",
    "MultivaluedAttributeMerger",
    "NonDuplicatingMultivaluedAttributeMerger",
    "NoncollidingAttributeAdder",
    "ReplacingAttributeMerger",
    "SourceValuesDeduplication",
    "deduplicate",
]
