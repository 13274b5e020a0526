"""Resolve person attributes from relational and directory stores."""

from __future__ import annotations

from importlib import metadata

from persondir.domain.aggregation import MergingPersonAttributeSource
from persondir.domain.model import PersonAttributes
from persondir.domain.person_source import PersonAttributeSource

try:
    __version__ = metadata.version("persondir")
except metadata.PackageNotFoundError:
    __version__ = "0.0.0+local"

__all__ = [
    "MergingPersonAttributeSource",
    "PersonAttributeSource",
    "PersonAttributes",
    "__version__",
]
