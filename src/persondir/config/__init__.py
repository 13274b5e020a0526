"""Application configuration helpers."""

from __future__ import annotations

from .database import DatabaseConfig, get_database_config
from .env import require_env_var, require_env_vars
from .errors import (
    ConfigurationError,
    InvalidConfigurationValueError,
    MissingConfigurationError,
)
from .merge import MergeConfig, get_merge_config
from .query import (
    DEFAULT_CANONICALIZATION_TEMPLATES,
    DEFAULT_CASE_CANONICALIZATION_MODE,
    DEFAULT_USERNAME_ATTRIBUTE,
    QueryConfig,
    case_insensitive_attributes,
    get_query_config,
)
from .source import AttributeMapping, SourceConfig, attribute_mapping

__all__ = [
    "DEFAULT_CANONICALIZATION_TEMPLATES",
    "DEFAULT_CASE_CANONICALIZATION_MODE",
    "DEFAULT_USERNAME_ATTRIBUTE",
    "AttributeMapping",
    "ConfigurationError",
    "DatabaseConfig",
    "InvalidConfigurationValueError",
    "MergeConfig",
    "MissingConfigurationError",
    "QueryConfig",
    "SourceConfig",
    "attribute_mapping",
    "case_insensitive_attributes",
    "get_database_config",
    "get_merge_config",
    "get_query_config",
    "require_env_var",
    "require_env_vars",
]
