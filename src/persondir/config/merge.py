"""Result merging configuration."""

from __future__ import annotations

from dataclasses import dataclass

from persondir.domain.merging.deduplication import DEFAULT_DEDUPLICATION_MODE, DeduplicationMode

from .env import env_enum, env_flag


@dataclass(frozen=True, slots=True)
class MergeConfig:
    deduplication_mode: DeduplicationMode = DEFAULT_DEDUPLICATION_MODE
    case_sensitive_usernames: bool = True


def get_merge_config() -> MergeConfig:
    return MergeConfig(
        deduplication_mode=env_enum(
            "PERSONDIR_DEDUPLICATION_MODE", DeduplicationMode, DEFAULT_DEDUPLICATION_MODE
        ),
        case_sensitive_usernames=env_flag("PERSONDIR_CASE_SENSITIVE_USERNAMES", default=True),
    )
