from __future__ import annotations

import pytest

from persondir.domain.merging import (
    DEFAULT_DEDUPLICATION_MODE,
    AllTargetAttributesDeduplication,
    CollidingTargetAttributesDeduplication,
    DeduplicationMode,
    SourceValuesDeduplication,
    deduplicate,
)


def test_deduplicate_keeps_first_occurrence() -> None:
    values: list[object] = ["b", None, "a", "b", None, "c"]

    deduplicate(values)

    assert values == ["b", None, "a", "c"]


def test_default_mode_deduplicates_colliding_attributes() -> None:
    assert DEFAULT_DEDUPLICATION_MODE is DeduplicationMode.COLLIDING_TARGET_ATTRIBUTES


@pytest.mark.parametrize(
    ("mode", "policy_type"),
    [
        (DeduplicationMode.SOURCE_VALUES, SourceValuesDeduplication),
        (DeduplicationMode.COLLIDING_TARGET_ATTRIBUTES, CollidingTargetAttributesDeduplication),
        (DeduplicationMode.ALL_TARGET_ATTRIBUTES, AllTargetAttributesDeduplication),
    ],
)
def test_mode_resolves_to_policy(mode: DeduplicationMode, policy_type: type) -> None:
    assert type(mode.policy) is policy_type


def test_source_values_only_suppresses_incoming_duplicates() -> None:
    policy = SourceValuesDeduplication()
    merged: list[object] = ["v", "v"]

    policy.process_value("a", merged, "v")
    policy.process_value("a", merged, "w")
    policy.post_process_attribute("a", merged)

    assert merged == ["v", "v", "w"]


def test_colliding_policy_cleans_touched_attribute() -> None:
    policy = CollidingTargetAttributesDeduplication()
    merged: list[object] = ["v", "v"]

    policy.post_process_attribute("a", merged)

    assert merged == ["v"]


def test_all_targets_policy_cleans_untouched_attributes() -> None:
    policy = AllTargetAttributesDeduplication()
    target: dict[str, list[object]] = {"a": ["v", "v"], "b": [None, None]}

    policy.post_process_all(target, {"a"})

    assert target == {"a": ["v", "v"], "b": [None]}
