from __future__ import annotations

import copy

import pytest

from persondir.domain.merging import (
    BaseAdditiveAttributeMerger,
    DeduplicationMode,
    MultivaluedAttributeMerger,
    NoncollidingAttributeAdder,
    NonDuplicatingMultivaluedAttributeMerger,
    ReplacingAttributeMerger,
)
from persondir.domain.model import PersonAttributes

type Attributes = dict[str, list[object]]

COLLISION_TARGET: Attributes = {
    "attName1": [None],
    "attName2": ["attValue2"],
    "attName5": [None],
    "attName6": [None],
    "attName7": ["attValue7"],
    "attName8": ["attValue8.1"],
    "attName9": [None],
    "attName10": ["attValue10"],
    "attName11": ["attValue11.1", "attValue11.2"],
    "attName12": ["attValue12.1", "attValue12.2"],
    "attName13": ["attValue13.1.1", "attValue13.1.2"],
}

COLLISION_SOURCE: Attributes = {
    "attName3": [None],
    "attName4": ["attValue4"],
    "attName5": [None],
    "attName6": ["attValue6"],
    "attName7": [None],
    "attName8": ["attValue8.2"],
    "attName9": ["attValue9.1", "attValue9.2"],
    "attName10": ["attValue10.1", "attValue10.2"],
    "attName11": [None],
    "attName12": ["attValue12"],
    "attName13": ["attValue13.2.1", "attValue13.2.2"],
}

# same as the multivalued result except for attName5
DEDUPLICATED_COLLISIONS: Attributes = {
    "attName1": [None],
    "attName2": ["attValue2"],
    "attName3": [None],
    "attName4": ["attValue4"],
    "attName5": [None],
    "attName6": [None, "attValue6"],
    "attName7": ["attValue7", None],
    "attName8": ["attValue8.1", "attValue8.2"],
    "attName9": [None, "attValue9.1", "attValue9.2"],
    "attName10": ["attValue10", "attValue10.1", "attValue10.2"],
    "attName11": ["attValue11.1", "attValue11.2", None],
    "attName12": ["attValue12.1", "attValue12.2", "attValue12"],
    "attName13": ["attValue13.1.1", "attValue13.1.2", "attValue13.2.1", "attValue13.2.2"],
    "attName14": [None],
    "attName16": ["attValue16"],
    "attName17": ["attValue17.1", "attValue17.2"],
    "attName18": ["attValue18.1", "attValue18.2"],
    "attName19": ["attValue19.1", None],
    "attName20": ["attValue20.1", None],
    "attName23": [None],
    "attName24": ["attValue24"],
}


def _dedup_target() -> Attributes:
    target = copy.deepcopy(COLLISION_TARGET)
    target.update(
        {
            "attName14": [None],
            "attName15": [None, None],
            "attName15.1": ["attValue15.1", "attValue15.1"],
            "attName16": ["attValue16"],
            "attName17": ["attValue17.1", "attValue17.2"],
            "attName18": ["attValue18.1", "attValue18.2"],
            "attName19": ["attValue19.1", None],
            "attName20": ["attValue20.1", None],
            "attName21": [None, None],
            "attName22": ["attValue22", "attValue22"],
        }
    )
    return target


def _dedup_source() -> Attributes:
    source = copy.deepcopy(COLLISION_SOURCE)
    source.update(
        {
            "attName14": [None],
            "attName15": [None, None],
            "attName15.1": ["attValue15.1", "attValue15.1"],
            "attName16": ["attValue16"],
            "attName17": ["attValue17.1", "attValue17.2"],
            "attName18": ["attValue18.2", "attValue18.1"],
            "attName19": ["attValue19.1", None],
            "attName20": [None, "attValue20.1"],
            "attName23": [None, None],
            "attName24": ["attValue24", "attValue24"],
        }
    )
    return source


ADDITIVE_MERGERS = [
    MultivaluedAttributeMerger,
    NonDuplicatingMultivaluedAttributeMerger,
    ReplacingAttributeMerger,
    NoncollidingAttributeAdder,
]


@pytest.mark.parametrize("merger_type", ADDITIVE_MERGERS)
def test_merge_with_empty_source_keeps_target(
    merger_type: type[BaseAdditiveAttributeMerger],
) -> None:
    target: Attributes = {"attName": ["attValue"], "attName2": ["attValue2"]}

    result = merger_type().merge_attributes(target, {})

    assert result == {"attName": ["attValue"], "attName2": ["attValue2"]}
    assert result is target


@pytest.mark.parametrize("merger_type", ADDITIVE_MERGERS)
def test_noncolliding_attributes_are_added(merger_type: type[BaseAdditiveAttributeMerger]) -> None:
    target: Attributes = {"attName": ["attValue"], "attName2": ["attValue2"]}
    source: Attributes = {"attName3": ["attValue3"], "attName4": ["attValue4"]}

    result = merger_type().merge_attributes(target, source)

    assert result == {
        "attName": ["attValue"],
        "attName2": ["attValue2"],
        "attName3": ["attValue3"],
        "attName4": ["attValue4"],
    }


def test_multivalued_merge_appends_source_after_target() -> None:
    result = MultivaluedAttributeMerger().merge_attributes(
        copy.deepcopy(COLLISION_TARGET), copy.deepcopy(COLLISION_SOURCE)
    )

    assert result == {
        "attName1": [None],
        "attName2": ["attValue2"],
        "attName3": [None],
        "attName4": ["attValue4"],
        "attName5": [None, None],
        "attName6": [None, "attValue6"],
        "attName7": ["attValue7", None],
        "attName8": ["attValue8.1", "attValue8.2"],
        "attName9": [None, "attValue9.1", "attValue9.2"],
        "attName10": ["attValue10", "attValue10.1", "attValue10.2"],
        "attName11": ["attValue11.1", "attValue11.2", None],
        "attName12": ["attValue12.1", "attValue12.2", "attValue12"],
        "attName13": ["attValue13.1.1", "attValue13.1.2", "attValue13.2.1", "attValue13.2.2"],
    }


def test_multivalued_merge_is_idempotent_with_empty_source() -> None:
    merger = MultivaluedAttributeMerger()
    merged = merger.merge_attributes(
        copy.deepcopy(COLLISION_TARGET), copy.deepcopy(COLLISION_SOURCE)
    )
    expected = copy.deepcopy(merged)

    assert merger.merge_attributes(merged, {}) == expected


def test_null_source_value_is_appended() -> None:
    result = MultivaluedAttributeMerger().merge_attributes({"a7": ["v7"]}, {"a7": [None]})

    assert result == {"a7": ["v7", None]}


def test_fully_deduplicating_merge() -> None:
    merger = NonDuplicatingMultivaluedAttributeMerger(
        deduplication_mode=DeduplicationMode.ALL_TARGET_ATTRIBUTES
    )

    result = merger.merge_attributes(_dedup_target(), _dedup_source())

    expected = {
        **DEDUPLICATED_COLLISIONS,
        "attName15": [None],
        "attName15.1": ["attValue15.1"],
        "attName21": [None],
        "attName22": ["attValue22"],
    }
    assert result == expected


def test_colliding_targets_deduplicating_merge() -> None:
    merger = NonDuplicatingMultivaluedAttributeMerger(
        deduplication_mode=DeduplicationMode.COLLIDING_TARGET_ATTRIBUTES
    )

    result = merger.merge_attributes(_dedup_target(), _dedup_source())

    expected = {
        **DEDUPLICATED_COLLISIONS,
        "attName15": [None],
        "attName15.1": ["attValue15.1"],
        "attName21": [None, None],
        "attName22": ["attValue22", "attValue22"],
    }
    assert result == expected


def test_source_values_deduplicating_merge() -> None:
    merger = NonDuplicatingMultivaluedAttributeMerger(
        deduplication_mode=DeduplicationMode.SOURCE_VALUES
    )

    result = merger.merge_attributes(_dedup_target(), _dedup_source())

    expected = {
        **DEDUPLICATED_COLLISIONS,
        "attName15": [None, None],
        "attName15.1": ["attValue15.1", "attValue15.1"],
        "attName21": [None, None],
        "attName22": ["attValue22", "attValue22"],
    }
    assert result == expected


def test_pre_duplicated_colliding_attribute_by_mode() -> None:
    colliding = NonDuplicatingMultivaluedAttributeMerger(
        deduplication_mode=DeduplicationMode.COLLIDING_TARGET_ATTRIBUTES
    )
    source_only = NonDuplicatingMultivaluedAttributeMerger(
        deduplication_mode=DeduplicationMode.SOURCE_VALUES
    )

    assert colliding.merge_attributes({"a8": ["v8.1", "v8.1"]}, {"a8": ["v8.2"]}) == {
        "a8": ["v8.1", "v8.2"]
    }
    assert source_only.merge_attributes({"a8": ["v8.1", "v8.1"]}, {"a8": ["v8.2"]}) == {
        "a8": ["v8.1", "v8.1", "v8.2"]
    }


def test_none_deduplication_mode_selects_default() -> None:
    merger = NonDuplicatingMultivaluedAttributeMerger(deduplication_mode=None)

    assert merger.deduplication_mode is DeduplicationMode.COLLIDING_TARGET_ATTRIBUTES


def test_replacing_merge_lets_source_win() -> None:
    result = ReplacingAttributeMerger().merge_attributes(
        {"aaa": ["111"], "bbb": ["222"]}, {"bbb": ["bbb"], "ccc": ["333"]}
    )

    assert result == {"aaa": ["111"], "bbb": ["bbb"], "ccc": ["333"]}


def test_noncolliding_adder_keeps_target_values() -> None:
    result = NoncollidingAttributeAdder().merge_attributes(
        {"aaa": ["111"], "bbb": ["222"]}, {"bbb": ["bbb"], "ccc": ["333"]}
    )

    assert result == {"aaa": ["111"], "bbb": ["222"], "ccc": ["333"]}


def _person(name: str) -> PersonAttributes:
    return PersonAttributes(name, {"attr-name-1": ["attr-value-1"]})


@pytest.mark.parametrize("merger_type", ADDITIVE_MERGERS)
@pytest.mark.parametrize(
    ("target_name", "source_name"), [("username", "USERNAME"), ("USERNAME", "username")]
)
def test_case_insensitive_usernames_merge_into_lower_case_record(
    merger_type: type[BaseAdditiveAttributeMerger],
    target_name: str,
    source_name: str,
) -> None:
    merger = merger_type(case_sensitive_usernames=False)
    target = [_person(target_name)]

    result = merger.merge_results(target, [_person(source_name)])

    assert result is target
    assert len(result) == 1
    assert result[0].name == "username"


@pytest.mark.parametrize("merger_type", ADDITIVE_MERGERS)
def test_case_sensitive_usernames_stay_distinct(
    merger_type: type[BaseAdditiveAttributeMerger],
) -> None:
    merger = merger_type(case_sensitive_usernames=True)

    result = merger.merge_results([_person("username")], [_person("USERNAME")])

    assert [person.name for person in result] == ["username", "USERNAME"]


def test_merge_results_merges_colliding_people_and_appends_others() -> None:
    merger = MultivaluedAttributeMerger()
    target = [PersonAttributes("awp9", {"mail": ["a@x.edu"]})]
    source = [
        PersonAttributes("awp9", {"mail": ["a@y.edu"], "phone": ["555"]}),
        PersonAttributes("atest", {"mail": ["t@x.edu"]}),
    ]

    result = merger.merge_results(target, source)

    assert result == [
        PersonAttributes("awp9", {"mail": ["a@x.edu", "a@y.edu"], "phone": ["555"]}),
        PersonAttributes("atest", {"mail": ["t@x.edu"]}),
    ]
    assert source[0].attributes == {"mail": ["a@y.edu"], "phone": ["555"]}


def test_attribute_name_sets_union_unless_unknown() -> None:
    merger = MultivaluedAttributeMerger()

    assert merger.merge_available_query_attributes({"a"}, {"b"}) == {"a", "b"}
    assert merger.merge_available_query_attributes({"a"}, None) is None
    assert merger.merge_possible_user_attribute_names(None, {"b"}) is None


def test_case_insensitive_target_duplicates_are_folded_before_merging() -> None:
    merger = MultivaluedAttributeMerger(case_sensitive_usernames=False)
    target = [
        PersonAttributes("awp9", {"mail": ["a@x.edu"]}),
        PersonAttributes("AWP9", {"phone": ["555"]}),
    ]

    result = merger.merge_results(target, [PersonAttributes("Awp9", {"mail": ["a@y.edu"]})])

    assert result is target
    assert result == [
        PersonAttributes("awp9", {"mail": ["a@x.edu", "a@y.edu"], "phone": ["555"]}),
    ]
