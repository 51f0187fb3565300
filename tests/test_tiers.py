"""
Tests for the tier partitioner and tier editing helpers.

What we check:
- Largest-remainder sizes on hand-computed examples
- Conservation: tier items concatenated in order reproduce the input
- Zero-weight tiers never receive items; malformed weights count as zero
- move_item / clamp_percentage / total_percentage behavior
"""

from __future__ import annotations

import pathlib
import sys
from typing import List

import pytest
from hypothesis import assume, given, settings, strategies as st

_REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]
_SRC = _REPO_ROOT / "src"
if str(_SRC) not in sys.path:
    sys.path.insert(0, str(_SRC))

from tiersort.tiers import (
    DEFAULT_TIER_NAMES,
    DEFAULT_TIER_PERCENTAGES,
    TierGroup,
    clamp_percentage,
    flatten,
    move_item,
    partition,
    tier_sizes,
    total_percentage,
)
from tiersort.validate import assert_tiers_conserve


def _items(n: int) -> List[str]:
    return [f"i{k:03d}" for k in range(n)]


def _sizes(groups: List[TierGroup]) -> List[int]:
    return [len(g.items) for g in groups]


# ------------------------- unit tests ------------------------- #

@pytest.mark.parametrize(
    "n, weights, expected",
    [
        # exact shares 1, 2, 3, 2.5, 1, 0.5 -> one leftover; tie on .5 goes to the earlier tier
        (10, [10, 20, 30, 25, 10, 5], [1, 2, 3, 3, 1, 0]),
        (10, [0, 50, 50, 0, 0, 0], [0, 5, 5, 0, 0, 0]),
        (20, list(DEFAULT_TIER_PERCENTAGES), [1, 3, 6, 6, 3, 1]),
        # shares .35, 1.05, 2.1, 2.1, 1.05, .35 -> leftover to S (ties with F, S first)
        (7, list(DEFAULT_TIER_PERCENTAGES), [1, 1, 2, 2, 1, 0]),
        (1, [0, 0, 100, 0, 0, 0], [0, 0, 1, 0, 0, 0]),
        (3, [50, 50, 0, 0, 0, 0], [2, 1, 0, 0, 0, 0]),
    ],
)
def test_partition_sizes(n: int, weights: List[float], expected: List[int]) -> None:
    items = _items(n)
    groups = partition(items, weights, DEFAULT_TIER_NAMES)

    assert [g.tier for g in groups] == list(DEFAULT_TIER_NAMES)
    assert _sizes(groups) == expected
    assert_tiers_conserve(groups, items)


def test_zero_size_tiers_are_emitted_empty() -> None:
    groups = partition(_items(10), [10, 20, 30, 25, 10, 5])
    assert groups[-1] == TierGroup(tier="F", items=[])


def test_empty_input_gives_no_tiers() -> None:
    assert partition([], [10, 20, 30, 25, 10, 5]) == []


def test_all_zero_weights_leave_every_tier_empty() -> None:
    groups = partition(_items(5), [0, 0, 0, 0, 0, 0])
    assert len(groups) == 6
    assert _sizes(groups) == [0] * 6


def test_weights_not_summing_to_100_are_normalized() -> None:
    assert tier_sizes(10, [60, 60]) == [5, 5]
    assert tier_sizes(3, [1, 1]) == [2, 1]
    assert tier_sizes(9, [10, 10, 10]) == [3, 3, 3]


def test_malformed_weights_count_as_zero() -> None:
    items = _items(10)
    groups = partition(items, [None, "x", float("nan"), -5, 50], DEFAULT_TIER_NAMES)
    assert _sizes(groups) == [0, 0, 0, 0, 10, 0]
    assert partition(items, None, DEFAULT_TIER_NAMES)[0].items == []


def test_extra_weights_are_ignored() -> None:
    groups = partition(_items(4), [50, 50, 100], ["top", "bottom"])
    assert _sizes(groups) == [2, 2]


def test_partition_is_pure_and_repeatable() -> None:
    items = _items(13)
    weights = [5, 15, 30, 30, 15, 5]
    before = list(items)
    first = partition(items, weights)
    second = partition(items, weights)
    assert first == second
    assert items == before
    assert partition(flatten(first), weights) == first


def test_to_dict_shape() -> None:
    g = TierGroup(tier="S", items=["a", "b"])
    assert g.to_dict() == {"tier": "S", "items": ["a", "b"]}
    assert TierGroup.from_dict(g.to_dict()) == g


# ------------------------- editing helpers ------------------------- #

def test_move_item_across_tiers() -> None:
    groups = [TierGroup("S", ["a"]), TierGroup("A", ["b", "c"]), TierGroup("B", [])]
    moved = move_item(groups, 1, 1, 0, 0)

    assert [g.items for g in moved] == [["c", "a"], ["b"], []]
    # input untouched
    assert [g.items for g in groups] == [["a"], ["b", "c"], []]


def test_move_item_clamps_target_index_and_reorders_within_tier() -> None:
    groups = [TierGroup("S", ["a", "b", "c"]), TierGroup("A", [])]
    assert move_item(groups, 0, 0, 1, 99)[1].items == ["a"]
    assert move_item(groups, 0, 0, 0, 2)[0].items == ["b", "c", "a"]


def test_move_item_rejects_missing_source() -> None:
    groups = [TierGroup("S", ["a"]), TierGroup("A", [])]
    with pytest.raises(IndexError):
        move_item(groups, 1, 0, 0, 0)
    with pytest.raises(IndexError):
        move_item(groups, 0, 0, 5, 0)


@pytest.mark.parametrize(
    "value, expected",
    [(-5, 0.0), (0, 0.0), (42, 42.0), (100, 100.0), (150, 100.0), ("abc", 0.0), (None, 0.0), ("12.5", 12.5)],
)
def test_clamp_percentage(value, expected: float) -> None:
    assert clamp_percentage(value) == expected


def test_total_percentage() -> None:
    assert total_percentage(DEFAULT_TIER_PERCENTAGES) == 100.0
    assert total_percentage([10, -4, "x", 20]) == 30.0


# ------------------------- property-based tests ------------------------- #

weights_6 = st.lists(
    st.one_of(st.just(0.0), st.floats(min_value=0.01, max_value=100)),
    min_size=6,
    max_size=6,
)


@settings(deadline=None, max_examples=200)
@given(st.integers(min_value=0, max_value=300), weights_6)
def test_property_conservation(n: int, weights: List[float]) -> None:
    assume(any(w > 0 for w in weights))
    items = _items(n)
    groups = partition(items, weights)
    if n == 0:
        assert groups == []
        return
    assert sum(_sizes(groups)) == n
    assert_tiers_conserve(groups, items)


@settings(deadline=None, max_examples=200)
@given(st.integers(min_value=1, max_value=300), weights_6)
def test_property_zero_weight_tiers_stay_empty(n: int, weights: List[float]) -> None:
    groups = partition(_items(n), weights)
    for w, g in zip(weights, groups):
        if w == 0:
            assert g.items == []


@settings(deadline=None, max_examples=200)
@given(st.integers(min_value=1, max_value=300), weights_6)
def test_property_sizes_stay_within_one_of_exact_share(n: int, weights: List[float]) -> None:
    total = sum(weights)
    assume(total > 0)
    for w, size in zip(weights, tier_sizes(n, weights)):
        exact = n * w / total
        assert exact - 1 - 1e-9 <= size <= exact + 1 + 1e-9
