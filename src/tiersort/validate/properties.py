"""
Property helpers for validating sort and tier results.

Public API (stable):
    is_permutation(a, b) -> bool
    permutation_counter_diff(a, b) -> dict[str, int]
    first_order_violation_index(xs, ranking=None) -> int | None
    assert_no_mutation(before, after) -> None
    assert_tiers_conserve(groups, items) -> None

Notes
-----
- Labels are compared by natural string order unless a ranking is given.
- Tier conservation is the partition invariant: tier items concatenated in
  tier order reproduce the ranked input exactly.
"""

from __future__ import annotations

from collections import Counter
from typing import Dict, Hashable, Optional, Sequence

from tiersort.tiers.partition import TierGroup, flatten

__all__ = [
    "assert_no_mutation",
    "assert_tiers_conserve",
    "first_order_violation_index",
    "is_permutation",
    "permutation_counter_diff",
]


def is_permutation(a: Sequence[Hashable], b: Sequence[Hashable]) -> bool:
    """Return True iff `a` and `b` contain exactly the same multiset of labels."""
    if len(a) != len(b):
        return False
    return Counter(a) == Counter(b)


def permutation_counter_diff(a: Sequence[Hashable], b: Sequence[Hashable]) -> Dict[Hashable, int]:
    """
    Return label -> count difference (count_a - count_b).

    Empty dict means `a` and `b` have identical multiplicities.
    """
    ca = Counter(a)
    cb = Counter(b)
    diff: Dict[Hashable, int] = {}
    for k in set(ca) | set(cb):
        d = ca.get(k, 0) - cb.get(k, 0)
        if d != 0:
            diff[k] = d
    return diff


def first_order_violation_index(xs: Sequence[str], ranking: Optional[Sequence[str]] = None) -> Optional[int]:
    """
    Return the first index i where xs[i] ranks after xs[i+1], or None if ordered.

    Useful for precise error messages:
        i = first_order_violation_index(out)
        assert i is None, f"out of order at i={i}: {out[i]} > {out[i+1]}"
    """
    pos = None if ranking is None else {label: i for i, label in enumerate(ranking)}
    for i in range(len(xs) - 1):
        a, b = (xs[i], xs[i + 1]) if pos is None else (pos[xs[i]], pos[xs[i + 1]])
        if a > b:
            return i
    return None


def assert_no_mutation(before: Sequence[Hashable], after: Sequence[Hashable]) -> None:
    """
    Assert that two sequences are element-wise equal, used to ensure a call
    did not mutate its input in place.
    """
    if len(before) != len(after):
        raise AssertionError(
            f"Input mutated: length changed from {len(before)} to {len(after)}"
        )
    for i, (x, y) in enumerate(zip(before, after)):
        if x != y:
            raise AssertionError(
                f"Input mutated at index {i}: before={x!r}, after={y!r}"
            )


def assert_tiers_conserve(groups: Sequence[TierGroup], items: Sequence[str]) -> None:
    """Assert the tier groups hold exactly `items`, in order."""
    total = sum(len(g.items) for g in groups)
    if total != len(items):
        raise AssertionError(f"Tier sizes sum to {total}, expected {len(items)}")
    flat = flatten(groups)
    if flat != list(items):
        i = next(i for i, (x, y) in enumerate(zip(flat, items)) if x != y)
        raise AssertionError(f"Tier order differs at index {i}: {flat[i]!r} != {items[i]!r}")
