"""
Automated oracles standing in for the person answering comparisons.

The ground truth is either natural string order (what `make_dataset` labels
are built for) or the position of each label in an explicit ranking. The
expected result of a sort is then simply Python's built-in `sorted()`.

Public API (stable):
    oracle_sort(labels, ranking=None) -> list[str]
    equals_oracle(labels, out, ranking=None) -> bool
    make_oracle(ranking=None) -> Callable[[str, str], Decision]
    constant_oracle(decision) -> Callable[[str, str], Decision]
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence

from tiersort.engine.sorter import Decision

ORACLE_NAME: str = "python_sorted_timsort"

__all__ = ["ORACLE_NAME", "constant_oracle", "equals_oracle", "make_oracle", "oracle_sort"]


def _rank_map(ranking: Sequence[str]) -> Dict[str, int]:
    return {label: i for i, label in enumerate(ranking)}


def oracle_sort(labels: Sequence[str], ranking: Optional[Sequence[str]] = None) -> List[str]:
    """
    Return the ground-truth order of `labels` as a new list.

    With `ranking`, labels are ordered by their index in it; labels absent
    from `ranking` raise KeyError.
    """
    if ranking is None:
        return sorted(labels)
    pos = _rank_map(ranking)
    return sorted(labels, key=lambda x: pos[x])


def equals_oracle(
    labels: Sequence[str],
    out: Sequence[str],
    ranking: Optional[Sequence[str]] = None,
) -> bool:
    return list(out) == oracle_sort(labels, ranking)


def make_oracle(ranking: Optional[Sequence[str]] = None) -> Callable[[str, str], Decision]:
    """Consistent oracle answering by natural order, or by position in `ranking`."""
    pos = _rank_map(ranking) if ranking is not None else None

    def _decide(item_a: str, item_b: str) -> Decision:
        a, b = (item_a, item_b) if pos is None else (pos[item_a], pos[item_b])
        if a < b:
            return Decision.A
        if a > b:
            return Decision.B
        return Decision.EQUAL

    return _decide


def constant_oracle(decision: Decision) -> Callable[[str, str], Decision]:
    """Oracle that gives the same answer to every pair (e.g. all ties)."""

    def _decide(item_a: str, item_b: str) -> Decision:
        return decision

    return _decide
