"""
Tier partitioner: split a ranked list into contiguous, percentage-sized tiers.

Sizing uses largest-remainder apportionment:
1. Each positively weighted tier gets floor(n * w_i / W) items, where W is the
   sum of the positive weights (W == 100 for a well-formed vector).
2. The items left over go one each to the tiers with the largest fractional
   parts, ties broken by tier order.
3. Tiers are cut from the ranked list in declared order.

Public API (stable):
    partition(sorted_items, weights, tier_labels=DEFAULT_TIER_NAMES) -> list[TierGroup]
    tier_sizes(n, weights, n_tiers=None) -> list[int]
    flatten(groups) -> list[str]
    move_item(groups, from_tier, from_index, to_tier, to_index) -> list[TierGroup]
    clamp_percentage(value) -> float
    total_percentage(weights) -> float

Conventions:
- Never raises for weight input. Missing, extra, non-numeric, NaN and
  negative weights count as 0.
- Zero-size tiers are emitted as empty groups so tier positions stay stable.
- Empty input gives []. An all-zero weight vector gives every tier empty.
- Whenever some weight is positive, the sizes sum to len(sorted_items) and
  flatten(partition(xs, ...)) == xs.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

import numpy as np

DEFAULT_TIER_NAMES = ("S", "A", "B", "C", "D", "F")
DEFAULT_TIER_PERCENTAGES = (5, 15, 30, 30, 15, 5)

__all__ = [
    "DEFAULT_TIER_NAMES",
    "DEFAULT_TIER_PERCENTAGES",
    "TierGroup",
    "clamp_percentage",
    "flatten",
    "move_item",
    "partition",
    "tier_sizes",
    "total_percentage",
]


@dataclass
class TierGroup:
    tier: str
    items: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"tier": self.tier, "items": list(self.items)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TierGroup":
        return cls(tier=str(data["tier"]), items=[str(x) for x in data.get("items", [])])


def partition(
    sorted_items: Sequence[str],
    weights: Optional[Iterable[Any]],
    tier_labels: Sequence[str] = DEFAULT_TIER_NAMES,
) -> List[TierGroup]:
    """
    Cut `sorted_items` into one TierGroup per label, sized by `weights`.

    Parameters
    ----------
    sorted_items : sequence of str
        Fully ranked labels, best first.
    weights : iterable
        Percentage per tier, aligned with `tier_labels`.
    tier_labels : sequence of str
        Tier names in display order; fixes the number of tiers.

    Returns
    -------
    list[TierGroup]
        One group per label (possibly empty), or [] when there are no items.
    """
    items = list(sorted_items)
    labels = list(tier_labels)
    if not items or not labels:
        return []

    sizes = tier_sizes(len(items), weights, n_tiers=len(labels))
    groups: List[TierGroup] = []
    start = 0
    for label, size in zip(labels, sizes):
        groups.append(TierGroup(tier=label, items=items[start:start + size]))
        start += size
    return groups


def tier_sizes(n: int, weights: Optional[Iterable[Any]], n_tiers: Optional[int] = None) -> List[int]:
    """Largest-remainder tier sizes for `n` items (see module docstring)."""
    w = _sanitize_weights(weights, n_tiers)
    sizes = np.zeros(len(w), dtype=np.int64)
    total = float(w.sum())
    if n <= 0 or total <= 0:
        return sizes.tolist()

    weighted = np.flatnonzero(w > 0)
    exact = n * w[weighted] / total
    base = np.floor(exact).astype(np.int64)

    remainder = n - int(base.sum())
    if remainder > 0:
        frac = exact - base
        order = np.argsort(-frac, kind="stable")
        base[order[:min(remainder, len(order))]] += 1

    sizes[weighted] = base
    return sizes.tolist()


def flatten(groups: Iterable[TierGroup]) -> List[str]:
    """Concatenate tier items in tier order."""
    out: List[str] = []
    for g in groups:
        out.extend(g.items)
    return out


def move_item(
    groups: Sequence[TierGroup],
    from_tier: int,
    from_index: int,
    to_tier: int,
    to_index: int,
) -> List[TierGroup]:
    """
    Return new groups with one item moved (a manual drag-and-drop reorder).

    `to_index` past the end of the target tier appends. The input groups are
    not mutated. Raises IndexError for a source position that does not exist.
    """
    out = [TierGroup(tier=g.tier, items=list(g.items)) for g in groups]
    if not (0 <= from_tier < len(out)) or not (0 <= to_tier < len(out)):
        raise IndexError(f"tier index out of range: {from_tier} -> {to_tier} (tiers={len(out)})")
    source = out[from_tier].items
    if not (0 <= from_index < len(source)):
        raise IndexError(f"item index {from_index} out of range for tier {out[from_tier].tier!r}")

    item = source.pop(from_index)
    target = out[to_tier].items
    target.insert(max(0, min(to_index, len(target))), item)
    return out


def clamp_percentage(value: Any) -> float:
    """Bound one tier percentage to [0, 100]; unparseable values become 0."""
    x = _as_weight(value)
    return min(x, 100.0)


def total_percentage(weights: Iterable[Any]) -> float:
    return float(sum(_as_weight(w) for w in weights))


# ------------------------- helpers ------------------------- #


def _as_weight(value: Any) -> float:
    try:
        x = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(x) or x <= 0:
        return 0.0
    return x


def _sanitize_weights(weights: Optional[Iterable[Any]], n_tiers: Optional[int]) -> np.ndarray:
    raw = list(weights) if weights is not None else []
    if n_tiers is None:
        n_tiers = len(raw)
    out = np.zeros(n_tiers, dtype=np.float64)
    for i, value in enumerate(raw[:n_tiers]):
        out[i] = _as_weight(value)
    return out
