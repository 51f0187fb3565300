"""
Tier configuration loaded from YAML.

File format:
    tiers:
      - {name: S, percentage: 5}
      - {name: A, percentage: 15}
      ...

Parsing is strict (ValueError naming the offending key) because a config file
is edited by hand. The partitioner itself stays lenient about weights.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml

from tiersort.tiers.partition import (
    DEFAULT_TIER_NAMES,
    DEFAULT_TIER_PERCENTAGES,
    clamp_percentage,
    total_percentage,
)

__all__ = ["TierConfig", "default_tier_config", "load_tier_config", "parse_tier_config"]


@dataclass(frozen=True)
class TierConfig:
    names: Tuple[str, ...]
    percentages: Tuple[float, ...]

    @property
    def total(self) -> float:
        return total_percentage(self.percentages)

    def with_percentage(self, index: int, value: Any) -> "TierConfig":
        """Copy with one tier's percentage replaced, clamped to [0, 100]."""
        if not (0 <= index < len(self.percentages)):
            raise IndexError(f"tier index {index} out of range (tiers={len(self.percentages)})")
        pct = list(self.percentages)
        pct[index] = clamp_percentage(value)
        return TierConfig(names=self.names, percentages=tuple(pct))

    def to_dict(self) -> Dict[str, Any]:
        return {"tiers": [{"name": n, "percentage": p} for n, p in zip(self.names, self.percentages)]}


def default_tier_config() -> TierConfig:
    return TierConfig(
        names=tuple(DEFAULT_TIER_NAMES),
        percentages=tuple(float(p) for p in DEFAULT_TIER_PERCENTAGES),
    )


def load_tier_config(path: Path) -> TierConfig:
    with Path(path).open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return parse_tier_config(data)


def parse_tier_config(data: Any) -> TierConfig:
    if not isinstance(data, dict):
        raise ValueError("tier config must be a mapping with a 'tiers' key")
    tiers = data.get("tiers", None)
    if not isinstance(tiers, list) or not tiers:
        raise ValueError("tier config 'tiers' must be a non-empty list")

    names: List[str] = []
    percentages: List[float] = []
    for i, entry in enumerate(tiers):
        if not isinstance(entry, dict):
            raise ValueError(f"tiers[{i}] must be a mapping with 'name' and 'percentage'")
        name = entry.get("name", None)
        if not isinstance(name, str) or not name.strip():
            raise ValueError(f"tiers[{i}].name must be a non-empty string")
        if name in names:
            raise ValueError(f"Duplicate tier name in config: {name}")
        pct_raw = entry.get("percentage", None)
        if isinstance(pct_raw, bool) or not isinstance(pct_raw, (int, float)):
            raise ValueError(f"tiers[{i}].percentage must be a number; got {pct_raw!r}")
        if not (0 <= pct_raw <= 100):
            raise ValueError(f"tiers[{i}].percentage must be in [0, 100]; got {pct_raw}")
        names.append(name)
        percentages.append(float(pct_raw))

    return TierConfig(names=tuple(names), percentages=tuple(percentages))
