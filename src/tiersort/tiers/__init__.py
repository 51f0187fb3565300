"""
Tier partitioning public API.

    from tiersort.tiers import partition, TierGroup
"""

from .partition import (
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
