"""
tiersort: rank a list through pairwise comparisons and split it into tiers.

    from tiersort import SortEngine, Decision, partition
"""

from .engine import Decision, SortEngine, SortState, run_with_oracle
from .tiers import TierGroup, partition

__all__ = ["Decision", "SortEngine", "SortState", "TierGroup", "partition", "run_with_oracle"]
