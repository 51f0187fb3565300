"""
Sort engine package public API.

Re-export the interactive sort engine so callers can write:
    from tiersort.engine import SortEngine, Decision, run_with_oracle
"""

from .sorter import (
    ComparisonMismatchError,
    ComparisonPair,
    Decision,
    SortEngine,
    SortInProgressError,
    SortState,
    comparison_key,
    estimate_comparisons,
    run_with_oracle,
)

__all__ = [
    "ComparisonMismatchError",
    "ComparisonPair",
    "Decision",
    "SortEngine",
    "SortInProgressError",
    "SortState",
    "comparison_key",
    "estimate_comparisons",
    "run_with_oracle",
]
