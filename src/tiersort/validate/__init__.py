"""
Validation utilities public API.

Re-exports:
    - Oracles:
        ORACLE_NAME
        oracle_sort
        equals_oracle
        make_oracle
        constant_oracle

    - Property checks:
        is_permutation
        permutation_counter_diff
        first_order_violation_index
        assert_no_mutation
        assert_tiers_conserve
"""

from .oracle import ORACLE_NAME, constant_oracle, equals_oracle, make_oracle, oracle_sort
from .properties import (
    assert_no_mutation,
    assert_tiers_conserve,
    first_order_violation_index,
    is_permutation,
    permutation_counter_diff,
)

__all__ = [
    "ORACLE_NAME",
    "oracle_sort",
    "equals_oracle",
    "make_oracle",
    "constant_oracle",
    "is_permutation",
    "permutation_counter_diff",
    "first_order_violation_index",
    "assert_no_mutation",
    "assert_tiers_conserve",
]
