"""
Portfolio Management Module

Account-level comparison of actual holdings against target allocations.
"""
from backoffice.core.portfolio.comparison import (
    DEFAULT_TOLERANCE,
    ComparisonRow,
    AllocationComparison,
    compare_account_allocations,
)

__all__ = [
    "DEFAULT_TOLERANCE",
    "ComparisonRow",
    "AllocationComparison",
    "compare_account_allocations",
]
