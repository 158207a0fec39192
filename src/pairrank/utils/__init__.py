"""Utility helpers for pairrank."""

from .logging import get_logger, set_log_level
from .combinatorics import combinations2, compare_all_comparisons, permutations
from .comparators import (
    Comparator,
    call_comparator,
    order_comparator,
    mapping_comparator,
    CheckedComparator,
    CountingComparator,
)
from .parsing import safe_json

__all__ = [
    "get_logger",
    "set_log_level",
    "combinations2",
    "compare_all_comparisons",
    "permutations",
    "Comparator",
    "call_comparator",
    "order_comparator",
    "mapping_comparator",
    "CheckedComparator",
    "CountingComparator",
    "safe_json",
]
