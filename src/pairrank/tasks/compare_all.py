"""Exhaustive pairwise ranking.

Every unordered pair of items is put to the comparator exactly once and
each item's score is the number of comparisons it won.  This costs
``n * (n - 1) / 2`` decisions, far more than :mod:`merge_insertion`, but it
never relies on the comparator being transitive: preference cycles simply
show up as equal win counts, i.e. ties, which :func:`break_ties` can then
revisit.
"""

from __future__ import annotations

from typing import Any, Dict, Sequence

from ..utils.combinatorics import combinations2, compare_all_comparisons
from ..utils.comparators import Comparator, call_comparator
from ..utils.logging import get_logger
from .scores import (
    RankedEntry,
    RankedResults,
    ensure_unique,
    normalize_scores,
    sort_results,
)

logger = get_logger(__name__)


async def compare_all_sort(items: Sequence[Any], comparator: Comparator) -> RankedResults:
    """Rank ``items`` by comparing every pair of them.

    Comparisons are issued one at a time in row-major order (see
    :func:`~pairrank.utils.combinatorics.combinations2`).  The result is
    sorted ascending by score and normalised, so the most preferred item
    comes last.  Any exception raised by ``comparator`` aborts the ranking
    and is propagated unchanged.
    """

    items = list(items)
    ensure_unique(items)
    logger.debug(
        "Ranking %d items with %d comparisons",
        len(items),
        compare_all_comparisons(len(items)),
    )
    scores: Dict[Any, int] = {item: 0 for item in items}
    for a, b in combinations2(items):
        winner = b if await call_comparator(comparator, (a, b)) else a
        scores[winner] += 1
    results = [RankedEntry(item, score) for item, score in scores.items()]
    sort_results(results)
    normalize_scores(results)
    return results
