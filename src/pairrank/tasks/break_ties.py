from __future__ import annotations

import asyncio
from typing import List, Sequence, Tuple

from ..utils.comparators import Comparator
from ..utils.logging import get_logger
from .compare_all import compare_all_sort
from .scores import RankedEntry, RankedResults, ensure_unique, find_tie_groups

logger = get_logger(__name__)


async def break_ties(results: Sequence[RankedEntry], comparator: Comparator) -> RankedResults:
    """Re-rank every tie group in ``results`` and splice the outcome back.

    ``results`` must be sorted ascending by score.  Each tie group is ranked
    on its own with :func:`compare_all_sort`; the groups share neither items
    nor positions, so they run as concurrent tasks.  Entries outside the
    groups keep their order, and scores after a group are shifted so the
    sequence stays contiguous.  The input is never modified.
    """

    ensure_unique(entry.item for entry in results)
    res: RankedResults = [RankedEntry(entry.item, entry.score) for entry in results]
    groups = find_tie_groups(res)
    if not groups:
        return res
    logger.info("Breaking %d tie group(s) covering %d items", len(groups), sum(b - a for a, b in groups))

    async def _resolve(first: int, after: int) -> None:
        # all the entries in this range are tied on their score, so rank them again
        sub_results = await compare_all_sort([entry.item for entry in res[first:after]], comparator)
        assert len(sub_results) == after - first
        # splice the sub-results back in; this block must not await so it
        # sees a consistent view of the neighbouring scores
        base_before = res[first - 1].score + 1 if first > 0 else 0
        for entry, sub in zip(res[first:after], sub_results):
            entry.item = sub.item
            entry.score = sub.score + base_before
        if after < len(res):
            delta = res[after - 1].score + 1 - res[after].score
            for entry in res[after:]:
                entry.score += delta

    tasks: List["asyncio.Future[None]"] = [
        asyncio.ensure_future(_resolve(first, after)) for first, after in groups
    ]
    try:
        await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        raise
    return res


def tied_item_sets(results: Sequence[RankedEntry]) -> List[Tuple[object, ...]]:
    """Return the items of each tie group, e.g. to detect stalled rounds."""
    return [
        tuple(sorted(entry.item for entry in results[first:after]))
        for first, after in find_tie_groups(results)
    ]
