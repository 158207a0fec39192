"""Merge-insertion sort, also known as the Ford-Johnson algorithm.

Of the general-purpose sorts this one needs the fewest comparisons, which
matters when every comparison is a question to a person or a paid model
call.  See https://en.wikipedia.org/wiki/Merge-insertion_sort: it is
optimal for every ``n <= 22`` and within a few comparisons of optimal after.

The pair losers are inserted in the grouped order described by Knuth
(TAOCP vol. 3, 5.3.1): group sizes follow :func:`merge_insertion_group_sizes`
and each group is inserted from its highest index down, so every binary
search runs over at most ``2**k - 1`` elements.  That is what keeps the
worst case at :func:`merge_insertion_max_comparisons`.
"""

from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from ..core.errors import InvalidArgumentError
from ..utils.comparators import Comparator, call_comparator
from ..utils.logging import get_logger
from .scores import ensure_unique

logger = get_logger(__name__)


def merge_insertion_max_comparisons(n: int) -> int:
    """Worst-case number of comparisons of :func:`merge_insertion_sort`.

    This is OEIS A001768, ``sum(ceil(log2(3k/4)) for k in 1..n)``, evaluated
    in closed form with integer arithmetic.
    """
    if n < 0:
        raise InvalidArgumentError("must specify zero or more items")
    if n == 0:
        return 0
    # ceil(log2(3n/4)) == bit_length(3n - 1) - 2, floor(log2(6n)) == bit_length(6n) - 1
    ceil_log = (3 * n - 1).bit_length() - 2
    floor_log6 = (6 * n).bit_length() - 1
    return n * ceil_log - (2**floor_log6) // 3 + floor_log6 // 2


def merge_insertion_group_sizes() -> Iterator[int]:
    """Yield the insertion group sizes ``2, 2, 6, 10, 22, 42, ...`` forever.

    "... the sums of sizes of every two adjacent groups form a sequence of
    powers of two": ``a(1) = 2`` and ``a(n) = 2**n - a(n-1)``.  Each call
    returns a fresh generator.
    """
    prev = 0
    i = 1
    while True:
        cur = 2**i - prev
        yield cur
        prev = cur
        i += 1


def make_merge_insertion_groups(items: Sequence[Any]) -> List[Any]:
    """Reorder ``items`` into the merge-insertion order.

    ``items`` is cut into consecutive groups sized by
    :func:`merge_insertion_group_sizes` and each group is reversed, so
    ``[b2, b3, b4, b5, b6, b7, ...]`` becomes ``[b3, b2, b5, b4, b11, ...]``.
    """
    out: List[Any] = []
    i = 0
    for size in merge_insertion_group_sizes():
        group = list(items[i : i + size])
        group.reverse()
        out.extend(group)
        if len(group) < size:
            break
        i += size
    return out


async def _binary_insert(
    chain: List[Any], item: Any, stop: int, comparator: Comparator
) -> None:
    """Insert ``item`` into ``chain[:stop]`` by binary search."""
    left, right = 0, stop
    while left < right:
        mid = (left + right) // 2
        # 1 means chain[mid] is preferred, so ``item`` belongs below it
        if await call_comparator(comparator, (item, chain[mid])):
            right = mid
        else:
            left = mid + 1
    chain.insert(left, item)


async def merge_insertion_sort(items: Sequence[Any], comparator: Comparator) -> List[Any]:
    """Sort ``items`` with as few comparator calls as possible.

    The comparator is expected to answer consistently with some total
    order.  The returned list ascends from the least to the most preferred
    item, matching the order of :func:`compare_all_sort`.  Comparator
    exceptions propagate unchanged.
    """
    items = list(items)
    ensure_unique(items)
    if len(items) <= 1:
        return items

    # Step 1: pair up the elements and order each pair as (loser, winner)
    pairs: List[Tuple[Any, Any]] = []
    leftover: Optional[Any] = None
    has_leftover = False
    for i in range(0, len(items), 2):
        if i + 1 < len(items):
            a, b = items[i], items[i + 1]
            pairs.append((a, b) if await call_comparator(comparator, (a, b)) else (b, a))
        else:
            leftover = items[i]
            has_leftover = True

    # Step 2: recursively sort the winners into the main chain
    winners = await merge_insertion_sort([winner for _, winner in pairs], comparator)
    loser_of: Dict[Any, Any] = {winner: loser for loser, winner in pairs}

    # Step 3: the first winner's loser is below everything in the chain
    chain = [loser_of[winners[0]]] + winners

    # Step 4: insert the remaining losers (and the leftover) group by group;
    # each loser only needs searching below its own winner
    pending: List[Tuple[Any, Optional[Any]]] = [(loser_of[w], w) for w in winners[1:]]
    if has_leftover:
        pending.append((leftover, None))
    for item, bound in make_merge_insertion_groups(pending):
        stop = len(chain) if bound is None else chain.index(bound)
        await _binary_insert(chain, item, stop, comparator)

    logger.debug("Merge-insertion sorted %d items", len(items))
    return chain
