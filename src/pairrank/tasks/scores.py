"""Ranked results and the in-place helpers that order and normalise them."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, List, Sequence, Tuple

from ..core.errors import DuplicateItemsError, InvalidArgumentError


@dataclass
class RankedEntry:
    """One ``(item, score)`` pair of a ranked result set.

    Scores are non-negative integers; after normalisation they are dense and
    start at zero, and equal scores mean the items are tied.
    """

    item: Any
    score: int = 0

    def __iter__(self) -> Iterator[Any]:
        yield self.item
        yield self.score


RankedResults = List[RankedEntry]


def as_ranked(pairs: Iterable[Tuple[Any, int]]) -> RankedResults:
    """Build fresh entries from ``(item, score)`` pairs."""
    return [RankedEntry(item, score) for item, score in pairs]


def as_pairs(results: Iterable[RankedEntry]) -> List[Tuple[Any, int]]:
    return [(entry.item, entry.score) for entry in results]


def ensure_unique(items: Iterable[Any]) -> None:
    """Raise :class:`DuplicateItemsError` if ``items`` repeats an identifier."""
    counts = Counter(items)
    duplicates = [item for item, count in counts.items() if count > 1]
    if duplicates:
        raise DuplicateItemsError(duplicates)


def sort_results(results: RankedResults, order: str = "asc") -> None:
    """Sort ``results`` in place, first by score, then by item.

    ``order`` only affects the score; items with the same score always
    appear in ascending item order so the output is deterministic.
    """
    if order == "asc":
        results.sort(key=lambda e: (e.score, e.item))
    elif order == "desc":
        results.sort(key=lambda e: (-e.score, e.item))
    else:
        raise InvalidArgumentError("order must be 'asc' or 'desc'")


def normalize_scores(results: RankedResults) -> None:
    """Renumber scores in place so they start at zero and have no gaps.

    ``results`` **must** already be sorted ascending by score.  Ties are kept:
    entries whose score equals their predecessor's share its new value.
    """
    prev_score = None
    cur_score = -1
    for entry in results:
        if entry.score != prev_score:
            prev_score = entry.score
            cur_score += 1
        entry.score = cur_score


def find_tie_groups(results: Sequence[RankedEntry]) -> List[Tuple[int, int]]:
    """Find runs of more than one identical score.

    ``results`` **must** already be sorted by score.  Returns ``(start, stop)``
    index ranges (start inclusive, stop exclusive) in ascending order.
    """
    groups: List[Tuple[int, int]] = []
    start = 0
    for i in range(1, len(results) + 1):
        if i == len(results) or results[i].score != results[start].score:
            if i - start > 1:
                groups.append((start, i))
            start = i
    return groups
