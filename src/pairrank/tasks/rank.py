"""
rank.py
~~~~~~~

End-to-end ranking of a list of items with a pairwise comparator.

Two strategies are available:

* ``"compare_all"`` asks about every pair, scores items by their number of
  wins and reports ties.  Ties are then broken in rounds with
  :func:`break_ties`, which only revisits the tied items.  A round that
  leaves exactly the same items tied as before stops the loop, because a
  deterministic comparator would keep answering the same way.
* ``"merge_insertion"`` uses the Ford-Johnson sort.  It needs far fewer
  comparisons but assumes the comparator is consistent; its result has no
  ties.

Either way the result is a DataFrame with the most preferred item first.
"""

from __future__ import annotations

import inspect
import os
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Sequence, Union

import pandas as pd
from tqdm.auto import tqdm

from ..core.errors import InvalidArgumentError
from ..utils.combinatorics import compare_all_comparisons
from ..utils.comparators import Comparator, CountingComparator
from ..utils.formatting import results_to_frame
from ..utils.logging import get_logger
from .break_ties import break_ties, tied_item_sets
from .compare_all import compare_all_sort
from .merge_insertion import merge_insertion_max_comparisons, merge_insertion_sort
from .scores import RankedEntry, RankedResults, ensure_unique, find_tie_groups

logger = get_logger(__name__)

METHODS = ("compare_all", "merge_insertion")

ConfirmTieBreak = Callable[[RankedResults], Union[bool, Awaitable[bool]]]


@dataclass
class RankConfig:
    """User-visible configuration for :class:`Rank`.

    Parameters
    ----------
    method:
        ``"compare_all"`` (exhaustive, tie-aware) or ``"merge_insertion"``
        (fewest comparisons).  Hyphens are accepted in place of underscores.
    break_ties:
        Whether to re-rank tied items after an exhaustive ranking.
    max_tie_rounds:
        Upper bound on tie-breaking rounds; ``None`` keeps going until no
        ties remain or a round makes no progress.
    save_dir:
        Directory into which the result CSV is written.  Nothing is saved
        when ``None``.
    file_name:
        Name of the CSV written inside ``save_dir``.
    show_progress:
        Display a tqdm progress bar counting comparisons.
    """

    method: str = "compare_all"
    break_ties: bool = True
    max_tie_rounds: Optional[int] = 3
    save_dir: Optional[str] = None
    file_name: str = "rankings.csv"
    show_progress: bool = False

    def __post_init__(self) -> None:
        self.method = str(self.method).strip().lower().replace("-", "_")
        if self.method not in METHODS:
            raise InvalidArgumentError(
                f"method must be one of {', '.join(METHODS)}, got {self.method!r}"
            )
        if self.max_tie_rounds is not None and self.max_tie_rounds < 0:
            raise InvalidArgumentError("max_tie_rounds must be zero or more")
        if self.save_dir is not None:
            self.save_dir = os.path.expandvars(os.path.expanduser(self.save_dir))


class Rank:
    """Rank items with a pairwise comparator and return a DataFrame."""

    def __init__(self, cfg: Optional[RankConfig] = None) -> None:
        self.cfg = cfg or RankConfig()
        self.last_comparisons = 0
        self.last_results: RankedResults = []

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _expected_comparisons(self, n: int) -> int:
        if self.cfg.method == "merge_insertion":
            return merge_insertion_max_comparisons(n)
        return compare_all_comparisons(n)

    @staticmethod
    async def _confirm(confirm: Optional[ConfirmTieBreak], results: RankedResults) -> bool:
        if confirm is None:
            return True
        answer = confirm(results)
        if inspect.isawaitable(answer):
            answer = await answer
        return bool(answer)

    async def _rank_compare_all(
        self,
        items: Sequence[Any],
        comparator: Comparator,
        confirm_tie_break: Optional[ConfirmTieBreak],
    ) -> RankedResults:
        results = await compare_all_sort(items, comparator)
        if not self.cfg.break_ties:
            return results
        rounds = 0
        while find_tie_groups(results):
            if self.cfg.max_tie_rounds is not None and rounds >= self.cfg.max_tie_rounds:
                logger.info("Stopping after %d tie-breaking round(s) with ties left", rounds)
                break
            if not await self._confirm(confirm_tie_break, results):
                break
            before = tied_item_sets(results)
            results = await break_ties(results, comparator)
            rounds += 1
            if find_tie_groups(results) and tied_item_sets(results) == before:
                logger.warning(
                    "Tie-breaking round %d left the same items tied; the comparator "
                    "is not transitive for them, so further rounds would not help.",
                    rounds,
                )
                break
        return results

    @staticmethod
    async def _rank_merge_insertion(
        items: Sequence[Any], comparator: Comparator
    ) -> RankedResults:
        ordered = await merge_insertion_sort(items, comparator)
        return [RankedEntry(item, position) for position, item in enumerate(ordered)]

    def _save(self, df: pd.DataFrame) -> None:
        if self.cfg.save_dir is None:
            return
        os.makedirs(self.cfg.save_dir, exist_ok=True)
        path = os.path.join(self.cfg.save_dir, self.cfg.file_name)
        df.to_csv(path, index=False)
        logger.info("Saved rankings to %s", path)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    async def run(
        self,
        items: Sequence[Any],
        comparator: Comparator,
        *,
        confirm_tie_break: Optional[ConfirmTieBreak] = None,
    ) -> pd.DataFrame:
        """Rank ``items`` and return a DataFrame, most preferred first.

        ``confirm_tie_break`` is consulted with the current results before
        each tie-breaking round; returning ``False`` keeps the ties.
        """

        items = list(items)
        ensure_unique(items)
        bar = tqdm(
            total=self._expected_comparisons(len(items)),
            desc="Comparisons",
            disable=not self.cfg.show_progress,
            dynamic_ncols=True,
        )
        counter = CountingComparator(comparator, on_call=lambda _: bar.update(1))
        try:
            if self.cfg.method == "merge_insertion":
                results = await self._rank_merge_insertion(items, counter)
            else:
                results = await self._rank_compare_all(items, counter, confirm_tie_break)
        finally:
            bar.close()
        self.last_comparisons = counter.calls
        self.last_results = results
        logger.info(
            "Ranked %d items with %d comparisons (%s)",
            len(items),
            counter.calls,
            self.cfg.method,
        )
        df = results_to_frame(results)
        self._save(df)
        return df
