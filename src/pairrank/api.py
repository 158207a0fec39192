from typing import Any, Optional, Sequence

import pandas as pd

from .tasks.compare import CompareConfig, LLMComparator
from .tasks.rank import ConfirmTieBreak, Rank, RankConfig
from .utils.comparators import Comparator


async def rank_items(
    items: Sequence[Any],
    comparator: Comparator,
    *,
    method: str = "compare_all",
    break_ties: bool = True,
    max_tie_rounds: Optional[int] = 3,
    save_dir: Optional[str] = None,
    file_name: str = "rankings.csv",
    show_progress: bool = False,
    confirm_tie_break: Optional[ConfirmTieBreak] = None,
) -> pd.DataFrame:
    """Convenience wrapper for :class:`pairrank.tasks.Rank`."""
    cfg = RankConfig(
        method=method,
        break_ties=break_ties,
        max_tie_rounds=max_tie_rounds,
        save_dir=save_dir,
        file_name=file_name,
        show_progress=show_progress,
    )
    return await Rank(cfg).run(items, comparator, confirm_tie_break=confirm_tie_break)


async def rank(
    df: pd.DataFrame,
    column_name: str,
    *,
    comparator: Optional[Comparator] = None,
    criterion: Optional[str] = None,
    additional_instructions: Optional[str] = None,
    model: str = "gpt-5-mini",
    use_dummy: bool = False,
    method: str = "compare_all",
    break_ties: bool = True,
    max_tie_rounds: Optional[int] = 3,
    save_dir: Optional[str] = None,
    file_name: str = "rankings.csv",
    show_progress: bool = False,
    template_path: Optional[str] = None,
    **cfg_kwargs: Any,
) -> pd.DataFrame:
    """Rank the distinct values of ``df[column_name]``.

    Without an explicit ``comparator`` an :class:`LLMComparator` is built
    from ``criterion``, ``model`` and any extra :class:`CompareConfig`
    fields passed in ``cfg_kwargs``.  Missing values are skipped and the
    ranking columns are merged back onto ``df``.
    """
    values = df[column_name].dropna().astype(str)
    skipped = int(df[column_name].isna().sum())
    if skipped:
        print(f"Skipping {skipped} rows with NaN in {column_name}")
    items = list(dict.fromkeys(values.tolist()))
    if comparator is None:
        compare_cfg = CompareConfig(
            model=model,
            criterion=criterion,
            additional_instructions=additional_instructions,
            use_dummy=use_dummy,
            **cfg_kwargs,
        )
        comparator = LLMComparator(compare_cfg, template_path=template_path)
    ranked = await rank_items(
        items,
        comparator,
        method=method,
        break_ties=break_ties,
        max_tie_rounds=max_tie_rounds,
        save_dir=save_dir,
        file_name=file_name,
        show_progress=show_progress,
    )
    merged = df.copy()
    key = merged[column_name].where(merged[column_name].isna(), merged[column_name].astype(str))
    lookup = ranked.set_index("identifier")
    for col in ("score", "rank", "tied"):
        merged[col] = key.map(lookup[col])
    return merged
