"""Turn ranked results into DataFrames and plain text listings."""

from __future__ import annotations

from typing import List, Sequence

import pandas as pd

from ..tasks.scores import RankedEntry, sort_results


def results_to_frame(results: Sequence[RankedEntry]) -> pd.DataFrame:
    """Return ``results`` as a DataFrame, most preferred item first.

    Columns are ``identifier``, ``score``, ``rank`` (dense and 1-based, tied
    items share a rank) and ``tied``.
    """

    ordered = [RankedEntry(entry.item, entry.score) for entry in results]
    sort_results(ordered, "desc")
    df = pd.DataFrame(
        {
            "identifier": pd.Series([entry.item for entry in ordered], dtype=object),
            "score": pd.Series([entry.score for entry in ordered], dtype="int64"),
        }
    )
    df["rank"] = df["score"].rank(method="dense", ascending=False).astype("int64")
    df["tied"] = df["score"].duplicated(keep=False)
    return df


def format_results_text(results: Sequence[RankedEntry]) -> str:
    """Render a numbered listing, most preferred first.

    Tied items are listed together under a single ``Tied:`` entry::

        1. Carol
        2. Tied:
           - Alice
           - Bob
    """

    ordered = [RankedEntry(entry.item, entry.score) for entry in results]
    sort_results(ordered, "desc")
    lines: List[str] = []
    counter = 1
    i = 0
    while i < len(ordered):
        j = i
        while j < len(ordered) and ordered[j].score == ordered[i].score:
            j += 1
        if j - i > 1:
            lines.append(f"{counter}. Tied:")
            lines.extend(f"   - {entry.item}" for entry in ordered[i:j])
        else:
            lines.append(f"{counter}. {ordered[i].item}")
        counter += 1
        i = j
    return "\n".join(lines) + ("\n" if lines else "")
