"""Ranking algorithms and tasks for pairrank."""

from importlib import import_module
from typing import List

_lazy_imports = {
    "RankedEntry": ".scores",
    "RankedResults": ".scores",
    "as_ranked": ".scores",
    "as_pairs": ".scores",
    "ensure_unique": ".scores",
    "sort_results": ".scores",
    "normalize_scores": ".scores",
    "find_tie_groups": ".scores",
    "compare_all_sort": ".compare_all",
    "break_ties": ".break_ties",
    "merge_insertion_sort": ".merge_insertion",
    "merge_insertion_max_comparisons": ".merge_insertion",
    "merge_insertion_group_sizes": ".merge_insertion",
    "make_merge_insertion_groups": ".merge_insertion",
    "Rank": ".rank",
    "RankConfig": ".rank",
    "LLMComparator": ".compare",
    "CompareConfig": ".compare",
}

__all__ = list(_lazy_imports.keys())


def __getattr__(name: str):
    if name in _lazy_imports:
        module = import_module(_lazy_imports[name], __name__)
        return getattr(module, name)
    raise AttributeError(name)


def __dir__() -> List[str]:
    return __all__
