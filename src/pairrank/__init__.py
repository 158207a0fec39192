"""pairrank: rank items by asking which of two is better."""

from importlib.metadata import PackageNotFoundError, version as _v

from . import tasks as _tasks
from .api import rank, rank_items
from .utils import (
    combinations2,
    compare_all_comparisons,
    permutations,
    order_comparator,
    mapping_comparator,
    CheckedComparator,
    get_logger,
    set_log_level,
)
from .core.errors import DuplicateItemsError, InvalidArgumentError, PairRankError

try:
    __version__ = _v("pairrank")
except PackageNotFoundError:  # pragma: no cover - package not installed
    from ._version import __version__

__all__ = list(_tasks.__all__) + [
    "rank",
    "rank_items",
    "combinations2",
    "compare_all_comparisons",
    "permutations",
    "order_comparator",
    "mapping_comparator",
    "CheckedComparator",
    "get_logger",
    "set_log_level",
    "DuplicateItemsError",
    "InvalidArgumentError",
    "PairRankError",
]


def __getattr__(name: str):
    if name in _tasks.__all__:
        return getattr(_tasks, name)
    raise AttributeError(name)
