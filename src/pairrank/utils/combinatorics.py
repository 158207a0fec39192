"""Lazy enumeration helpers used by the ranking algorithms."""

from __future__ import annotations

from typing import Iterator, List, Sequence, Tuple, TypeVar

from ..core.errors import InvalidArgumentError

T = TypeVar("T")


def combinations2(items: Sequence[T]) -> Iterator[Tuple[T, T]]:
    """Yield every unordered pair of ``items`` in row-major order.

    The smaller index is fixed while the larger one advances, so for
    ``[A, B, C]`` the pairs are ``(A, B)``, ``(A, C)``, ``(B, C)``.
    """

    n = len(items)
    for i in range(n):
        for j in range(i + 1, n):
            yield items[i], items[j]


def compare_all_comparisons(n: int) -> int:
    """Number of comparisons :func:`compare_all_sort` performs for ``n`` items."""

    if n < 0:
        raise InvalidArgumentError("must specify zero or more items")
    return n * (n - 1) // 2


def permutations(items: Sequence[T]) -> Iterator[List[T]]:
    """Yield all orderings of ``items`` using the iterative Heap's algorithm.

    Each yielded list is a fresh copy.  The emission order is the one Heap's
    algorithm produces (one swap per step), not lexicographic.
    """

    a = list(items)
    c = [0] * len(a)
    yield list(a)
    i = 1
    while i < len(a):
        if c[i] < i:
            if i % 2 == 0:
                a[0], a[i] = a[i], a[0]
            else:
                a[c[i]], a[i] = a[i], a[c[i]]
            yield list(a)
            c[i] += 1
            i = 1
        else:
            c[i] = 0
            i += 1
